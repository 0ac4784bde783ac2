"""Default wiring: YAML config loading and an ExperimentOrchestrator built from a CobaltConfig."""

from pathlib import Path

from cobalt.cache.domain.cache import ScoringCache
from cobalt.cache.infrastructure.json_store import JsonFileCacheStore
from cobalt.cache.infrastructure.observer import StructlogCacheObserver
from cobalt.config.domain.config import CobaltConfig
from cobalt.config.infrastructure.observer import StructlogConfigObserver
from cobalt.config.infrastructure.yaml_loader import YamlConfigLoader
from cobalt.evaluation.application.runner import ExperimentRunner
from cobalt.evaluation.domain.observer import RunnerObserver
from cobalt.evaluation.infrastructure.composite_observer import CompositeRunnerObserver
from cobalt.evaluation.infrastructure.observer import StructlogRunnerObserver
from cobalt.evaluation.infrastructure.progress_observer import ProgressRunnerObserver
from cobalt.evaluator.infrastructure.builtins import register_builtin_evaluators
from cobalt.evaluator.infrastructure.observer import StructlogEvaluatorObserver
from cobalt.evaluator.infrastructure.plugin_loader import load_plugins
from cobalt.evaluator.infrastructure.registry import EvaluatorRegistry
from cobalt.experiment.application.orchestrator import ExperimentOrchestrator
from cobalt.experiment.infrastructure.cost import LiteLLMCostEstimator
from cobalt.experiment.infrastructure.json_store import JsonReportStore
from cobalt.experiment.infrastructure.observer import StructlogExperimentObserver

CACHE_FILENAME = "llm-judge-cache.json"


def load_config(path: Path | str) -> CobaltConfig:
    """Load a YAML config file, logging load events through structlog.

    Raises:
        ConfigurationError: if the file is missing, invalid or references unset
            environment variables.
    """
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(Path(path))


def create_orchestrator(
    config: CobaltConfig, show_progress: bool = True
) -> ExperimentOrchestrator:
    """Build an orchestrator with structlog observers, built-in and plugin
    evaluators, a JSON-backed scoring cache and a JSON report store under
    ``config.output_dir``.
    """
    output_dir = Path(config.output_dir)
    evaluator_observer = StructlogEvaluatorObserver()
    experiment_observer = StructlogExperimentObserver()

    registry = EvaluatorRegistry(observer=evaluator_observer)
    register_builtin_evaluators(
        registry=registry,
        judge_temperature=config.judge.temperature,
        judge_model=config.judge.model,
    )
    load_plugins(
        references=config.plugins, registry=registry, observer=evaluator_observer
    )

    runner_observers: list[RunnerObserver] = [StructlogRunnerObserver()]
    if show_progress:
        runner_observers.append(ProgressRunnerObserver())

    cache: ScoringCache | None = None
    if config.cache.enabled:
        cache = ScoringCache(
            observer=StructlogCacheObserver(),
            ttl=config.cache.ttl,
            store=JsonFileCacheStore(path=output_dir / "cache" / CACHE_FILENAME),
            flush_every=config.cache.flush_every,
        )

    return ExperimentOrchestrator(
        config=config,
        registry=registry,
        runner=ExperimentRunner(observer=CompositeRunnerObserver(runner_observers)),
        observer=experiment_observer,
        evaluator_observer=evaluator_observer,
        cache=cache,
        report_store=JsonReportStore(output_dir=output_dir),
        cost_estimator=LiteLLMCostEstimator(observer=experiment_observer),
    )
