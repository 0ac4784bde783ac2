"""ExperimentOrchestrator — composition root for one experiment run."""

import os
import time
import uuid
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from cobalt.cache.domain.cache import ScoringCache
from cobalt.ci.application.gate import validate_thresholds
from cobalt.ci.domain.threshold import CIResult
from cobalt.config.domain.config import CobaltConfig
from cobalt.evaluation.application.aggregator import build_summary
from cobalt.evaluation.application.runner import ExperimentRunner, RunnerOptions
from cobalt.evaluation.domain.agent import AgentFn
from cobalt.evaluation.domain.cost import CostEstimator
from cobalt.evaluation.domain.progress import ProgressCallback
from cobalt.evaluation.domain.result import ItemResult
from cobalt.evaluation.domain.summary import ExperimentSummary
from cobalt.evaluator.application.evaluator import Evaluator
from cobalt.evaluator.domain.observer import EvaluatorObserver
from cobalt.evaluator.domain.spec import EvaluatorSpec, LLMJudgeSpec
from cobalt.evaluator.infrastructure.registry import EvaluatorRegistry
from cobalt.experiment.domain.observer import ExperimentObserver
from cobalt.experiment.domain.report import (
    ExperimentOptions,
    ExperimentReport,
    ReportConfig,
)
from cobalt.experiment.domain.store import ReportStore
from cobalt.experiment.infrastructure.errors import (
    DuplicateEvaluatorNameError,
    EmptyDatasetError,
    UnknownEvaluatorTypeError,
)

LOW_SCORE_THRESHOLD = 0.5

_REPORT_ID_LENGTH = 12


class ExperimentOrchestrator:
    """Validates, runs, summarizes, gates and stores one experiment.

    Pre-flight problems (empty dataset, duplicate evaluator names, unknown
    evaluator types) raise before any unit is scheduled. Once running, unit
    and evaluator failures are data in the report. Errors from the report
    store propagate.
    """

    def __init__(
        self,
        config: CobaltConfig,
        registry: EvaluatorRegistry,
        runner: ExperimentRunner,
        observer: ExperimentObserver,
        evaluator_observer: EvaluatorObserver,
        cache: ScoringCache | None = None,
        report_store: ReportStore | None = None,
        cost_estimator: CostEstimator | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._runner = runner
        self._observer = observer
        self._evaluator_observer = evaluator_observer
        self._cache = cache
        self._report_store = report_store
        self._cost_estimator = cost_estimator

    async def run(
        self,
        name: str,
        dataset: Sequence[Mapping[str, Any]],
        agent: AgentFn,
        options: ExperimentOptions,
        on_progress: ProgressCallback | None = None,
    ) -> ExperimentReport:
        """Run the experiment end to end and return its report.

        Raises:
            EmptyDatasetError: if the dataset has no items.
            DuplicateEvaluatorNameError: if evaluator names are not unique.
            UnknownEvaluatorTypeError: listing every unregistered evaluator type.
        """
        experiment_name = options.name or name
        items = list(dataset)
        self._preflight(name=experiment_name, items=items, specs=options.evaluators)

        specs = [self._with_defaults(spec) for spec in options.evaluators]
        concurrency = options.concurrency or self._config.concurrency
        timeout_seconds = options.timeout_seconds or self._config.timeout_seconds
        experiment_id = uuid.uuid4().hex[:_REPORT_ID_LENGTH]
        timestamp = datetime.now(UTC).isoformat()

        self._observer.experiment_started(
            experiment_id=experiment_id,
            name=experiment_name,
            total_items=len(items),
            num_runs=options.runs,
            evaluators=[spec.name for spec in specs],
        )

        if self._cache is not None:
            self._cache.load()

        evaluators = [
            Evaluator(
                spec=spec,
                registry=self._registry,
                observer=self._evaluator_observer,
                cache=self._cache,
            )
            for spec in specs
        ]
        runner_options = RunnerOptions(
            concurrency=concurrency,
            timeout_seconds=timeout_seconds,
            evaluators=evaluators,
            runs=options.runs,
            api_key=os.environ.get(self._config.judge.api_key_env),
        )

        started_at = time.monotonic()
        results = await self._runner.run(
            items=items, agent=agent, options=runner_options, on_progress=on_progress
        )
        duration_ms = (time.monotonic() - started_at) * 1000

        summary = build_summary(
            results=results,
            total_duration_ms=duration_ms,
            cost_estimator=self._cost_estimator,
        )
        ci_status = self._check_thresholds(
            experiment_id=experiment_id,
            summary=summary,
            results=results,
            options=options,
        )
        self._report_anomalies(
            experiment_id=experiment_id, summary=summary, results=results
        )

        if self._cache is not None:
            self._cache.flush()

        report = ExperimentReport(
            id=experiment_id,
            name=experiment_name,
            timestamp=timestamp,
            tags=list(options.tags),
            config=ReportConfig(
                runs=options.runs,
                concurrency=concurrency,
                timeout_seconds=timeout_seconds,
                evaluators=[spec.name for spec in specs],
            ),
            summary=summary,
            items=results,
            ci_status=ci_status,
        )

        if self._report_store is not None:
            location = self._report_store.save(report)
            self._observer.experiment_report_saved(
                experiment_id=experiment_id, location=location
            )

        self._observer.experiment_completed(
            experiment_id=experiment_id,
            name=experiment_name,
            total_items=len(items),
            duration_ms=duration_ms,
        )
        return report

    def _preflight(
        self,
        name: str,
        items: list[Mapping[str, Any]],
        specs: Sequence[EvaluatorSpec],
    ) -> None:
        if not items:
            raise EmptyDatasetError(name=name)

        duplicates = [
            spec_name
            for spec_name, count in Counter(spec.name for spec in specs).items()
            if count > 1
        ]
        if duplicates:
            raise DuplicateEvaluatorNameError(names=duplicates)

        unknown = list(
            dict.fromkeys(
                spec.type for spec in specs if not self._registry.has(spec.type)
            )
        )
        if unknown:
            raise UnknownEvaluatorTypeError(evaluator_types=unknown)

    def _with_defaults(self, spec: EvaluatorSpec) -> EvaluatorSpec:
        if isinstance(spec, LLMJudgeSpec) and spec.model is None:
            return spec.model_copy(update={"model": self._config.judge.model})
        return spec

    def _check_thresholds(
        self,
        experiment_id: str,
        summary: ExperimentSummary,
        results: list[ItemResult],
        options: ExperimentOptions,
    ) -> CIResult | None:
        thresholds = (
            options.thresholds
            if options.thresholds is not None
            else self._config.thresholds
        )
        if not thresholds and not self._config.ci_mode:
            return None

        ci_status = validate_thresholds(
            summary=summary, items=results, thresholds=thresholds
        )
        self._observer.experiment_thresholds_checked(
            experiment_id=experiment_id,
            passed=ci_status.passed,
            violations=len(ci_status.violations),
        )
        return ci_status

    def _report_anomalies(
        self,
        experiment_id: str,
        summary: ExperimentSummary,
        results: list[ItemResult],
    ) -> None:
        for evaluator, stats in summary.scores.items():
            if stats.avg < LOW_SCORE_THRESHOLD:
                self._observer.experiment_low_score(
                    experiment_id=experiment_id, evaluator=evaluator, avg=stats.avg
                )

        error_count = sum(
            1 for item in results if any(run.error is not None for run in item.runs)
        )
        if error_count:
            self._observer.experiment_item_errors(
                experiment_id=experiment_id, error_count=error_count
            )
