"""Structlog implementation of the ExperimentObserver port."""

import structlog


class StructlogExperimentObserver:
    """Delegates experiment domain events to structlog.

    Satisfies the ExperimentObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def experiment_started(
        self,
        experiment_id: str,
        name: str,
        total_items: int,
        num_runs: int,
        evaluators: list[str],
    ) -> None:
        self._log.info(
            "experiment.started",
            experiment_id=experiment_id,
            name=name,
            total_items=total_items,
            num_runs=num_runs,
            evaluators=evaluators,
        )

    def experiment_completed(
        self, experiment_id: str, name: str, total_items: int, duration_ms: float
    ) -> None:
        self._log.info(
            "experiment.completed",
            experiment_id=experiment_id,
            name=name,
            total_items=total_items,
            duration_ms=round(duration_ms, 1),
        )

    def experiment_low_score(
        self, experiment_id: str, evaluator: str, avg: float
    ) -> None:
        self._log.warning(
            "experiment.low_score",
            experiment_id=experiment_id,
            evaluator=evaluator,
            avg=round(avg, 3),
        )

    def experiment_item_errors(self, experiment_id: str, error_count: int) -> None:
        self._log.warning(
            "experiment.item_errors",
            experiment_id=experiment_id,
            error_count=error_count,
        )

    def experiment_thresholds_checked(
        self, experiment_id: str, passed: bool, violations: int
    ) -> None:
        log = self._log.info if passed else self._log.error
        log(
            "experiment.thresholds_checked",
            experiment_id=experiment_id,
            passed=passed,
            violations=violations,
        )

    def experiment_report_saved(self, experiment_id: str, location: str) -> None:
        self._log.info(
            "experiment.report_saved", experiment_id=experiment_id, location=location
        )

    def cost_model_unknown(self, model: str, fallback_model: str) -> None:
        self._log.warning(
            "experiment.cost_model_unknown", model=model, fallback_model=fallback_model
        )
