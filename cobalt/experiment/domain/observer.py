"""Observer port for the experiment domain — defines events in domain language."""

from typing import Protocol


class ExperimentObserver(Protocol):
    """Observer port for experiment lifecycle events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def experiment_started(
        self,
        experiment_id: str,
        name: str,
        total_items: int,
        num_runs: int,
        evaluators: list[str],
    ) -> None: ...

    def experiment_completed(
        self, experiment_id: str, name: str, total_items: int, duration_ms: float
    ) -> None: ...

    def experiment_low_score(
        self, experiment_id: str, evaluator: str, avg: float
    ) -> None: ...

    def experiment_item_errors(self, experiment_id: str, error_count: int) -> None: ...

    def experiment_thresholds_checked(
        self, experiment_id: str, passed: bool, violations: int
    ) -> None: ...

    def experiment_report_saved(self, experiment_id: str, location: str) -> None: ...

    def cost_model_unknown(self, model: str, fallback_model: str) -> None: ...
