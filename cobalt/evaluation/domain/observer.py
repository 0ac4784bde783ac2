"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class RunnerObserver(Protocol):
    """Observer port emitting structured events while the runner executes units.

    Implementations may log to structlog, record for tests, or render progress.
    """

    def runner_started(
        self,
        total_items: int,
        num_runs: int,
        max_concurrent: int,
        total_units: int,
    ) -> None: ...

    def runner_completed(
        self, total_units: int, failed_units: int, elapsed_seconds: float
    ) -> None: ...

    def unit_started(self, item_index: int, run_index: int) -> None: ...

    def unit_completed(
        self, item_index: int, run_index: int, latency_ms: float
    ) -> None: ...

    def unit_failed(self, item_index: int, run_index: int, reason: str) -> None: ...

    def unit_timed_out(
        self, item_index: int, run_index: int, timeout_seconds: float
    ) -> None: ...

    def unit_progress(
        self, item_index: int, run_index: int, completed: int, total: int
    ) -> None: ...

    def progress_callback_failed(
        self, item_index: int, run_index: int, reason: str
    ) -> None: ...
