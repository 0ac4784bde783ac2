"""CompositeRunnerObserver — fans out all events to a list of observers."""

from cobalt.evaluation.domain.observer import RunnerObserver


class CompositeRunnerObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RunnerObserver]) -> None:
        self._observers = observers

    def runner_started(
        self,
        total_items: int,
        num_runs: int,
        max_concurrent: int,
        total_units: int,
    ) -> None:
        for obs in self._observers:
            obs.runner_started(
                total_items=total_items,
                num_runs=num_runs,
                max_concurrent=max_concurrent,
                total_units=total_units,
            )

    def runner_completed(
        self, total_units: int, failed_units: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.runner_completed(
                total_units=total_units,
                failed_units=failed_units,
                elapsed_seconds=elapsed_seconds,
            )

    def unit_started(self, item_index: int, run_index: int) -> None:
        for obs in self._observers:
            obs.unit_started(item_index=item_index, run_index=run_index)

    def unit_completed(
        self, item_index: int, run_index: int, latency_ms: float
    ) -> None:
        for obs in self._observers:
            obs.unit_completed(
                item_index=item_index, run_index=run_index, latency_ms=latency_ms
            )

    def unit_failed(self, item_index: int, run_index: int, reason: str) -> None:
        for obs in self._observers:
            obs.unit_failed(item_index=item_index, run_index=run_index, reason=reason)

    def unit_timed_out(
        self, item_index: int, run_index: int, timeout_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.unit_timed_out(
                item_index=item_index,
                run_index=run_index,
                timeout_seconds=timeout_seconds,
            )

    def unit_progress(
        self, item_index: int, run_index: int, completed: int, total: int
    ) -> None:
        for obs in self._observers:
            obs.unit_progress(
                item_index=item_index,
                run_index=run_index,
                completed=completed,
                total=total,
            )

    def progress_callback_failed(
        self, item_index: int, run_index: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.progress_callback_failed(
                item_index=item_index, run_index=run_index, reason=reason
            )
