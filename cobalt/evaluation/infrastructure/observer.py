"""StructlogRunnerObserver — production observer that delegates to structlog."""

import structlog


class StructlogRunnerObserver:
    """Logs runner domain events to structlog.

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def runner_started(
        self,
        total_items: int,
        num_runs: int,
        max_concurrent: int,
        total_units: int,
    ) -> None:
        self._log.info(
            "runner.started",
            total_items=total_items,
            num_runs=num_runs,
            max_concurrent=max_concurrent,
            total_units=total_units,
        )

    def runner_completed(
        self, total_units: int, failed_units: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "runner.completed",
            total_units=total_units,
            failed_units=failed_units,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def unit_started(self, item_index: int, run_index: int) -> None:
        self._log.debug("runner.unit.started", item_index=item_index, run_index=run_index)

    def unit_completed(
        self, item_index: int, run_index: int, latency_ms: float
    ) -> None:
        self._log.debug(
            "runner.unit.completed",
            item_index=item_index,
            run_index=run_index,
            latency_ms=round(latency_ms, 1),
        )

    def unit_failed(self, item_index: int, run_index: int, reason: str) -> None:
        self._log.error(
            "runner.unit.failed",
            item_index=item_index,
            run_index=run_index,
            reason=reason,
        )

    def unit_timed_out(
        self, item_index: int, run_index: int, timeout_seconds: float
    ) -> None:
        self._log.warning(
            "runner.unit.timed_out",
            item_index=item_index,
            run_index=run_index,
            timeout_seconds=timeout_seconds,
        )

    def unit_progress(
        self, item_index: int, run_index: int, completed: int, total: int
    ) -> None:
        self._log.info(
            "runner.progress",
            item_index=item_index,
            run_index=run_index,
            completed=completed,
            total=total,
            percent=round(100.0 * completed / total, 1) if total else 0.0,
        )

    def progress_callback_failed(
        self, item_index: int, run_index: int, reason: str
    ) -> None:
        self._log.warning(
            "runner.progress_callback.failed",
            item_index=item_index,
            run_index=run_index,
            reason=reason,
        )
