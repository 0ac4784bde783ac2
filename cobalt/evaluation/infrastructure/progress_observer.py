"""ProgressRunnerObserver — renders per-run Rich progress bars to stderr."""

from __future__ import annotations

import sys

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

_OVERALL = "Overall"

# Rich markup colors cycled across run rows.
_RUN_COLORS: list[str] = [
    "cyan",
    "green",
    "yellow",
    "magenta",
    "blue",
]


class _CountsColumn(ProgressColumn):
    """Renders done+inflight/total with colors matching the bar segments."""

    def render(self, task: Task) -> Text:
        done = int(task.fields.get("done", 0))
        inflight = int(task.fields.get("inflight", 0))
        total = int(task.total or 0)
        return Text.assemble(
            (str(done), "bright_green"),
            ("+", "dim white"),
            (str(inflight), "grey50"),
            ("/", "dim white"),
            (str(total), "default"),
        )


class _ConditionalEtaColumn(ProgressColumn):
    """Shows ETA for run rows only, blank for the Overall row.

    Runs proceed in parallel, so the naive Overall ETA undershoots the
    slowest run.
    """

    def __init__(self) -> None:
        super().__init__()
        self._remaining = TimeRemainingColumn()

    def render(self, task: Task) -> Text:
        if task.fields.get("is_overall", False):
            return Text("")
        result = self._remaining.render(task)
        if isinstance(result, Text):
            return result
        return Text(str(result))


class _ThreeSegmentBarColumn(ProgressColumn):
    """ProgressColumn that renders three segments: done, in-flight, remaining."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        bar_width = self.bar_width or 40
        total = task.total or 0
        if total > 0:
            done_cells = int(task.completed / total * bar_width)
            inflight = int(task.fields.get("inflight", 0))
            # Capped so done + inflight never exceeds the bar.
            inflight_cells = min(
                int(inflight / total * bar_width),
                bar_width - done_cells,
            )
        else:
            done_cells = 0
            inflight_cells = 0
        remaining_cells = bar_width - done_cells - inflight_cells

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * inflight_cells, style="grey50")
        result.append("░" * remaining_cells, style="dim white")
        return result


def _make_progress(console: Console) -> Progress:
    """Create a Progress instance with the standard column layout."""
    return Progress(
        TextColumn("{task.description}"),
        _ThreeSegmentBarColumn(bar_width=40),
        _CountsColumn(),
        TimeElapsedColumn(),
        TextColumn("{task.fields[eta_label]}"),
        _ConditionalEtaColumn(),
        TextColumn("{task.fields[rate]}"),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


def _run_key(run_index: int) -> str:
    return f"Run {run_index + 1}"


class ProgressRunnerObserver:
    """Renders one Rich progress row per run index plus an Overall row on stderr.

    Each run row counts the N units of that trial. Labels are colored when
    stderr is a TTY.

    Only runner_started, unit_started, unit_progress and runner_completed
    produce output; all other events are no-ops.

    Pass ``disabled=True`` to keep the counters but suppress all terminal
    output (useful in tests).

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done: dict[str, int] = {}
        self._inflight: dict[str, int] = {}
        self._total: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._overall_progress: Progress | None = None
        self._run_progress: Progress | None = None
        self._live: Live | None = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._done = {}
        self._inflight = {}
        self._total = {}
        self._task_ids = {}
        self._overall_progress = None
        self._run_progress = None
        self._live = None

    def _make_desc(self, name: str, index: int, pad_width: int) -> str:
        """Build a description string for a row, with optional color."""
        if name == _OVERALL:
            return f"[bold]{_OVERALL:<{pad_width}}[/bold]"
        if sys.stderr.isatty():
            color = _RUN_COLORS[index % len(_RUN_COLORS)]
            return f"[{color}]{name:<{pad_width}}[/{color}]"
        return f"{name:<{pad_width}}"

    def _progress_for(self, key: str) -> Progress | None:
        if key == _OVERALL:
            return self._overall_progress
        return self._run_progress

    def _rate_str(self, key: str) -> str:
        """Compute a rate string like '2.5s/unit' or '--s/unit'."""
        progress = self._progress_for(key=key)
        task_id = self._task_ids.get(key)
        if progress is None or task_id is None:
            return "--s/unit"
        task = progress.tasks[task_id]
        elapsed = task.elapsed
        if elapsed is not None and elapsed > 0 and task.completed > 0:
            return f"{elapsed / task.completed:.1f}s/unit"
        return "--s/unit"

    def _update_task(self, key: str) -> None:
        """Push current _done/_inflight state into the Rich task."""
        progress = self._progress_for(key=key)
        if progress is None or key not in self._task_ids:
            return
        done = self._done.get(key, 0)
        progress.update(
            self._task_ids[key],
            completed=done,
            inflight=self._inflight.get(key, 0),
            done=done,
            rate=self._rate_str(key=key),
        )

    # ------------------------------------------------------------------
    # Read-only state, for tests
    # ------------------------------------------------------------------

    def done(self, key: str) -> int:
        return self._done.get(key, 0)

    def inflight(self, key: str) -> int:
        return self._inflight.get(key, 0)

    def total(self, key: str) -> int:
        return self._total.get(key, 0)

    # ------------------------------------------------------------------
    # Observer events
    # ------------------------------------------------------------------

    def runner_started(
        self,
        total_items: int,
        num_runs: int,
        max_concurrent: int,
        total_units: int,
    ) -> None:
        self._reset()

        run_keys = [_run_key(run_index) for run_index in range(num_runs)]
        for key in run_keys:
            self._total[key] = total_items
            self._done[key] = 0
            self._inflight[key] = 0
        self._total[_OVERALL] = total_units
        self._done[_OVERALL] = 0
        self._inflight[_OVERALL] = 0

        if self._disabled:
            return

        pad_width = max(len(key) for key in [*run_keys, _OVERALL])
        console = Console(stderr=True)

        legend = Text.assemble(
            "  Legend:  ",
            ("█", "bright_green"),
            " done  ",
            ("▒", "grey50"),
            " in-flight  ",
            ("░", "dim white"),
            " remaining",
        )

        self._overall_progress = _make_progress(console=console)
        self._run_progress = _make_progress(console=console)

        self._task_ids[_OVERALL] = self._overall_progress.add_task(
            description=self._make_desc(name=_OVERALL, index=0, pad_width=pad_width),
            total=float(total_units),
            inflight=0,
            done=0,
            rate="--s/unit",
            is_overall=True,
            eta_label="",
        )
        for index, key in enumerate(run_keys):
            self._task_ids[key] = self._run_progress.add_task(
                description=self._make_desc(name=key, index=index, pad_width=pad_width),
                total=float(total_items),
                inflight=0,
                done=0,
                rate="--s/unit",
                is_overall=False,
                eta_label="eta",
            )

        renderable = Group(
            self._overall_progress,
            Text(""),
            self._run_progress,
            Text(""),
            legend,
        )
        self._live = Live(renderable, console=console, refresh_per_second=10)
        self._live.start()

    def runner_completed(
        self, total_units: int, failed_units: int, elapsed_seconds: float
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._reset()

    def unit_started(self, item_index: int, run_index: int) -> None:
        key = _run_key(run_index)
        for name in (key, _OVERALL):
            if name in self._inflight:
                self._inflight[name] += 1

        if not self._disabled:
            self._update_task(key=key)
            self._update_task(key=_OVERALL)

    def unit_completed(
        self, item_index: int, run_index: int, latency_ms: float
    ) -> None:
        pass

    def unit_failed(self, item_index: int, run_index: int, reason: str) -> None:
        pass

    def unit_timed_out(
        self, item_index: int, run_index: int, timeout_seconds: float
    ) -> None:
        pass

    def progress_callback_failed(
        self, item_index: int, run_index: int, reason: str
    ) -> None:
        pass

    def unit_progress(
        self, item_index: int, run_index: int, completed: int, total: int
    ) -> None:
        key = _run_key(run_index)
        for name in (key, _OVERALL):
            if name in self._done:
                self._done[name] += 1
                self._inflight[name] = max(0, self._inflight[name] - 1)

        if not self._disabled:
            self._update_task(key=key)
            self._update_task(key=_OVERALL)
