"""ExperimentRunner — executes the (item x run) work matrix under a concurrency cap."""

import asyncio
import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cobalt.evaluation.application.aggregator import aggregate_runs
from cobalt.evaluation.domain.agent import AgentFn
from cobalt.evaluation.domain.observer import RunnerObserver
from cobalt.evaluation.domain.progress import ProgressCallback, UnitProgress
from cobalt.evaluation.domain.result import AgentOutput, ItemResult, SingleRun
from cobalt.evaluation.infrastructure.errors import (
    AgentInvocationError,
    AgentTimeoutError,
)
from cobalt.evaluator.application.evaluator import Evaluator
from cobalt.evaluator.domain.result import EvalContext, EvalResult


class RunnerOptions(BaseModel, frozen=True):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    concurrency: int = Field(ge=1)
    timeout_seconds: float = Field(gt=0)
    evaluators: list[Evaluator] = Field(default_factory=list)
    runs: int = Field(default=1, ge=1)
    api_key: str | None = None


def _consume_outcome(task: asyncio.Future[Any]) -> None:
    # Abandoned agent tasks must not log "exception was never retrieved".
    if not task.cancelled():
        task.exception()


class ExperimentRunner:
    """Runs every (item, run) unit once and returns one ItemResult per item.

    Units are submitted in dataset order and gated by a semaphore held for the
    whole unit (agent call plus evaluators), so at most ``concurrency`` units
    are in flight. A failing or timed-out unit is recorded and never cancels
    its siblings.

    Timeouts race the agent task against a timer. On expiry the task is
    cancelled but not awaited: an agent that ignores cancellation, or that
    runs blocking work in a thread, keeps running in the background.
    """

    def __init__(self, observer: RunnerObserver) -> None:
        self._observer = observer

    async def run(
        self,
        items: Sequence[Mapping[str, Any]],
        agent: AgentFn,
        options: RunnerOptions,
        on_progress: ProgressCallback | None = None,
    ) -> list[ItemResult]:
        """Execute all N x R units and stitch them into N ItemResults in dataset order."""
        if not items:
            return []

        total_units = len(items) * options.runs
        self._observer.runner_started(
            total_items=len(items),
            num_runs=options.runs,
            max_concurrent=options.concurrency,
            total_units=total_units,
        )
        started_at = time.monotonic()

        # Completion order is arbitrary; each unit owns exactly one slot.
        slots: list[list[SingleRun | None]] = [
            [None] * options.runs for _ in range(len(items))
        ]
        sem = asyncio.Semaphore(options.concurrency)
        completed_count: list[int] = [0]
        progress_lock = asyncio.Lock()

        async with asyncio.TaskGroup() as tg:
            for item_index, item in enumerate(items):
                for run_index in range(options.runs):
                    tg.create_task(
                        self._run_one_unit(
                            sem=sem,
                            item=item,
                            item_index=item_index,
                            run_index=run_index,
                            agent=agent,
                            options=options,
                            slots=slots,
                            total_units=total_units,
                            completed_count=completed_count,
                            progress_lock=progress_lock,
                            on_progress=on_progress,
                        )
                    )

        results: list[ItemResult] = []
        for item_index, item in enumerate(items):
            runs = [run for run in slots[item_index] if run is not None]
            results.append(_stitch(index=item_index, item=item, runs=runs))

        self._observer.runner_completed(
            total_units=total_units,
            failed_units=sum(
                1 for result in results for run in result.runs if run.error is not None
            ),
            elapsed_seconds=time.monotonic() - started_at,
        )
        return results

    async def _run_one_unit(
        self,
        sem: asyncio.Semaphore,
        item: Mapping[str, Any],
        item_index: int,
        run_index: int,
        agent: AgentFn,
        options: RunnerOptions,
        slots: list[list[SingleRun | None]],
        total_units: int,
        completed_count: list[int],
        progress_lock: asyncio.Lock,
        on_progress: ProgressCallback | None,
    ) -> None:
        """Run the agent and then every evaluator for one (item, run) unit."""
        async with sem:
            self._observer.unit_started(item_index=item_index, run_index=run_index)
            started_at = time.monotonic()
            try:
                agent_output = await self._invoke_agent(
                    agent=agent,
                    item=item,
                    item_index=item_index,
                    run_index=run_index,
                    timeout_seconds=options.timeout_seconds,
                )
            except AgentTimeoutError as exc:
                self._observer.unit_timed_out(
                    item_index=item_index,
                    run_index=run_index,
                    timeout_seconds=options.timeout_seconds,
                )
                run = SingleRun(latency_ms=_elapsed_ms(started_at), error=str(exc))
            except AgentInvocationError as exc:
                self._observer.unit_failed(
                    item_index=item_index, run_index=run_index, reason=exc.reason
                )
                run = SingleRun(latency_ms=_elapsed_ms(started_at), error=str(exc))
            else:
                latency_ms = _elapsed_ms(started_at)
                evaluations = await self._evaluate(
                    item=item,
                    agent_output=agent_output,
                    evaluators=options.evaluators,
                    api_key=options.api_key,
                )
                run = SingleRun(
                    output=agent_output.output,
                    latency_ms=latency_ms,
                    evaluations=evaluations,
                    metadata=agent_output.metadata,
                )
                self._observer.unit_completed(
                    item_index=item_index, run_index=run_index, latency_ms=latency_ms
                )

            slots[item_index][run_index] = run

            async with progress_lock:
                completed_count[0] += 1
                self._observer.unit_progress(
                    item_index=item_index,
                    run_index=run_index,
                    completed=completed_count[0],
                    total=total_units,
                )
                if on_progress is not None:
                    self._notify(
                        on_progress=on_progress,
                        progress=UnitProgress(
                            item_index=item_index,
                            run_index=run_index,
                            completed=completed_count[0],
                            total=total_units,
                        ),
                    )

    def _notify(self, on_progress: ProgressCallback, progress: UnitProgress) -> None:
        # A raising callback must not cancel sibling units.
        try:
            on_progress(progress)
        except Exception as exc:
            self._observer.progress_callback_failed(
                item_index=progress.item_index,
                run_index=progress.run_index,
                reason=_describe(exc),
            )

    async def _invoke_agent(
        self,
        agent: AgentFn,
        item: Mapping[str, Any],
        item_index: int,
        run_index: int,
        timeout_seconds: float,
    ) -> AgentOutput:
        """Race the agent callback against the unit timeout.

        Raises:
            AgentTimeoutError: if the agent does not settle in time.
            AgentInvocationError: if the agent raises or returns an unusable value.
        """
        try:
            task = asyncio.ensure_future(agent(item, item_index, run_index))
        except Exception as exc:
            raise AgentInvocationError(
                item_index=item_index, run_index=run_index, reason=_describe(exc)
            ) from exc

        done, _ = await asyncio.wait({task}, timeout=timeout_seconds)
        if not done:
            task.cancel()
            task.add_done_callback(_consume_outcome)
            raise AgentTimeoutError(
                item_index=item_index,
                run_index=run_index,
                timeout_seconds=timeout_seconds,
            )

        if task.cancelled():
            raise AgentInvocationError(
                item_index=item_index,
                run_index=run_index,
                reason="agent call was cancelled",
            )
        exc = task.exception()
        if exc is not None:
            raise AgentInvocationError(
                item_index=item_index, run_index=run_index, reason=_describe(exc)
            ) from exc

        return _coerce_agent_output(
            returned=task.result(), item_index=item_index, run_index=run_index
        )

    async def _evaluate(
        self,
        item: Mapping[str, Any],
        agent_output: AgentOutput,
        evaluators: Sequence[Evaluator],
        api_key: str | None,
    ) -> dict[str, EvalResult]:
        """Run evaluators sequentially, in configured order; each one is failure-isolated."""
        context = EvalContext(
            item=_as_record(item),
            output=agent_output.output,
            metadata=agent_output.metadata,
        )
        evaluations: dict[str, EvalResult] = {}
        for evaluator in evaluators:
            evaluations[evaluator.name] = await evaluator.evaluate(
                context=context, api_key=api_key
            )
        return evaluations


def _elapsed_ms(started_at: float) -> float:
    return (time.monotonic() - started_at) * 1000


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _as_record(item: Mapping[Any, Any]) -> dict[str, Any]:
    """Copy an item with string keys; non-string top-level keys are stringified."""
    return {str(key): value for key, value in item.items()}


def _coerce_agent_output(returned: Any, item_index: int, run_index: int) -> AgentOutput:
    if isinstance(returned, AgentOutput):
        return returned
    if isinstance(returned, str):
        return AgentOutput(output=returned)
    if isinstance(returned, Mapping):
        try:
            return AgentOutput.model_validate(dict(returned))
        except ValidationError as exc:
            raise AgentInvocationError(
                item_index=item_index,
                run_index=run_index,
                reason=f"agent returned an invalid result: {exc}",
            ) from exc
    raise AgentInvocationError(
        item_index=item_index,
        run_index=run_index,
        reason=f"agent returned unsupported value {returned!r}",
    )


def _stitch(index: int, item: Mapping[str, Any], runs: list[SingleRun]) -> ItemResult:
    """Build the ItemResult for one item from its runs, ordered by run index."""
    first = runs[0]
    aggregated = aggregate_runs(runs) if len(runs) > 1 else None
    return ItemResult(
        index=index,
        input=_as_record(item),
        output=first.output,
        latency_ms=aggregated.avg_latency_ms if aggregated else first.latency_ms,
        evaluations=first.evaluations,
        metadata=first.metadata,
        error=first.error,
        runs=runs,
        aggregated=aggregated,
    )
