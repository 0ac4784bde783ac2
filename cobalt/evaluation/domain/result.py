"""Runner output models: AgentOutput, SingleRun, ItemResult and ItemAggregation."""

from typing import Any

from pydantic import BaseModel, Field

from cobalt.evaluator.domain.result import EvalResult
from cobalt.stats.domain.stats import RunAggregation


class AgentOutput(BaseModel, frozen=True):
    """What the agent callback produced for one unit."""

    output: str | dict[str, Any]
    metadata: dict[str, Any] = Field(default_factory=dict)


class SingleRun(BaseModel, frozen=True):
    """One trial of one item: agent output plus every evaluator's result.

    A failed or timed-out trial carries ``error`` and no evaluations.
    """

    output: str | dict[str, Any] = ""
    latency_ms: float
    evaluations: dict[str, EvalResult] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class ItemAggregation(BaseModel, frozen=True):
    """Cross-run statistics for one item."""

    avg_latency_ms: float
    evaluations: dict[str, RunAggregation] = Field(default_factory=dict)


class ItemResult(BaseModel, frozen=True):
    """All trials of one dataset item.

    ``index`` is the item's dataset position. ``runs`` is ordered by run index.
    The flat fields mirror ``runs[0]``, except that ``latency_ms`` is the mean
    over runs when there is more than one. ``aggregated`` is set iff there is
    more than one run.
    """

    index: int
    input: dict[str, Any]
    output: str | dict[str, Any] = ""
    latency_ms: float
    evaluations: dict[str, EvalResult] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    runs: list[SingleRun]
    aggregated: ItemAggregation | None = None
