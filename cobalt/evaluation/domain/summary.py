"""ExperimentSummary — the dataset-level rollup of a completed run."""

from pydantic import BaseModel, Field

from cobalt.stats.domain.stats import ScoreStats


class TokenUsage(BaseModel, frozen=True):
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens


class ExperimentSummary(BaseModel, frozen=True):
    """Latency, token, cost and per-evaluator score statistics for one experiment.

    ``total_tokens`` and ``estimated_cost`` are None when no unit reported
    usage. Scores cover every run of every item.
    """

    total_items: int
    total_duration_ms: float
    avg_latency_ms: float
    total_tokens: int | None = None
    estimated_cost: float | None = None
    scores: dict[str, ScoreStats] = Field(default_factory=dict)
