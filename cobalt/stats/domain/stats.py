"""Score statistics — mean, population stddev and interpolated percentiles."""

import math
import statistics
from collections.abc import Sequence

from pydantic import BaseModel, Field


class ScoreStats(BaseModel, frozen=True):
    """Summary statistics for one evaluator across a whole dataset."""

    avg: float
    min: float
    max: float
    p50: float
    p95: float
    p99: float


class RunAggregation(BaseModel, frozen=True):
    """Statistics for one (item, evaluator) pair across repeated runs."""

    mean: float
    stddev: float
    min: float
    max: float
    p50: float
    p95: float
    p99: float
    scores: list[float] = Field(default_factory=list)


def percentile(sorted_scores: Sequence[float], p: float) -> float:
    """Return the p-th percentile (0-100) of an ascending sequence.

    Uses linear interpolation between the two closest ranks, so the result
    always lies between the minimum and the maximum.
    """
    if not sorted_scores:
        return 0.0
    if p <= 0:
        return float(sorted_scores[0])
    if p >= 100:
        return float(sorted_scores[-1])

    index = (p / 100) * (len(sorted_scores) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_scores[lower])

    weight = index - lower
    return sorted_scores[lower] * (1 - weight) + sorted_scores[upper] * weight


def standard_deviation(values: Sequence[float], mean: float | None = None) -> float:
    """Return the population standard deviation, 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values, mu=mean)


def calculate_stats(scores: Sequence[float]) -> ScoreStats:
    """Compute avg/min/max/p50/p95/p99; every field is 0.0 for an empty input."""
    if not scores:
        return ScoreStats(avg=0.0, min=0.0, max=0.0, p50=0.0, p95=0.0, p99=0.0)

    ordered = sorted(scores)
    return ScoreStats(
        avg=statistics.fmean(scores),
        min=ordered[0],
        max=ordered[-1],
        p50=percentile(ordered, 50),
        p95=percentile(ordered, 95),
        p99=percentile(ordered, 99),
    )


def calculate_run_stats(scores: Sequence[float]) -> RunAggregation:
    """Compute the per-item aggregation across runs, keeping the raw scores."""
    if not scores:
        return RunAggregation(
            mean=0.0, stddev=0.0, min=0.0, max=0.0, p50=0.0, p95=0.0, p99=0.0
        )

    ordered = sorted(scores)
    mean = statistics.fmean(scores)
    return RunAggregation(
        mean=mean,
        stddev=standard_deviation(scores, mean=mean),
        min=ordered[0],
        max=ordered[-1],
        p50=percentile(ordered, 50),
        p95=percentile(ordered, 95),
        p99=percentile(ordered, 99),
        scores=list(scores),
    )
