"""Aggregator — cross-run item statistics and the experiment summary."""

import statistics
from collections.abc import Mapping, Sequence
from typing import Any

from cobalt.evaluation.domain.cost import CostEstimator
from cobalt.evaluation.domain.result import ItemAggregation, ItemResult, SingleRun
from cobalt.evaluation.domain.summary import ExperimentSummary, TokenUsage
from cobalt.stats.domain.stats import calculate_run_stats, calculate_stats


def aggregate_runs(runs: Sequence[SingleRun]) -> ItemAggregation:
    """Compute mean latency and per-evaluator run statistics for one item.

    Evaluators are keyed in first-seen order. A failed run contributes its
    latency but no scores.
    """
    scores: dict[str, list[float]] = {}
    for run in runs:
        for name, result in run.evaluations.items():
            scores.setdefault(name, []).append(result.score)

    return ItemAggregation(
        avg_latency_ms=statistics.fmean(run.latency_ms for run in runs) if runs else 0.0,
        evaluations={name: calculate_run_stats(values) for name, values in scores.items()},
    )


def _count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def usage_from_metadata(metadata: Mapping[str, Any]) -> TokenUsage | None:
    """Read token usage reported by the agent, if any.

    Accepts ``input_tokens``/``output_tokens`` keys, a ``tokens`` mapping with
    the same keys (or ``input``/``output``), or a bare ``tokens`` count, which
    is attributed to input.
    """
    if "input_tokens" in metadata or "output_tokens" in metadata:
        return TokenUsage(
            input_tokens=_count(metadata.get("input_tokens")),
            output_tokens=_count(metadata.get("output_tokens")),
        )

    tokens = metadata.get("tokens")
    if isinstance(tokens, Mapping):
        return TokenUsage(
            input_tokens=_count(tokens.get("input_tokens", tokens.get("input"))),
            output_tokens=_count(tokens.get("output_tokens", tokens.get("output"))),
        )
    if _count(tokens):
        return TokenUsage(input_tokens=_count(tokens))
    return None


def build_summary(
    results: Sequence[ItemResult],
    total_duration_ms: float,
    cost_estimator: CostEstimator | None = None,
    default_model: str | None = None,
) -> ExperimentSummary:
    """Roll the runner output up into an ExperimentSummary.

    Average latency is over every unit. Score statistics per evaluator are
    over every recorded score in every run of every item. Cost is estimated
    per run from its usage and its ``model`` metadata, falling back to
    default_model.
    """
    latencies: list[float] = []
    scores: dict[str, list[float]] = {}
    total_tokens = 0
    saw_usage = False
    estimated_cost = 0.0
    saw_cost = False

    for item in results:
        for run in item.runs:
            latencies.append(run.latency_ms)
            for name, result in run.evaluations.items():
                scores.setdefault(name, []).append(result.score)

            usage = usage_from_metadata(run.metadata)
            if usage is None:
                continue
            saw_usage = True
            total_tokens += usage.total

            model = run.metadata.get("model") or default_model
            if cost_estimator is not None and isinstance(model, str) and model:
                estimated_cost += cost_estimator.estimate(usage=usage, model=model)
                saw_cost = True

    return ExperimentSummary(
        total_items=len(results),
        total_duration_ms=total_duration_ms,
        avg_latency_ms=statistics.fmean(latencies) if latencies else 0.0,
        total_tokens=total_tokens if saw_usage else None,
        estimated_cost=estimated_cost if saw_cost else None,
        scores={name: calculate_stats(values) for name, values in scores.items()},
    )
