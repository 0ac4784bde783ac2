"""CI gate — validates an experiment against per-evaluator thresholds.

Pure: no I/O, deterministic given its inputs. Threshold violations are data,
never exceptions.
"""

from collections.abc import Mapping, Sequence

from cobalt.ci.domain.threshold import CIResult, ThresholdMetric, ThresholdViolation
from cobalt.evaluation.domain.result import ItemResult
from cobalt.evaluation.domain.summary import ExperimentSummary
from cobalt.stats.domain.stats import ScoreStats

DEFAULT_MIN_SCORE = 0.5

# Fixed check order; only the first failing metric is reported.
_SCORE_METRICS: tuple[str, ...] = ("avg", "min", "max", "p50", "p95", "p99")
_CEILINGS = frozenset({"max"})


def _check_scores(
    evaluator: str, stats: ScoreStats, threshold: ThresholdMetric
) -> ThresholdViolation | None:
    for metric in _SCORE_METRICS:
        expected: float | None = getattr(threshold, metric)
        if expected is None:
            continue
        actual: float = getattr(stats, metric)
        if metric in _CEILINGS:
            if actual <= expected:
                continue
            comparison = ">"
        else:
            if actual >= expected:
                continue
            comparison = "<"
        return ThresholdViolation(
            evaluator=evaluator,
            metric=metric,
            expected=expected,
            actual=actual,
            message=(
                f"{evaluator}: {metric} score {actual:.3f} {comparison} "
                f"threshold {expected:.3f}"
            ),
        )
    return None


def _item_score(item: ItemResult, evaluator: str) -> float | None:
    if item.aggregated is not None and evaluator in item.aggregated.evaluations:
        return item.aggregated.evaluations[evaluator].mean
    result = item.evaluations.get(evaluator)
    return result.score if result is not None else None


def _check_pass_rate(
    evaluator: str, items: Sequence[ItemResult], threshold: ThresholdMetric
) -> ThresholdViolation | None:
    if threshold.pass_rate is None:
        return None

    min_score = threshold.min_score if threshold.min_score is not None else DEFAULT_MIN_SCORE
    passed_items = 0
    for item in items:
        score = _item_score(item, evaluator)
        if score is not None and score >= min_score:
            passed_items += 1

    actual = passed_items / len(items) if items else 0.0
    if actual >= threshold.pass_rate:
        return None
    return ThresholdViolation(
        evaluator=evaluator,
        metric="passRate",
        expected=threshold.pass_rate,
        actual=actual,
        message=(
            f"{evaluator}: pass rate {actual * 100:.1f}% ({passed_items}/{len(items)}) "
            f"< threshold {threshold.pass_rate * 100:.1f}% (minScore: {min_score:.2f})"
        ),
    )


def validate_thresholds(
    summary: ExperimentSummary,
    items: Sequence[ItemResult],
    thresholds: Mapping[str, ThresholdMetric],
) -> CIResult:
    """Check every configured evaluator and collect violations.

    A missing evaluator yields one ``existence`` violation. Otherwise at most
    one score violation (first failing metric in avg, min, max, p50, p95, p99
    order) plus at most one ``passRate`` violation is recorded per evaluator.
    """
    violations: list[ThresholdViolation] = []

    for evaluator, threshold in thresholds.items():
        stats = summary.scores.get(evaluator)
        if stats is None:
            violations.append(
                ThresholdViolation(
                    evaluator=evaluator,
                    metric="existence",
                    expected=1,
                    actual=0,
                    message=f'Evaluator "{evaluator}" not found in results',
                )
            )
            continue

        score_violation = _check_scores(evaluator, stats, threshold)
        if score_violation is not None:
            violations.append(score_violation)

        pass_rate_violation = _check_pass_rate(evaluator, items, threshold)
        if pass_rate_violation is not None:
            violations.append(pass_rate_violation)

    passed = not violations
    return CIResult(
        passed=passed,
        violations=violations,
        summary=(
            f"All thresholds passed ({len(thresholds)} evaluators checked)"
            if passed
            else f"{len(violations)} threshold violation(s) detected"
        ),
    )


def format_ci_result(result: CIResult) -> str:
    """Render a CIResult as a plain-text report."""
    lines = [f"CI status: {'PASSED' if result.passed else 'FAILED'}", result.summary]
    for violation in result.violations:
        lines.append(f"  - {violation.message}")
    return "\n".join(lines)
