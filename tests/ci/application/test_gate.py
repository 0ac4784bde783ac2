"""Tests for the CI gate."""

import pytest
from pydantic import ValidationError

from cobalt.ci.application.gate import format_ci_result, validate_thresholds
from cobalt.ci.domain.threshold import ThresholdMetric
from cobalt.evaluation.domain.result import ItemAggregation, ItemResult, SingleRun
from cobalt.evaluation.domain.summary import ExperimentSummary
from cobalt.evaluator.domain.result import EvalResult
from cobalt.stats.domain.stats import RunAggregation, ScoreStats

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _stats(
    avg: float = 0.9,
    min: float = 0.8,
    max: float = 1.0,
    p50: float = 0.9,
    p95: float = 1.0,
    p99: float = 1.0,
) -> ScoreStats:
    return ScoreStats(avg=avg, min=min, max=max, p50=p50, p95=p95, p99=p99)


def _summary(**scores: ScoreStats) -> ExperimentSummary:
    return ExperimentSummary(
        total_items=3, total_duration_ms=100.0, avg_latency_ms=10.0, scores=scores
    )


def _item(index: int, **scores: float) -> ItemResult:
    evaluations = {name: EvalResult(score=score) for name, score in scores.items()}
    return ItemResult(
        index=index,
        input={},
        latency_ms=1.0,
        evaluations=evaluations,
        runs=[SingleRun(latency_ms=1.0, evaluations=evaluations)],
    )


def _aggregated_item(index: int, evaluator: str, scores: list[float]) -> ItemResult:
    runs = [
        SingleRun(latency_ms=1.0, evaluations={evaluator: EvalResult(score=s)})
        for s in scores
    ]
    mean = sum(scores) / len(scores)
    return ItemResult(
        index=index,
        input={},
        latency_ms=1.0,
        evaluations=runs[0].evaluations,
        runs=runs,
        aggregated=ItemAggregation(
            avg_latency_ms=1.0,
            evaluations={
                evaluator: RunAggregation(
                    mean=mean,
                    stddev=0.0,
                    min=min(scores),
                    max=max(scores),
                    p50=mean,
                    p95=max(scores),
                    p99=max(scores),
                    scores=scores,
                )
            },
        ),
    )


# ---------------------------------------------------------------------------
# Score thresholds
# ---------------------------------------------------------------------------


class TestScoreThresholds:
    def test_avg_below_threshold_is_one_violation(self) -> None:
        result = validate_thresholds(
            summary=_summary(relevance=_stats(avg=0.75)),
            items=[],
            thresholds={"relevance": ThresholdMetric(avg=0.8)},
        )

        assert result.passed is False
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.evaluator == "relevance"
        assert violation.metric == "avg"
        assert violation.expected == 0.8
        assert violation.actual == 0.75
        assert result.summary == "1 threshold violation(s) detected"

    def test_empty_thresholds_pass(self) -> None:
        result = validate_thresholds(
            summary=_summary(relevance=_stats()), items=[], thresholds={}
        )

        assert result.passed is True
        assert result.violations == []
        assert "(0 evaluators checked)" in result.summary

    def test_all_met_passes(self) -> None:
        result = validate_thresholds(
            summary=_summary(a=_stats(), b=_stats()),
            items=[],
            thresholds={
                "a": ThresholdMetric(avg=0.5, min=0.5, p50=0.5, p95=0.5, p99=0.5),
                "b": ThresholdMetric(max=1.0),
            },
        )

        assert result.passed is True
        assert result.summary == "All thresholds passed (2 evaluators checked)"

    def test_threshold_equal_to_actual_passes(self) -> None:
        result = validate_thresholds(
            summary=_summary(a=_stats(avg=0.8)),
            items=[],
            thresholds={"a": ThresholdMetric(avg=0.8)},
        )

        assert result.passed is True

    def test_max_is_a_ceiling(self) -> None:
        below = validate_thresholds(
            summary=_summary(latency_like=_stats(max=0.4)),
            items=[],
            thresholds={"latency_like": ThresholdMetric(max=0.5)},
        )
        above = validate_thresholds(
            summary=_summary(latency_like=_stats(max=0.9)),
            items=[],
            thresholds={"latency_like": ThresholdMetric(max=0.5)},
        )

        assert below.passed is True
        assert above.passed is False
        assert above.violations[0].metric == "max"
        assert ">" in above.violations[0].message

    def test_only_first_failing_metric_is_recorded(self) -> None:
        result = validate_thresholds(
            summary=_summary(a=_stats(avg=0.1, min=0.0, p50=0.1, p95=0.2)),
            items=[],
            thresholds={"a": ThresholdMetric(p95=0.9, min=0.5, avg=0.5)},
        )

        assert [v.metric for v in result.violations] == ["avg"]

    def test_each_evaluator_is_checked(self) -> None:
        result = validate_thresholds(
            summary=_summary(a=_stats(avg=0.1), b=_stats(p99=0.2)),
            items=[],
            thresholds={
                "a": ThresholdMetric(avg=0.5),
                "b": ThresholdMetric(p99=0.9),
            },
        )

        assert [(v.evaluator, v.metric) for v in result.violations] == [
            ("a", "avg"),
            ("b", "p99"),
        ]

    def test_missing_evaluator_is_existence_violation_and_continues(self) -> None:
        result = validate_thresholds(
            summary=_summary(b=_stats(avg=0.1)),
            items=[],
            thresholds={
                "ghost": ThresholdMetric(avg=0.5),
                "b": ThresholdMetric(avg=0.5),
            },
        )

        assert [(v.evaluator, v.metric) for v in result.violations] == [
            ("ghost", "existence"),
            ("b", "avg"),
        ]
        assert result.violations[0].message == 'Evaluator "ghost" not found in results'


# ---------------------------------------------------------------------------
# Pass rate
# ---------------------------------------------------------------------------


class TestPassRate:
    def test_pass_rate_below_threshold(self) -> None:
        items = [_item(0, acc=1.0), _item(1, acc=0.2), _item(2, acc=0.6)]

        result = validate_thresholds(
            summary=_summary(acc=_stats()),
            items=items,
            thresholds={"acc": ThresholdMetric(pass_rate=0.9)},
        )

        violation = result.violations[0]
        assert violation.metric == "passRate"
        assert violation.actual == pytest.approx(2 / 3)
        assert violation.expected == 0.9
        assert "(2/3)" in violation.message

    def test_custom_min_score(self) -> None:
        items = [_item(0, acc=1.0), _item(1, acc=0.6)]

        result = validate_thresholds(
            summary=_summary(acc=_stats()),
            items=items,
            thresholds={"acc": ThresholdMetric(pass_rate=1.0, min_score=0.7)},
        )

        assert result.violations[0].actual == pytest.approx(0.5)

    def test_item_missing_the_score_counts_as_failure(self) -> None:
        items = [_item(0, acc=1.0), _item(1)]

        result = validate_thresholds(
            summary=_summary(acc=_stats()),
            items=items,
            thresholds={"acc": ThresholdMetric(pass_rate=1.0)},
        )

        assert result.violations[0].actual == pytest.approx(0.5)

    def test_uses_mean_across_runs(self) -> None:
        # First run alone would fail, the mean passes.
        items = [_aggregated_item(0, "acc", [0.0, 1.0, 1.0])]

        result = validate_thresholds(
            summary=_summary(acc=_stats()),
            items=items,
            thresholds={"acc": ThresholdMetric(pass_rate=1.0)},
        )

        assert result.passed is True

    def test_pass_rate_is_reported_alongside_score_violation(self) -> None:
        items = [_item(0, acc=0.0)]

        result = validate_thresholds(
            summary=_summary(acc=_stats(avg=0.0)),
            items=items,
            thresholds={"acc": ThresholdMetric(avg=0.5, pass_rate=0.5)},
        )

        assert [v.metric for v in result.violations] == ["avg", "passRate"]

    def test_no_items_is_zero_rate(self) -> None:
        result = validate_thresholds(
            summary=_summary(acc=_stats()),
            items=[],
            thresholds={"acc": ThresholdMetric(pass_rate=0.1)},
        )

        assert result.violations[0].actual == 0.0


# ---------------------------------------------------------------------------
# ThresholdMetric and formatting
# ---------------------------------------------------------------------------


class TestThresholdMetric:
    def test_accepts_camel_case_aliases(self) -> None:
        metric = ThresholdMetric.model_validate({"passRate": 0.9, "minScore": 0.7})

        assert metric.pass_rate == 0.9
        assert metric.min_score == 0.7

    def test_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValidationError):
            ThresholdMetric.model_validate({"average": 0.5})

    def test_rejects_pass_rate_above_one(self) -> None:
        with pytest.raises(ValidationError):
            ThresholdMetric(pass_rate=1.5)


class TestFormatCiResult:
    def test_failed_result_lists_violations(self) -> None:
        result = validate_thresholds(
            summary=_summary(relevance=_stats(avg=0.75)),
            items=[],
            thresholds={"relevance": ThresholdMetric(avg=0.8)},
        )

        text = format_ci_result(result)

        assert text.splitlines() == [
            "CI status: FAILED",
            "1 threshold violation(s) detected",
            "  - relevance: avg score 0.750 < threshold 0.800",
        ]

    def test_passed_result(self) -> None:
        result = validate_thresholds(summary=_summary(), items=[], thresholds={})

        assert format_ci_result(result).startswith("CI status: PASSED")
