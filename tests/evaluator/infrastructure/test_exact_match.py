"""Tests for the exact-match evaluator type."""

from cobalt.evaluator.domain.result import EvalContext
from cobalt.evaluator.domain.spec import EvaluatorSpec, ExactMatchSpec
from cobalt.evaluator.infrastructure.exact_match import evaluate_exact_match


def _context(output: str | dict, **item: object) -> EvalContext:
    return EvalContext(item=dict(item), output=output)


class TestEvaluateExactMatch:
    def test_match_scores_one(self) -> None:
        spec = ExactMatchSpec(name="exact", field="expectedOutput")

        result = evaluate_exact_match(
            spec, _context("4", expectedOutput="4"), None
        )

        assert result.score == 1.0
        assert result.reason == "Output matches expected value"

    def test_surrounding_whitespace_is_ignored(self) -> None:
        spec = ExactMatchSpec(name="exact", field="expectedOutput")

        result = evaluate_exact_match(
            spec, _context("  Paris\n", expectedOutput="Paris"), None
        )

        assert result.score == 1.0

    def test_case_sensitive_by_default(self) -> None:
        spec = ExactMatchSpec(name="exact", field="expectedOutput")

        result = evaluate_exact_match(
            spec, _context("paris", expectedOutput="Paris"), None
        )

        assert result.score == 0.0
        assert result.reason == 'Output "paris" does not match expected "Paris"'

    def test_case_insensitive_match(self) -> None:
        spec = ExactMatchSpec(
            name="exact", field="expectedOutput", case_sensitive=False
        )

        result = evaluate_exact_match(
            spec, _context("paris", expectedOutput="Paris"), None
        )

        assert result.score == 1.0

    def test_missing_field_scores_zero(self) -> None:
        spec = ExactMatchSpec(name="exact", field="answer")

        result = evaluate_exact_match(spec, _context("4"), None)

        assert result.score == 0.0
        assert result.reason == 'Field "answer" not found in item'

    def test_non_string_expected_is_compared_as_text(self) -> None:
        spec = ExactMatchSpec(name="exact", field="answer")

        result = evaluate_exact_match(spec, _context("42", answer=42), None)

        assert result.score == 1.0

    def test_structured_output_is_compared_as_json(self) -> None:
        spec = ExactMatchSpec(name="exact", field="answer")

        result = evaluate_exact_match(
            spec, _context({"a": 1}, answer='{"a": 1}'), None
        )

        assert result.score == 1.0

    def test_accepts_open_base_spec(self) -> None:
        spec = EvaluatorSpec.model_validate(
            {"name": "exact", "type": "exact-match", "field": "answer"}
        )

        result = evaluate_exact_match(spec, _context("x", answer="x"), None)

        assert result.score == 1.0
