"""Tests for AutoevalsHandler."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest

from cobalt.evaluator.domain.result import EvalContext
from cobalt.evaluator.domain.spec import AutoevalsSpec, EvaluatorSpec
from cobalt.evaluator.infrastructure.autoevals import AutoevalsHandler
from cobalt.evaluator.infrastructure.errors import EvaluatorError

_AUTOEVALS = "cobalt.evaluator.infrastructure.autoevals.autoevals"


class RecordingScorer:
    """Stands in for an autoevals scorer class; records each eval_async call."""

    calls: list[dict[str, Any]] = []
    returned: Any = SimpleNamespace(score=0.8, metadata={}, error=None)

    async def eval_async(self, output: str, **kwargs: Any) -> Any:
        type(self).calls.append({"output": output, **kwargs})
        return type(self).returned


class RaisingScorer:
    async def eval_async(self, output: str, **kwargs: Any) -> Any:
        raise RuntimeError("rate limited")


@pytest.fixture
def scorer() -> type[RecordingScorer]:
    RecordingScorer.calls = []
    RecordingScorer.returned = SimpleNamespace(score=0.8, metadata={}, error=None)
    return RecordingScorer


def _scorers(**classes: Any) -> SimpleNamespace:
    return SimpleNamespace(**classes)


def _context(output: Any = "kitten", **item: Any) -> EvalContext:
    return EvalContext(item=item, output=output)


class TestAutoevalsHandler:
    async def test_levenshtein_receives_expected(
        self, scorer: type[RecordingScorer]
    ) -> None:
        spec = AutoevalsSpec(name="lev", evaluator_type="Levenshtein")

        with patch(_AUTOEVALS, _scorers(Levenshtein=scorer)):
            result = await AutoevalsHandler()(
                spec, _context(expectedOutput="sitting", input="q"), None
            )

        assert result.score == pytest.approx(0.8)
        assert result.reason == "Autoevals Levenshtein score: 0.800"
        assert scorer.calls == [{"output": "kitten", "expected": "sitting"}]

    async def test_question_scorers_receive_input_and_options(
        self, scorer: type[RecordingScorer]
    ) -> None:
        spec = AutoevalsSpec(
            name="qa",
            evaluator_type="ClosedQA",
            options={"criteria": "Is it polite?"},
        )

        with patch(_AUTOEVALS, _scorers(ClosedQA=scorer)):
            await AutoevalsHandler()(
                spec, _context(input="Say hi", expectedOutput="hi"), None
            )

        assert scorer.calls == [
            {"output": "kitten", "input": "Say hi", "criteria": "Is it polite?"}
        ]

    async def test_custom_expected_field(self, scorer: type[RecordingScorer]) -> None:
        spec = AutoevalsSpec(
            name="fact", evaluator_type="Factuality", expected_field="reference"
        )

        with patch(_AUTOEVALS, _scorers(Factuality=scorer)):
            await AutoevalsHandler()(spec, _context(reference="Paris"), None)

        assert scorer.calls[0]["expected"] == "Paris"

    async def test_json_maps_to_json_diff_and_encodes_output(
        self, scorer: type[RecordingScorer]
    ) -> None:
        spec = AutoevalsSpec(name="json", evaluator_type="Json")

        with patch(_AUTOEVALS, _scorers(JSONDiff=scorer)):
            await AutoevalsHandler()(
                spec, _context(output={"a": 1}, expectedOutput={"a": 1}), None
            )

        assert scorer.calls == [{"output": '{"a": 1}', "expected": {"a": 1}}]

    async def test_percentage_scores_are_scaled(
        self, scorer: type[RecordingScorer]
    ) -> None:
        scorer.returned = SimpleNamespace(score=85, metadata={}, error=None)
        spec = AutoevalsSpec(name="humor", evaluator_type="Humor")

        with patch(_AUTOEVALS, _scorers(Humor=scorer)):
            result = await AutoevalsHandler()(spec, _context(), None)

        assert result.score == pytest.approx(0.85)

    async def test_missing_score_is_zero_and_rationale_is_the_reason(
        self, scorer: type[RecordingScorer]
    ) -> None:
        scorer.returned = SimpleNamespace(
            score=None, metadata={"rationale": "off topic"}, error=None
        )
        spec = AutoevalsSpec(name="fact", evaluator_type="Factuality")

        with patch(_AUTOEVALS, _scorers(Factuality=scorer)):
            result = await AutoevalsHandler()(spec, _context(), None)

        assert result.score == 0.0
        assert result.reason == "off topic"

    async def test_unknown_scorer_raises(self) -> None:
        spec = AutoevalsSpec(name="sec", evaluator_type="Security")

        with patch(_AUTOEVALS, _scorers()):
            with pytest.raises(EvaluatorError, match="no scorer named 'Security'"):
                await AutoevalsHandler()(spec, _context(), None)

    async def test_scorer_failure_raises_evaluator_error(self) -> None:
        spec = AutoevalsSpec(name="fact", evaluator_type="Factuality")

        with patch(_AUTOEVALS, _scorers(Factuality=RaisingScorer)):
            with pytest.raises(EvaluatorError, match="rate limited"):
                await AutoevalsHandler()(spec, _context(), None)

    async def test_accepts_a_generic_spec(self, scorer: type[RecordingScorer]) -> None:
        spec = EvaluatorSpec.model_validate(
            {"name": "lev", "type": "autoevals", "evaluatorType": "Levenshtein"}
        )

        with patch(_AUTOEVALS, _scorers(Levenshtein=scorer)):
            result = await AutoevalsHandler()(spec, _context(), None)

        assert result.score == pytest.approx(0.8)
