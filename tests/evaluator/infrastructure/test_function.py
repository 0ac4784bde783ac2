"""Tests for the function evaluator type."""

import pytest

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import FunctionSpec
from cobalt.evaluator.infrastructure.errors import EvaluatorError, InvalidScoreError
from cobalt.evaluator.infrastructure.function import evaluate_function


def _make_context() -> EvalContext:
    return EvalContext(item={"input": "hi", "expectedOutput": "hello"}, output="hello")


class TestEvaluateFunction:
    async def test_sync_function_returning_mapping(self) -> None:
        spec = FunctionSpec(
            name="fn", fn=lambda ctx: {"score": 0.75, "reason": "close enough"}
        )

        result = await evaluate_function(spec, _make_context(), None)

        assert result.score == pytest.approx(0.75)
        assert result.reason == "close enough"

    async def test_async_function_is_awaited(self) -> None:
        async def score(ctx: EvalContext) -> EvalResult:
            return EvalResult(score=1.0, reason="awaited")

        result = await evaluate_function(FunctionSpec(name="fn", fn=score), _make_context(), None)

        assert result.score == 1.0
        assert result.reason == "awaited"

    async def test_bare_number_is_a_score(self) -> None:
        spec = FunctionSpec(name="fn", fn=lambda ctx: 0.4)

        result = await evaluate_function(spec, _make_context(), None)

        assert result.score == pytest.approx(0.4)
        assert result.reason == "No reason provided"

    async def test_function_receives_context(self) -> None:
        seen: list[EvalContext] = []

        def score(ctx: EvalContext) -> float:
            seen.append(ctx)
            return 1.0

        context = _make_context()
        await evaluate_function(FunctionSpec(name="fn", fn=score), context, None)

        assert seen == [context]

    async def test_score_above_one_raises(self) -> None:
        spec = FunctionSpec(name="fn", fn=lambda ctx: {"score": 1.5})

        with pytest.raises(InvalidScoreError) as exc_info:
            await evaluate_function(spec, _make_context(), None)

        assert exc_info.value.score == 1.5

    async def test_negative_score_raises(self) -> None:
        spec = FunctionSpec(name="fn", fn=lambda ctx: -0.1)

        with pytest.raises(InvalidScoreError):
            await evaluate_function(spec, _make_context(), None)

    async def test_missing_score_raises(self) -> None:
        spec = FunctionSpec(name="fn", fn=lambda ctx: {"reason": "forgot"})

        with pytest.raises(EvaluatorError) as exc_info:
            await evaluate_function(spec, _make_context(), None)

        assert "no numeric score" in exc_info.value.reason

    async def test_boolean_is_not_a_score(self) -> None:
        spec = FunctionSpec(name="fn", fn=lambda ctx: True)

        with pytest.raises(EvaluatorError):
            await evaluate_function(spec, _make_context(), None)
