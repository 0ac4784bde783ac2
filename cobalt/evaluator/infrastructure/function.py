"""The ``function`` evaluator type — scores with a caller-supplied callable."""

import inspect
from collections.abc import Mapping

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec
from cobalt.evaluator.infrastructure.errors import EvaluatorError, InvalidScoreError


async def evaluate_function(
    spec: EvaluatorSpec, context: EvalContext, api_key: str | None
) -> EvalResult:
    """Call ``spec.fn(context)`` and validate what it returns.

    Raises:
        InvalidScoreError: if the returned score lies outside [0, 1].
        EvaluatorError: if the return value carries no numeric score.
    """
    fn = getattr(spec, "fn", None)
    if not callable(fn):
        raise EvaluatorError(evaluator=spec.name, reason="no callable 'fn' configured")

    returned = fn(context)
    if inspect.isawaitable(returned):
        returned = await returned

    if isinstance(returned, EvalResult):
        score, reason = returned.score, returned.reason
    elif isinstance(returned, Mapping):
        score, reason = returned.get("score"), returned.get("reason")
    else:
        score, reason = returned, None

    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise EvaluatorError(
            evaluator=spec.name, reason=f"function returned no numeric score: {score!r}"
        )
    if not 0.0 <= score <= 1.0:
        raise InvalidScoreError(evaluator=spec.name, score=score)

    return EvalResult(score=score, reason=reason or "No reason provided")
