"""EvaluatorHandler Protocol — the scoring capability registered per evaluator type."""

from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, TypeAlias

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec

HandlerReturn: TypeAlias = EvalResult | float | Mapping[str, Any]


class EvaluatorHandler(Protocol):
    """Structural interface for every evaluator implementation.

    Handlers may be plain functions or objects with ``__call__``, sync or
    async. Well-behaved handlers return a zero score with a reason on
    recoverable failures; raising is tolerated and contained by Evaluator.
    """

    def __call__(
        self,
        spec: EvaluatorSpec,
        context: EvalContext,
        api_key: str | None,
    ) -> HandlerReturn | Awaitable[HandlerReturn]: ...
