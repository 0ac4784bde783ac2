"""Evaluator — wraps one configured evaluator with failure isolation and caching."""

import inspect
from collections.abc import Mapping
from typing import Any

from cobalt.cache.domain.cache import ScoringCache
from cobalt.evaluator.domain.observer import EvaluatorObserver
from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec
from cobalt.evaluator.infrastructure.errors import (
    EvaluatorError,
    EvaluatorTypeNotRegisteredError,
)
from cobalt.evaluator.infrastructure.registry import EvaluatorRegistry


class Evaluator:
    """One named evaluator bound to its handler.

    evaluate() never raises: an unregistered type or any handler failure
    becomes a zero score whose reason starts with "Evaluation error:".
    """

    def __init__(
        self,
        spec: EvaluatorSpec,
        registry: EvaluatorRegistry,
        observer: EvaluatorObserver,
        cache: ScoringCache | None = None,
    ) -> None:
        self._spec = spec
        self._registry = registry
        self._observer = observer
        self._cache = cache

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def type(self) -> str:
        return self._spec.type

    @property
    def spec(self) -> EvaluatorSpec:
        return self._spec

    async def evaluate(
        self, context: EvalContext, api_key: str | None = None
    ) -> EvalResult:
        cache_material = (
            self._spec.cache_material() if self._cache is not None else None
        )
        if self._cache is not None and cache_material is not None:
            cached = self._cache.get(cache_material, context.item, context.output)
            if cached is not None:
                self._observer.evaluator_cache_hit(evaluator=self.name)
                return cached

        try:
            result = await self._invoke(context, api_key)
        except Exception as exc:
            reason = str(exc)
            self._observer.evaluator_failed(
                evaluator=self.name, evaluator_type=self.type, reason=reason
            )
            return EvalResult(score=0.0, reason=f"Evaluation error: {reason}")

        if self._cache is not None and cache_material is not None:
            self._cache.set(cache_material, context.item, context.output, result)
        return result

    async def _invoke(self, context: EvalContext, api_key: str | None) -> EvalResult:
        handler = self._registry.get(self.type)
        if handler is None:
            raise EvaluatorTypeNotRegisteredError(
                evaluator=self.name, evaluator_type=self.type
            )

        returned: Any = handler(self._spec, context, api_key)
        if inspect.isawaitable(returned):
            returned = await returned
        return self._coerce(returned)

    def _coerce(self, returned: Any) -> EvalResult:
        if isinstance(returned, EvalResult):
            return returned
        if isinstance(returned, Mapping):
            return EvalResult.model_validate(dict(returned))
        if isinstance(returned, (int, float)) and not isinstance(returned, bool):
            return EvalResult(score=returned)
        raise EvaluatorError(
            evaluator=self.name,
            reason=f"handler returned unsupported value {returned!r}",
        )
