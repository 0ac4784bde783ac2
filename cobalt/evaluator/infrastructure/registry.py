"""EvaluatorRegistry — maps evaluator type names to handlers."""

from cobalt.evaluator.domain.handler import EvaluatorHandler
from cobalt.evaluator.domain.observer import EvaluatorObserver


class EvaluatorRegistry:
    """Explicit, per-experiment table of evaluator handlers.

    Populate it before the runner starts; mutation while units are being
    evaluated is not supported. No method raises.
    """

    def __init__(self, observer: EvaluatorObserver) -> None:
        self._observer = observer
        self._handlers: dict[str, EvaluatorHandler] = {}

    def register(self, evaluator_type: str, handler: EvaluatorHandler) -> None:
        """Install handler for evaluator_type, replacing any existing one."""
        if evaluator_type in self._handlers:
            self._observer.evaluator_type_overwritten(evaluator_type=evaluator_type)
        else:
            self._observer.evaluator_type_registered(evaluator_type=evaluator_type)
        self._handlers[evaluator_type] = handler

    def get(self, evaluator_type: str) -> EvaluatorHandler | None:
        return self._handlers.get(evaluator_type)

    def has(self, evaluator_type: str) -> bool:
        return evaluator_type in self._handlers

    def list(self) -> list[str]:
        return list(self._handlers)

    def unregister(self, evaluator_type: str) -> bool:
        """Remove a handler; return whether one was present."""
        return self._handlers.pop(evaluator_type, None) is not None

    def clear(self) -> None:
        self._handlers.clear()
