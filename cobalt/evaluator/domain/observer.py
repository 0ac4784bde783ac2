"""Observer port for the evaluator domain — defines events in domain language."""

from typing import Protocol


class EvaluatorObserver(Protocol):
    """Observer port for registry, plugin and evaluator events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def evaluator_type_registered(self, evaluator_type: str) -> None: ...

    def evaluator_type_overwritten(self, evaluator_type: str) -> None: ...

    def evaluator_failed(
        self, evaluator: str, evaluator_type: str, reason: str
    ) -> None: ...

    def evaluator_cache_hit(self, evaluator: str) -> None: ...

    def plugin_loaded(
        self, name: str, version: str, evaluator_types: list[str]
    ) -> None: ...

    def plugin_load_failed(self, reference: str, reason: str) -> None: ...
