"""Structlog implementation of the EvaluatorObserver port."""

import structlog


class StructlogEvaluatorObserver:
    """Delegates evaluator domain events to structlog.

    Satisfies the EvaluatorObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def evaluator_type_registered(self, evaluator_type: str) -> None:
        self._log.debug("evaluator.type_registered", evaluator_type=evaluator_type)

    def evaluator_type_overwritten(self, evaluator_type: str) -> None:
        self._log.warning("evaluator.type_overwritten", evaluator_type=evaluator_type)

    def evaluator_failed(
        self, evaluator: str, evaluator_type: str, reason: str
    ) -> None:
        self._log.error(
            "evaluator.failed",
            evaluator=evaluator,
            evaluator_type=evaluator_type,
            reason=reason,
        )

    def evaluator_cache_hit(self, evaluator: str) -> None:
        self._log.debug("evaluator.cache_hit", evaluator=evaluator)

    def plugin_loaded(
        self, name: str, version: str, evaluator_types: list[str]
    ) -> None:
        self._log.info(
            "evaluator.plugin_loaded",
            name=name,
            version=version,
            evaluator_types=evaluator_types,
        )

    def plugin_load_failed(self, reference: str, reason: str) -> None:
        self._log.error("evaluator.plugin_load_failed", reference=reference, reason=reason)
