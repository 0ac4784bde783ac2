"""FakeEvaluatorObserver — records evaluator domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TypeRegisteredEvent:
    evaluator_type: str


@dataclass(frozen=True)
class TypeOverwrittenEvent:
    evaluator_type: str


@dataclass(frozen=True)
class EvaluatorFailedEvent:
    evaluator: str
    evaluator_type: str
    reason: str


@dataclass(frozen=True)
class CacheHitEvent:
    evaluator: str


@dataclass(frozen=True)
class PluginLoadedEvent:
    name: str
    version: str
    evaluator_types: list[str]


@dataclass(frozen=True)
class PluginLoadFailedEvent:
    reference: str
    reason: str


class FakeEvaluatorObserver:
    """Records all emitted evaluator events as typed frozen dataclasses.

    Use in tests to assert which events were emitted and with what data,
    without mocking or patching.
    """

    def __init__(self) -> None:
        self.registered: list[TypeRegisteredEvent] = []
        self.overwritten: list[TypeOverwrittenEvent] = []
        self.failures: list[EvaluatorFailedEvent] = []
        self.cache_hits: list[CacheHitEvent] = []
        self.plugins_loaded: list[PluginLoadedEvent] = []
        self.plugin_failures: list[PluginLoadFailedEvent] = []

    def evaluator_type_registered(self, evaluator_type: str) -> None:
        self.registered.append(TypeRegisteredEvent(evaluator_type=evaluator_type))

    def evaluator_type_overwritten(self, evaluator_type: str) -> None:
        self.overwritten.append(TypeOverwrittenEvent(evaluator_type=evaluator_type))

    def evaluator_failed(
        self, evaluator: str, evaluator_type: str, reason: str
    ) -> None:
        self.failures.append(
            EvaluatorFailedEvent(
                evaluator=evaluator, evaluator_type=evaluator_type, reason=reason
            )
        )

    def evaluator_cache_hit(self, evaluator: str) -> None:
        self.cache_hits.append(CacheHitEvent(evaluator=evaluator))

    def plugin_loaded(
        self, name: str, version: str, evaluator_types: list[str]
    ) -> None:
        self.plugins_loaded.append(
            PluginLoadedEvent(name=name, version=version, evaluator_types=evaluator_types)
        )

    def plugin_load_failed(self, reference: str, reason: str) -> None:
        self.plugin_failures.append(
            PluginLoadFailedEvent(reference=reference, reason=reason)
        )
