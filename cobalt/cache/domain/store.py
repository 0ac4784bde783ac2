"""CacheEntry model and the CacheStore persistence port."""

from typing import Protocol

from pydantic import BaseModel

from cobalt.evaluator.domain.result import EvalResult


class CacheEntry(BaseModel, frozen=True):
    """A cached evaluation and the epoch seconds at which it was stored."""

    result: EvalResult
    timestamp: float


class CacheStore(Protocol):
    """Persists the whole cache map between experiments."""

    def load(self) -> dict[str, CacheEntry]: ...

    def save(self, entries: dict[str, CacheEntry]) -> None: ...
