"""CacheObserver port — domain events emitted by the scoring cache."""

from typing import Protocol


class CacheObserver(Protocol):
    """Observer port for scoring cache events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def cache_ttl_invalid(self, ttl: str, fallback_seconds: float) -> None: ...

    def cache_loaded(self, entries: int, expired: int) -> None: ...

    def cache_load_failed(self, reason: str) -> None: ...

    def cache_flushed(self, entries: int) -> None: ...

    def cache_flush_failed(self, reason: str) -> None: ...

    def cache_key_failed(self, reason: str) -> None: ...
