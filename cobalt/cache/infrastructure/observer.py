"""Structlog implementation of the CacheObserver port."""

import structlog


class StructlogCacheObserver:
    """Delegates scoring cache events to structlog.

    Satisfies the CacheObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def cache_ttl_invalid(self, ttl: str, fallback_seconds: float) -> None:
        self._log.warning(
            "cache.ttl_invalid", ttl=ttl, fallback_seconds=fallback_seconds
        )

    def cache_loaded(self, entries: int, expired: int) -> None:
        self._log.info("cache.loaded", entries=entries, expired=expired)

    def cache_load_failed(self, reason: str) -> None:
        self._log.warning("cache.load_failed", reason=reason)

    def cache_flushed(self, entries: int) -> None:
        self._log.debug("cache.flushed", entries=entries)

    def cache_flush_failed(self, reason: str) -> None:
        self._log.warning("cache.flush_failed", reason=reason)

    def cache_key_failed(self, reason: str) -> None:
        self._log.warning("cache.key_failed", reason=reason)
