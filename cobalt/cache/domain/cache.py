"""ScoringCache — TTL-bounded memo of evaluation results."""

import hashlib
import json
import re
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from cobalt.cache.domain.observer import CacheObserver
from cobalt.cache.domain.store import CacheEntry, CacheStore
from cobalt.evaluator.domain.result import EvalResult

DEFAULT_TTL = "7d"
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60.0

_TTL_PATTERN = re.compile(r"^(\d+)([dhms])$")
_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}


class CacheStats(BaseModel, frozen=True):
    size: int
    oldest_entry: float | None


def parse_ttl(ttl: str) -> float | None:
    """Convert "30s" / "15m" / "2h" / "7d" to seconds; None if unparsable."""
    match = _TTL_PATTERN.match(ttl.strip())
    if match is None:
        return None
    return float(int(match.group(1)) * _UNIT_SECONDS[match.group(2)])


def make_key(prompt: str, input: Any, output: Any) -> str:
    """Return the SHA-256 hex digest identifying a (prompt, input, output) triple."""
    digest = hashlib.sha256()
    for part in (prompt, input, output):
        digest.update(json.dumps(part, sort_keys=True, default=str).encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


class ScoringCache:
    """In-memory map from evaluation key to EvalResult with a TTL.

    Entries are advisory: a stale entry is evicted on read and reported as a
    miss. All access happens on one event loop, so there is no locking and
    concurrent writers of the same key resolve as last-write-wins.

    When a store is attached, the whole map is flushed every ``flush_every``
    writes. Flush, load and key failures are reported through the observer
    rather than raised; content that cannot be keyed is never cached.
    """

    def __init__(
        self,
        observer: CacheObserver,
        ttl: str = DEFAULT_TTL,
        store: CacheStore | None = None,
        flush_every: int = 10,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._observer = observer
        self._store = store
        self._flush_every = max(1, flush_every)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._writes_since_flush = 0

        ttl_seconds = parse_ttl(ttl)
        if ttl_seconds is None:
            ttl_seconds = DEFAULT_TTL_SECONDS
            self._observer.cache_ttl_invalid(ttl=ttl, fallback_seconds=ttl_seconds)
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, prompt: str, input: Any, output: Any) -> EvalResult | None:
        key = self._key(prompt, input, output)
        if key is None:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        return entry.result

    def set(self, prompt: str, input: Any, output: Any, result: EvalResult) -> None:
        key = self._key(prompt, input, output)
        if key is None:
            return
        self._entries[key] = CacheEntry(result=result, timestamp=self._clock())

        if self._store is None:
            return
        self._writes_since_flush += 1
        if self._writes_since_flush >= self._flush_every:
            self.flush()

    def load(self) -> None:
        """Merge persisted entries into memory, dropping expired ones."""
        if self._store is None:
            return
        try:
            persisted = self._store.load()
        except Exception as exc:
            self._observer.cache_load_failed(reason=str(exc))
            return

        expired = 0
        for key, entry in persisted.items():
            if self._is_expired(entry):
                expired += 1
                continue
            self._entries[key] = entry
        self._observer.cache_loaded(entries=len(self._entries), expired=expired)

    def flush(self) -> None:
        """Write the whole map to the store, if one is attached."""
        if self._store is None:
            return
        self._writes_since_flush = 0
        try:
            self._store.save(dict(self._entries))
        except Exception as exc:
            self._observer.cache_flush_failed(reason=str(exc))
            return
        self._observer.cache_flushed(entries=len(self._entries))

    def clear(self) -> None:
        self._entries.clear()
        self._writes_since_flush = 0

    def stats(self) -> CacheStats:
        oldest = min(
            (entry.timestamp for entry in self._entries.values()), default=None
        )
        return CacheStats(size=len(self._entries), oldest_entry=oldest)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp > self._ttl_seconds

    def _key(self, prompt: str, input: Any, output: Any) -> str | None:
        # Unhashable content (mixed-type keys, cycles) is a miss, not an error.
        try:
            return make_key(prompt, input, output)
        except (TypeError, ValueError) as exc:
            self._observer.cache_key_failed(reason=str(exc))
            return None
