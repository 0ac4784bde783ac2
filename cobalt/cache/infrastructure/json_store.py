"""JsonFileCacheStore — persists the scoring cache as one JSON document."""

import json
from pathlib import Path

from pydantic import TypeAdapter

from cobalt.cache.domain.store import CacheEntry

_ENTRIES = TypeAdapter(dict[str, CacheEntry])


class JsonFileCacheStore:
    """Reads and writes ``{hash: {result, timestamp}}`` at a fixed path.

    Satisfies the CacheStore protocol structurally. A missing file loads as
    an empty map.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, CacheEntry]:
        if not self._path.exists():
            return {}
        return _ENTRIES.validate_json(self._path.read_bytes())

    def save(self, entries: dict[str, CacheEntry]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: entry.model_dump(mode="json") for key, entry in entries.items()}
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
