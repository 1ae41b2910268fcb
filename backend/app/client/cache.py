"""
Client-side query cache mirroring server state
"""
import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False


# key -> entry as it was, or None when the key was not cached
Snapshot = Dict[str, Optional[CacheEntry]]


class QueryCache:
    """
    Mapping from query key to cached value plus a staleness flag.

    Mutations go through snapshot/apply/rollback so an optimistic update can be
    undone exactly; invalidate marks entries stale so the next fetch reloads.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def get_data(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        return entry.value if entry is not None else default

    def is_stale(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def commit(self, key: str, value: Any) -> None:
        """Store a server-confirmed value as fresh"""
        self._entries[key] = CacheEntry(value=value)

    def apply(self, key: str, updater: Callable[[Any], Any], create: bool = True) -> None:
        """Apply an optimistic change to one entry, keeping its staleness"""
        entry = self._entries.get(key)
        if entry is None:
            if create:
                self._entries[key] = CacheEntry(value=updater(None))
            return
        entry.value = updater(entry.value)

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            entry = self._entries.get(key)
            if entry is not None:
                entry.stale = True

    def invalidate_prefix(self, prefix: str) -> None:
        self.invalidate(*[key for key in self._entries if key.startswith(prefix)])

    def snapshot(self, keys: Iterable[str]) -> Snapshot:
        return {key: copy.deepcopy(self._entries.get(key)) for key in keys}

    def rollback(self, snapshot: Snapshot) -> None:
        """Put every snapshotted key back exactly as it was"""
        for key, entry in snapshot.items():
            if entry is None:
                self._entries.pop(key, None)
            else:
                self._entries[key] = copy.deepcopy(entry)

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value, loading it first when missing or stale"""
        if not self.is_stale(key):
            return self._entries[key].value

        logger.debug(f"Refetching {key}")
        value = await loader()
        self.commit(key, value)
        return value
