"""In-process store of query results keyed by query identity.

Created once per application (or client session) and passed to whoever needs
it; there is no module-level instance. While a mutation is pending only the
OptimisticCacheReconciler writes to the entries it patched.

Reads return deep copies, so callers can never see or cause a partially
applied patch.
"""

import copy
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from src.fm_cache.domain.entry import CacheEntry, CacheKey, KeyPattern

logger = logging.getLogger("fm.cache")

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[CacheKey, Any], None]
KeyTarget = CacheKey | KeyPattern


def as_pattern(target: KeyTarget) -> KeyPattern:
    """Bare tuple keys select exactly one entry."""
    if isinstance(target, KeyPattern):
        return target
    return KeyPattern(tuple(target), exact=True)


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._fetchers: dict[CacheKey, Fetcher] = {}
        self._listeners: dict[CacheKey, list[Listener]] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        return copy.deepcopy(entry.value) if entry is not None else None

    def entry(self, key: CacheKey) -> CacheEntry | None:
        return self._entries.get(key)

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def set(self, key: CacheKey, value: Any) -> None:
        """Store a server response for ``key``."""
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = CacheEntry(key=key, server_value=value)
        else:
            entry.set_server_value(value)
        self.notify([key])

    async def fetch(self, key: CacheKey, fetcher: Fetcher, force: bool = False) -> Any:
        """Return the cached value, calling ``fetcher`` when missing, stale or forced.

        The fetcher is remembered so later invalidations can refetch this key.
        """
        self._fetchers[key] = fetcher
        entry = self._entries.get(key)
        if entry is not None and not entry.stale and not force:
            return self.get(key)
        value = await fetcher()
        self.set(key, value)
        return self.get(key)

    def find_all(self, target: KeyTarget) -> list[CacheKey]:
        pattern = as_pattern(target)
        return [key for key in self._entries if pattern.matches(key)]

    def resolve(self, targets: Iterable[KeyTarget]) -> list[CacheKey]:
        """All cached keys matched by any target, de-duplicated, in insertion order."""
        seen: dict[CacheKey, None] = {}
        for target in targets:
            for key in self.find_all(target):
                seen.setdefault(key, None)
        return list(seen)

    def mark_stale(self, targets: Iterable[KeyTarget]) -> list[CacheKey]:
        keys = self.resolve(targets)
        for key in keys:
            self._entries[key].stale = True
        return keys

    async def invalidate(self, targets: Iterable[KeyTarget], refetch: bool = True) -> None:
        """Mark matching entries stale; with ``refetch`` reload each one that has a fetcher.

        A failed refetch is logged and leaves the entry stale for the next read.
        """
        keys = self.mark_stale(targets)
        if not refetch:
            return
        for key in keys:
            fetcher = self._fetchers.get(key)
            if fetcher is None:
                continue
            try:
                await self.fetch(key, fetcher, force=True)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Refetch failed for %r: %s", key, exc)

    def subscribe(self, key: CacheKey, listener: Listener) -> Callable[[], None]:
        """Call ``listener(key, value)`` after every change to ``key``. Returns unsubscribe."""
        self._listeners.setdefault(key, []).append(listener)

        def _unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)

        return _unsubscribe

    def notify(self, keys: Iterable[CacheKey]) -> None:
        for key in keys:
            listeners = list(self._listeners.get(key, []))
            if not listeners:
                continue
            value = self.get(key)
            for listener in listeners:
                listener(key, value)

    def remove(self, key: CacheKey) -> None:
        self._entries.pop(key, None)
        self._fetchers.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self._fetchers.clear()
