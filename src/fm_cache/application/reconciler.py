"""Speculative cache writes around a network mutation.

Flow for ``apply``:
  1. begin_optimistic: snapshot + patch every matching entry, synchronously
  2. await the mutation
  3a. success: confirm (merge canonical server entities), then after a cooldown
      mark the entries stale without refetching, so a refetch queued behind the
      mutation cannot overwrite the optimistic value with older data
  3b. failure: revert all entries together, force an immediate refetch, re-raise

begin/confirm/revert never await, so no reader observes a half-applied patch.
In-flight mutations cannot be cancelled; timeouts belong to the HTTP client.
"""

import asyncio
import copy
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from config.settings import settings
from src.fm_cache.application.query_cache import KeyTarget, QueryCache
from src.fm_cache.domain.entry import CacheKey, PendingPatch
from src.fm_cache.domain.patch import Patch
from src.fm_cache.domain.state import next_mutation_state
from src.fm_common.enums import MutationState

logger = logging.getLogger("fm.cache")

T = TypeVar("T")

EntityExtractor = Callable[[Any], list[dict[str, Any]] | None]


@dataclass
class PendingMutation:
    id: str
    targets: tuple[KeyTarget, ...]
    keys: tuple[CacheKey, ...]
    patch: Patch
    snapshots: dict[CacheKey, Any] = field(default_factory=dict)
    state: MutationState = MutationState.PENDING

    def transition(self, target: MutationState) -> None:
        self.state = next_mutation_state(self.state, target)


class OptimisticCacheReconciler:
    def __init__(self, cache: QueryCache, cooldown_seconds: float | None = None) -> None:
        self._cache = cache
        self._cooldown = (
            settings.INVALIDATION_COOLDOWN_SECONDS if cooldown_seconds is None else cooldown_seconds
        )
        self._in_flight: dict[str, PendingMutation] = {}
        self._timers: set[asyncio.TimerHandle] = set()

    @property
    def cache(self) -> QueryCache:
        return self._cache

    @property
    def in_flight(self) -> list[PendingMutation]:
        return list(self._in_flight.values())

    def begin_optimistic(self, targets: Iterable[KeyTarget], patch: Patch) -> PendingMutation:
        targets = tuple(targets)
        keys = tuple(self._cache.resolve(targets))
        mutation = PendingMutation(
            id=uuid.uuid4().hex, targets=targets, keys=keys, patch=patch
        )
        for key in keys:
            entry = self._cache.entry(key)
            if entry is None:
                continue
            snapshot = copy.deepcopy(entry.value)
            mutation.snapshots[key] = snapshot
            entry.push(PendingPatch(mutation.id, patch, snapshot))
        self._in_flight[mutation.id] = mutation
        logger.debug("Optimistic patch %s applied to %d entries", mutation.id, len(keys))
        self._cache.notify(keys)
        return mutation

    def confirm(
        self, mutation: PendingMutation, server_entities: list[dict[str, Any]] | None = None
    ) -> None:
        mutation.transition(MutationState.CONFIRMED)
        self._in_flight.pop(mutation.id, None)
        for key in mutation.keys:
            entry = self._cache.entry(key)
            # removed, or cleared and refetched, while in flight
            if entry is not None and entry.holds(mutation.id):
                entry.confirm(mutation.id, server_entities)
        mutation.snapshots.clear()
        self._cache.notify(mutation.keys)

    def revert(self, mutation: PendingMutation) -> None:
        """Undo ``mutation`` on every entry it touched, all at once."""
        mutation.transition(MutationState.REVERTED)
        self._in_flight.pop(mutation.id, None)
        for key in mutation.keys:
            entry = self._cache.entry(key)
            if entry is not None and entry.holds(mutation.id):
                entry.revert(mutation.id)
        self._cache.notify(mutation.keys)

    async def apply(
        self,
        targets: Iterable[KeyTarget],
        mutation_fn: Callable[[], Awaitable[T]],
        patch: Patch,
        extract_entities: EntityExtractor | None = None,
    ) -> T:
        mutation = self.begin_optimistic(targets, patch)
        try:
            result = await mutation_fn()
        except asyncio.CancelledError:
            self.revert(mutation)
            raise
        except Exception as exc:
            self.revert(mutation)
            logger.warning("Mutation %s failed, reverted %d entries: %s",
                           mutation.id, len(mutation.keys), exc)
            await self._cache.invalidate(mutation.targets, refetch=True)
            raise

        entities = extract_entities(result) if extract_entities is not None else None
        self.confirm(mutation, entities)
        self._schedule_background_invalidation(mutation.targets)
        return result

    def _schedule_background_invalidation(self, targets: tuple[KeyTarget, ...]) -> None:
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle | None = None

        def _mark_stale() -> None:
            if handle is not None:
                self._timers.discard(handle)
            keys = self._cache.mark_stale(targets)
            logger.debug("Background invalidation marked %d entries stale", len(keys))

        handle = loop.call_later(self._cooldown, _mark_stale)
        self._timers.add(handle)

    def close(self) -> None:
        """Cancel scheduled background invalidations."""
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
