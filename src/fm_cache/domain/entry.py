"""One cached query result plus its queued optimistic patches.

The visible value is always ``server_value`` with every queued patch layered
in start order (FIFO): pending patches speculatively, confirmed ones with the
server's canonical entities merged. A confirmed patch is folded into
``server_value`` only once every earlier patch has settled, so a later writer
stays on top. A revert drops the patch and rebuilds from ``server_value``,
which keeps whatever other mutations confirmed meanwhile.
"""

import copy
import time
from dataclasses import dataclass, field
from typing import Any

from src.fm_cache.domain.patch import Patch
from src.fm_cache.domain.state import next_entry_state
from src.fm_common.enums import EntryState

CacheKey = tuple[Any, ...]


@dataclass(frozen=True)
class KeyPattern:
    """Selects cached keys by prefix, or one key when ``exact``."""

    prefix: CacheKey
    exact: bool = False

    def matches(self, key: CacheKey) -> bool:
        if self.exact:
            return key == self.prefix
        return key[: len(self.prefix)] == self.prefix


def make_key(*parts: Any) -> CacheKey:
    """Hashable key from parts; dict parts (filters) become sorted item tuples."""
    frozen: list[Any] = []
    for part in parts:
        if isinstance(part, dict):
            frozen.append(tuple(sorted((k, v) for k, v in part.items() if v is not None)))
        else:
            frozen.append(part)
    return tuple(frozen)


@dataclass
class PendingPatch:
    mutation_id: str
    patch: Patch
    snapshot: Any  # visible value when the mutation started
    confirmed: bool = False
    server_entities: list[dict[str, Any]] | None = None

    def layer(self, value: Any) -> Any:
        if self.confirmed:
            return self.patch.confirm(value, self.server_entities)
        return self.patch.apply(value)


@dataclass
class CacheEntry:
    key: CacheKey
    server_value: Any
    value: Any = None
    state: EntryState = EntryState.CONFIRMED
    pending: list[PendingPatch] = field(default_factory=list)
    stale: bool = False
    updated_at: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        self._recompute()

    def _recompute(self) -> None:
        value = self.server_value
        for p in self.pending:
            value = p.layer(value)
        self.value = value
        self.updated_at = time.monotonic()

    def _find(self, mutation_id: str) -> int:
        for i, p in enumerate(self.pending):
            if p.mutation_id == mutation_id and not p.confirmed:
                return i
        raise KeyError(f"mutation {mutation_id} not pending on {self.key!r}")

    def _fold_settled(self) -> None:
        """Move confirmed patches at the head of the queue into server_value."""
        while self.pending and self.pending[0].confirmed:
            self.server_value = self.pending.pop(0).layer(self.server_value)

    def _rebase_snapshots(self, start: int = 0) -> None:
        """Re-derive snapshots of pending[start:] from server_value and the patches before them."""
        value = self.server_value
        for i, p in enumerate(self.pending):
            if i >= start:
                p.snapshot = copy.deepcopy(value)
            value = p.layer(value)

    @property
    def unsettled(self) -> bool:
        return any(not p.confirmed for p in self.pending)

    def holds(self, mutation_id: str) -> bool:
        return any(p.mutation_id == mutation_id and not p.confirmed for p in self.pending)

    def _settle_state(self, when_idle: EntryState) -> None:
        target = EntryState.PENDING if self.unsettled else when_idle
        self.state = next_entry_state(self.state, target)

    def push(self, pending: PendingPatch) -> None:
        self.state = next_entry_state(self.state, EntryState.PENDING)
        self.pending.append(pending)
        self._recompute()

    def confirm(
        self, mutation_id: str, server_entities: list[dict[str, Any]] | None
    ) -> None:
        # stays queued behind earlier unsettled patches so start order holds
        p = self.pending[self._find(mutation_id)]
        p.confirmed = True
        p.server_entities = server_entities
        self._fold_settled()
        self._settle_state(EntryState.CONFIRMED)
        self._recompute()

    def revert(self, mutation_id: str) -> None:
        index = self._find(mutation_id)
        self.pending.pop(index)
        self._fold_settled()
        self._rebase_snapshots()
        self._settle_state(EntryState.REVERTED)
        self._recompute()

    def set_server_value(self, value: Any) -> None:
        """New server truth. Queued patches stay applied on top of it."""
        self.server_value = value
        self.stale = False
        if self.pending:
            self._rebase_snapshots()
        self._settle_state(EntryState.CONFIRMED)
        self._recompute()
