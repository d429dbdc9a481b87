"""Lifecycle state machines for cache entries and optimistic mutations.

Entry:    CONFIRMED -> PENDING -> (CONFIRMED | REVERTED)
Mutation: PENDING -> (CONFIRMED | REVERTED), terminal afterwards
"""

from src.fm_common.enums import EntryState, MutationState
from src.fm_common.errors import InvalidStateTransitionError

_ENTRY_TRANSITIONS: dict[EntryState, frozenset[EntryState]] = {
    # CONFIRMED -> CONFIRMED is a plain server refresh
    EntryState.CONFIRMED: frozenset({EntryState.PENDING, EntryState.CONFIRMED}),
    # PENDING -> PENDING: another mutation started, or one settled while others remain
    EntryState.PENDING: frozenset(
        {EntryState.PENDING, EntryState.CONFIRMED, EntryState.REVERTED}
    ),
    EntryState.REVERTED: frozenset({EntryState.PENDING, EntryState.CONFIRMED}),
}

_MUTATION_TRANSITIONS: dict[MutationState, frozenset[MutationState]] = {
    MutationState.PENDING: frozenset({MutationState.CONFIRMED, MutationState.REVERTED}),
    MutationState.CONFIRMED: frozenset(),
    MutationState.REVERTED: frozenset(),
}


def next_entry_state(current: EntryState, target: EntryState) -> EntryState:
    if target not in _ENTRY_TRANSITIONS[current]:
        raise InvalidStateTransitionError(current.value, target.value)
    return target


def next_mutation_state(current: MutationState, target: MutationState) -> MutationState:
    if target not in _MUTATION_TRANSITIONS[current]:
        raise InvalidStateTransitionError(current.value, target.value)
    return target
