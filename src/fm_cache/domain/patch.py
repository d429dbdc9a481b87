"""Patches applied to cached query results.

Cached values are JSON-like dicts holding a list of entities under a
collection name, e.g. {"products": [{"id": "p1", ...}, ...], "stats": {...}}.
Patches never mutate their input; they return a new value.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


class Patch(Protocol):
    def apply(self, value: Any) -> Any:
        """Speculative change shown while the mutation is in flight."""
        ...

    def confirm(self, value: Any, server_entities: list[dict[str, Any]] | None) -> Any:
        """Fold the server's canonical result into an already patched value."""
        ...


def _entity_id(entity: Mapping[str, Any], id_fields: tuple[str, ...]) -> str | None:
    for name in id_fields:
        value = entity.get(name)
        if value is not None:
            return str(value)
    return None


@dataclass(frozen=True)
class EntityPatch:
    """Shallow-merge ``fields`` into every entity whose id is in ``entity_ids``."""

    entity_ids: frozenset[str]
    fields: Mapping[str, Any] = field(default_factory=dict)
    collection: str = "products"
    id_fields: tuple[str, ...] = ("id", "_id")

    @classmethod
    def for_entities(
        cls,
        entity_ids: Iterable[str],
        fields: Mapping[str, Any],
        collection: str = "products",
    ) -> "EntityPatch":
        return cls(frozenset(entity_ids), dict(fields), collection)

    def _entities(self, value: Any) -> list[Any] | None:
        if not isinstance(value, Mapping):
            return None
        entities = value.get(self.collection)
        return entities if isinstance(entities, list) else None

    def apply(self, value: Any) -> Any:
        entities = self._entities(value)
        if entities is None:
            return value
        patched = [
            {**e, **self.fields}
            if isinstance(e, Mapping) and _entity_id(e, self.id_fields) in self.entity_ids
            else e
            for e in entities
        ]
        return {**value, self.collection: patched}

    def confirm(self, value: Any, server_entities: list[dict[str, Any]] | None) -> Any:
        value = self.apply(value)
        entities = self._entities(value)
        if entities is None or not server_entities:
            return value
        canonical: dict[str, dict[str, Any]] = {}
        for entity in server_entities:
            eid = _entity_id(entity, self.id_fields)
            if eid is not None:
                canonical[eid] = entity

        merged = []
        for e in entities:
            eid = _entity_id(e, self.id_fields) if isinstance(e, Mapping) else None
            merged.append({**e, **canonical[eid]} if eid in canonical else e)
        return {**value, self.collection: merged}
