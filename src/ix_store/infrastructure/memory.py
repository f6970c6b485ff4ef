"""InMemoryEntityStore: EntityStoreProtocol backed by dicts.

Used by unit tests and dry runs. Entities are deep-copied on the way in and out,
so a handler that mutates an entity without saving it has no effect, exactly as
with the SQL store.
"""

import copy
from typing import Any, TypeVar

from src.ix_store.domain.repository import kind_name

E = TypeVar("E")

_DELETED = object()


class InMemoryEntityStore:
    def __init__(self) -> None:
        self._committed: dict[tuple[str, str], Any] = {}
        self._pending: dict[tuple[str, str], Any] = {}

    async def load(self, kind: type[E], entity_id: str) -> E | None:
        key = (kind_name(kind), entity_id)
        value = self._pending.get(key, self._committed.get(key))
        if value is None or value is _DELETED:
            return None
        return copy.deepcopy(value)

    async def save(self, entity: Any) -> None:
        self._pending[(kind_name(type(entity)), entity.id)] = copy.deepcopy(entity)

    async def delete(self, kind: type[Any], entity_id: str) -> None:
        self._pending[(kind_name(kind), entity_id)] = _DELETED

    async def commit(self) -> None:
        for key, value in self._pending.items():
            if value is _DELETED:
                self._committed.pop(key, None)
            else:
                self._committed[key] = value
        self._pending.clear()

    async def rollback(self) -> None:
        self._pending.clear()

    def entities(self, kind: type[E]) -> list[E]:
        """All live entities of a kind, pending writes included (sorted by id)."""
        name = kind_name(kind)
        merged = {k: v for k, v in self._committed.items() if k[0] == name}
        merged.update({k: v for k, v in self._pending.items() if k[0] == name})
        return [
            copy.deepcopy(value)
            for key, value in sorted(merged.items())
            if value is not _DELETED
        ]
