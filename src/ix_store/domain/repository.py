# src/ix_store/domain/repository.py
"""EntityStore Protocol: the persistence contract every handler depends on.

Entities are dataclasses with a string `id`; their class is the entity kind.
Writes made while processing a batch become durable only on commit(); rollback()
discards everything since the last commit.
"""
from typing import Any, Protocol, TypeVar

E = TypeVar("E")


def kind_name(kind: type[Any]) -> str:
    """Stable name a kind is persisted under."""
    return kind.__name__


class EntityStoreProtocol(Protocol):
    async def load(self, kind: type[E], entity_id: str) -> E | None: ...

    async def save(self, entity: Any) -> None: ...

    async def delete(self, kind: type[Any], entity_id: str) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
