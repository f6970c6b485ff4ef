# src/ix_store/infrastructure/persistence.py
"""SqlEntityStore: EntityStoreProtocol over the `entities` table, raw SQL.

One row per (kind, id) with the entity as a JSONB payload.

Transaction ownership: the session's transaction spans the whole ingest batch.
commit()/rollback() are called by the ingest service, never by handlers.
"""
from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ix_store.domain.repository import kind_name
from src.ix_store.infrastructure.codec import decode_entity, encode_entity

E = TypeVar("E")

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_LOAD_ENTITY_SQL = text("""
    SELECT payload
    FROM entities
    WHERE kind = :kind AND id = :id
""")

_UPSERT_ENTITY_SQL = text("""
    INSERT INTO entities (kind, id, payload)
    VALUES (:kind, :id, CAST(:payload AS JSONB))
    ON CONFLICT (kind, id) DO UPDATE
        SET payload = EXCLUDED.payload,
            updated_at = NOW()
""")

_DELETE_ENTITY_SQL = text("""
    DELETE FROM entities
    WHERE kind = :kind AND id = :id
""")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlEntityStore:
    """Concrete implementation of EntityStoreProtocol bound to one AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def load(self, kind: type[E], entity_id: str) -> E | None:
        result = await self._db.execute(
            _LOAD_ENTITY_SQL, {"kind": kind_name(kind), "id": entity_id}
        )
        row = result.fetchone()
        return decode_entity(kind, row.payload) if row else None

    async def save(self, entity: Any) -> None:
        await self._db.execute(
            _UPSERT_ENTITY_SQL,
            {
                "kind": kind_name(type(entity)),
                "id": entity.id,
                "payload": encode_entity(entity),
            },
        )

    async def delete(self, kind: type[Any], entity_id: str) -> None:
        await self._db.execute(
            _DELETE_ENTITY_SQL, {"kind": kind_name(kind), "id": entity_id}
        )

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
