"""SQLAlchemy ORM model for the entities table.

Used for type reference only: persistence.py uses raw text() SQL.
Alembic migration 001_create_entities.py is the authoritative DDL source.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.ix_common.database import Base


class EntityORM(Base):
    __tablename__ = "entities"

    kind: Mapped[str] = mapped_column(Text, primary_key=True)
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)
