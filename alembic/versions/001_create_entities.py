"""001: create entities table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE entities (
            kind            VARCHAR(64)     NOT NULL,
            id              VARCHAR(256)    NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT pk_entities PRIMARY KEY (kind, id)
        );
    """)
    op.execute("CREATE INDEX idx_entities_kind ON entities (kind, updated_at DESC);")
    op.execute("""
        CREATE INDEX idx_entities_ledger_user
        ON entities ((payload->>'user'))
        WHERE kind = 'LedgerEntry';
    """)
    op.execute("COMMENT ON TABLE entities IS 'Indexed entities, one JSONB payload per (kind, id)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS entities CASCADE;")
