# src/ix_ingest/application/schemas.py
from pydantic import BaseModel, Field

from src.ix_common.events import AnyChainEvent


class IngestRequest(BaseModel):
    """A batch of decoded events, already in chain order."""

    events: list[AnyChainEvent] = Field(..., min_length=1)


class IngestResponse(BaseModel):
    processed: int
    last_ordering_key: str
