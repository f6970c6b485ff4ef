# src/ix_ingest/application/service.py
"""Batch ingestion: one unit of work per batch.

The batch is committed once after every event applied; any failure rolls the
whole batch back so the store never holds a partially applied event.
"""

import logging
from collections.abc import Sequence

from src.ix_common.events import ChainEvent
from src.ix_ingest.application.context import IndexerContext
from src.ix_ingest.application.processor import EventProcessor
from src.ix_ingest.application.schemas import IngestResponse

logger = logging.getLogger(__name__)


async def ingest_events(events: Sequence[ChainEvent], ctx: IndexerContext) -> IngestResponse:
    processor = EventProcessor(ctx)
    try:
        processed = await processor.process_batch(events)
        await ctx.store.commit()
    except Exception:
        await ctx.store.rollback()
        logger.warning("Batch of %d events rolled back", len(events))
        raise

    last_key = events[-1].ordering_key if events else ""
    logger.info("Ingested %d events up to %s", processed, last_key)
    return IngestResponse(processed=processed, last_ordering_key=last_key)
