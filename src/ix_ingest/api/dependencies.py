"""FastAPI dependencies wiring the indexer collaborators per request.

Usage in a router:
    from src.ix_ingest.api.dependencies import get_indexer_context

    @router.post("/events")
    async def ingest(ctx: IndexerContext = Depends(get_indexer_context)):
        ...
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ix_chain.infrastructure.contract_registry import StoreContractRegistry
from src.ix_chain.infrastructure.metadata_reader import Web3MetadataReader
from src.ix_common.database import get_db_session
from src.ix_ingest.application.context import IndexerContext
from src.ix_order.application.intents import IntentFilter
from src.ix_store.infrastructure.persistence import SqlEntityStore


@lru_cache(maxsize=1)
def get_metadata_reader() -> Web3MetadataReader:
    """One RPC provider per process."""
    return Web3MetadataReader(settings.RPC_URL, settings.RPC_TIMEOUT_SECONDS)


def get_intent_filter() -> IntentFilter:
    return IntentFilter.from_lists(settings.IGNORED_SUBJECT_TOKENS, settings.IGNORED_AUCTION_IDS)


async def get_indexer_context(
    db: AsyncSession = Depends(get_db_session),
) -> IndexerContext:
    store = SqlEntityStore(db)
    return IndexerContext(
        store=store,
        metadata_reader=get_metadata_reader(),
        watcher=StoreContractRegistry(store),
        intent_filter=get_intent_filter(),
    )
