"""StoreContractRegistry: persists watched contract addresses.

The event source reads the WatchedContract rows to extend its log filter; the
indexer itself never queries them back.
"""

import logging

from src.ix_chain.domain.models import WatchedContract
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


class StoreContractRegistry:
    """Concrete implementation of ContractWatcherProtocol."""

    def __init__(self, store: EntityStoreProtocol) -> None:
        self._store = store

    async def watch(
        self, address: str, template: str, block_number: int | None = None
    ) -> None:
        existing = await self._store.load(WatchedContract, address)
        if existing is not None:
            return
        await self._store.save(
            WatchedContract(id=address, template=template, created_at_block=block_number)
        )
        logger.info("Watching %s contract %s from block %s", template, address, block_number)
