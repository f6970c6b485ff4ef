"""OrderCorrelationEngine: auction order lifecycle driven by protocol token transfers.

Each protocol token Transfer looks up a staged intent at its correlation
position. Placement, cancellation and claim are checked in that order; a
transfer with no staged intent is an ordinary movement and only the raw
transfer records are written.

All lookups and checks happen before the first write, so a raised error leaves
nothing behind in the caller's unit of work beyond the raw transfer records.
"""

import logging
from decimal import Decimal

from src.ix_chain.domain.repository import ContractMetadataReaderProtocol
from src.ix_common.enums import AuctionOrderStatus, LedgerEntryType, OrderType
from src.ix_common.errors import (
    DuplicateCorrelationKeyError,
    InvalidOrderTransitionError,
    MissingCorrelationError,
)
from src.ix_common.events import ProtocolTokenTransferEvent
from src.ix_common.keys import tx_entity_id
from src.ix_ledger.application.service import (
    LedgerUpdater,
    get_or_create_portfolio,
    get_or_create_user,
)
from src.ix_market.application.service import get_or_create_block_info
from src.ix_market.domain.models import BlockInfo
from src.ix_order.domain.correlation import (
    IntentPositionFn,
    correlation_key,
    preceding_log_position,
)
from src.ix_order.domain.models import (
    AuctionCancellationSellOrder,
    AuctionClaimedFromOrder,
    AuctionNewSellOrder,
    AuctionOrder,
    AuctionTransfer,
    Order,
    ProtocolTransfer,
)
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


class OrderCorrelationEngine:
    def __init__(
        self,
        store: EntityStoreProtocol,
        reader: ContractMetadataReaderProtocol,
        ledger: LedgerUpdater | None = None,
        position_key: IntentPositionFn = preceding_log_position,
    ) -> None:
        self._store = store
        self._reader = reader
        self._ledger = ledger or LedgerUpdater(store)
        self._position_key = position_key

    async def handle_transfer(self, event: ProtocolTokenTransferEvent) -> Order | None:
        """Record the transfer and advance the auction order it completes, if any.

        Returns the Order that was placed or updated; None for a plain transfer
        and for a cancellation (the Order is deleted).
        """
        block_info = await get_or_create_block_info(self._store, event.block)
        await self._record_transfer(event, block_info)

        position = self._position_key(event.tx_hash, event.log_index)

        new_sell = await self._store.load(AuctionNewSellOrder, position)
        if new_sell is not None:
            return await self._place(event, new_sell, position, block_info)

        cancellation = await self._store.load(AuctionCancellationSellOrder, position)
        if cancellation is not None:
            await self._cancel(event, cancellation, position, block_info)
            return None

        claim = await self._store.load(AuctionClaimedFromOrder, position)
        if claim is not None:
            return await self._claim(event, claim, position, block_info)

        logger.debug("Transfer %s has no staged auction intent", tx_entity_id(event.tx_hash, event.log_index))
        return None

    async def _record_transfer(self, event: ProtocolTokenTransferEvent, block_info: BlockInfo) -> None:
        if await self._store.load(AuctionTransfer, event.tx_hash) is None:
            await self._store.save(AuctionTransfer(id=event.tx_hash))
        await self._store.save(
            ProtocolTransfer(
                id=tx_entity_id(event.tx_hash, event.log_index),
                sender=event.sender,
                recipient=event.recipient,
                value=event.value,
                block_info=block_info.id,
                tx_hash=event.tx_hash,
            )
        )

    async def _place(
        self,
        event: ProtocolTokenTransferEvent,
        intent: AuctionNewSellOrder,
        position: str,
        block_info: BlockInfo,
    ) -> Order:
        key = correlation_key(intent)
        existing = await self._store.load(AuctionOrder, key)
        if existing is not None:
            if await self._still_open(existing):
                raise DuplicateCorrelationKeyError(key, existing.order)
            logger.warning(
                "Reusing correlation key %s of %s auction order %s",
                key,
                existing.status.value,
                existing.order,
            )

        portfolio = await get_or_create_portfolio(
            self._store, self._reader, event.sender, intent.subject, event.tx_hash
        )
        user = await get_or_create_user(self._store, event.sender)

        order = Order(
            id=position,
            subject_token=intent.subject,
            order_type=OrderType.AUCTION,
            user=user.id,
            portfolio=portfolio.id,
            block_info=block_info.id,
            protocol_token=event.address,
            protocol_token_amount=event.value,
            protocol_token_investment=Decimal(event.value),
        )
        await self._store.save(order)

        user.auction_orders.append(order.id)
        user.protocol_orders.append(order.id)
        await self._ledger.apply(
            user,
            portfolio,
            event.value,
            LedgerEntryType.AUCTION_PLACEMENT,
            entry_id=tx_entity_id(event.tx_hash, event.log_index),
            reference_id=key,
            block_number=block_info.block_number,
        )

        await self._store.save(
            AuctionOrder(
                id=key,
                order=order.id,
                new_sell_order=intent.id,
                status=AuctionOrderStatus.PLACED,
            )
        )
        logger.info("Auction order %s placed by %s: %d", key, user.id, event.value)
        return order

    async def _still_open(self, auction_order: AuctionOrder) -> bool:
        """PLACED, or CLAIMED with funds left on the linked Order."""
        if auction_order.status == AuctionOrderStatus.PLACED:
            return True
        if auction_order.status == AuctionOrderStatus.CLAIMED:
            order = await self._store.load(Order, auction_order.order)
            return order is not None and order.protocol_token_amount > 0
        return False

    async def _load_open_auction_order(self, key: str, position: str, action: str) -> AuctionOrder:
        auction_order = await self._store.load(AuctionOrder, key)
        if auction_order is None:
            raise MissingCorrelationError(key, position, f"No auction order to be {action}")
        if not auction_order.is_open:
            raise InvalidOrderTransitionError(key, auction_order.status.value, action)
        return auction_order

    async def _cancel(
        self,
        event: ProtocolTokenTransferEvent,
        intent: AuctionCancellationSellOrder,
        position: str,
        block_info: BlockInfo,
    ) -> None:
        key = correlation_key(intent)
        auction_order = await self._load_open_auction_order(key, position, "cancelled")

        portfolio = await get_or_create_portfolio(
            self._store, self._reader, event.recipient, intent.subject, event.tx_hash
        )
        user = await get_or_create_user(self._store, event.recipient)

        auction_order.cancellation_sell_order = intent.id
        auction_order.status = AuctionOrderStatus.CANCELLED
        await self._store.save(auction_order)

        if auction_order.order in user.auction_orders:
            user.auction_orders.remove(auction_order.order)
        await self._ledger.apply(
            user,
            portfolio,
            -event.value,
            LedgerEntryType.AUCTION_CANCELLATION,
            entry_id=tx_entity_id(event.tx_hash, event.log_index),
            reference_id=key,
            block_number=block_info.block_number,
        )

        await self._store.delete(Order, auction_order.order)
        logger.info("Auction order %s cancelled, refunded %s: %d", key, user.id, event.value)

    async def _claim(
        self,
        event: ProtocolTokenTransferEvent,
        intent: AuctionClaimedFromOrder,
        position: str,
        block_info: BlockInfo,
    ) -> Order:
        key = correlation_key(intent)
        auction_order = await self._load_open_auction_order(key, position, "claimed")
        order = await self._store.load(Order, auction_order.order)
        if order is None:
            raise MissingCorrelationError(key, position, f"Order {auction_order.order} missing for claim")

        portfolio = await get_or_create_portfolio(
            self._store, self._reader, event.recipient, intent.subject, event.tx_hash
        )
        user = await get_or_create_user(self._store, event.recipient)

        order.protocol_token_amount -= event.value
        await self._store.save(order)

        auction_order.claimed_from_order = intent.id
        auction_order.status = AuctionOrderStatus.CLAIMED
        await self._store.save(auction_order)

        await self._ledger.apply(
            user,
            portfolio,
            -event.value,
            LedgerEntryType.AUCTION_CLAIM_REFUND,
            entry_id=tx_entity_id(event.tx_hash, event.log_index),
            reference_id=key,
            block_number=block_info.block_number,
        )
        logger.info(
            "Auction order %s claimed, refunded %s: %d (left %d)",
            key,
            user.id,
            event.value,
            order.protocol_token_amount,
        )
        return order
