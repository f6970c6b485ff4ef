"""Auction intent staging.

Auction events do not move value themselves; they are recorded under their own
position (txHash-logIndex) and resolved later by the protocol token transfer
logged right after them.
"""

import logging
from dataclasses import dataclass, field

from src.ix_common.events import (
    AuctionCancellationSellOrderEvent,
    AuctionClaimedFromOrderEvent,
    AuctionIntentEvent,
    AuctionNewSellOrderEvent,
)
from src.ix_common.keys import tx_entity_id
from src.ix_market.application.service import get_or_create_block_info
from src.ix_order.domain.models import (
    AuctionCancellationSellOrder,
    AuctionClaimedFromOrder,
    AuctionIntent,
    AuctionNewSellOrder,
)
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)

_INTENT_KINDS: dict[type, type[AuctionIntent]] = {
    AuctionNewSellOrderEvent: AuctionNewSellOrder,
    AuctionCancellationSellOrderEvent: AuctionCancellationSellOrder,
    AuctionClaimedFromOrderEvent: AuctionClaimedFromOrder,
}


@dataclass(frozen=True)
class IntentFilter:
    """Subjects and auctions whose intents are never staged."""

    ignored_subjects: frozenset[str] = field(default_factory=frozenset)
    ignored_auction_ids: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def from_lists(cls, subjects: list[str], auction_ids: list[int]) -> "IntentFilter":
        return cls(
            ignored_subjects=frozenset(s.lower() for s in subjects),
            ignored_auction_ids=frozenset(auction_ids),
        )

    def accepts(self, event: AuctionIntentEvent) -> bool:
        return (
            event.subject not in self.ignored_subjects
            and event.auction_id not in self.ignored_auction_ids
        )


async def stage_intent(
    store: EntityStoreProtocol,
    event: AuctionIntentEvent,
    intent_filter: IntentFilter | None = None,
) -> AuctionIntent | None:
    if intent_filter is not None and not intent_filter.accepts(event):
        logger.info(
            "Skipping %s for auction %d subject %s (ignored)",
            event.event_type,
            event.auction_id,
            event.subject,
        )
        return None

    block_info = await get_or_create_block_info(store, event.block)
    intent_cls = _INTENT_KINDS[type(event)]
    intent = intent_cls(
        id=tx_entity_id(event.tx_hash, event.log_index),
        auction_id=event.auction_id,
        user_id=event.user_id,
        buy_amount=event.buy_amount,
        sell_amount=event.sell_amount,
        subject=event.subject,
        block_info=block_info.id,
        tx_hash=event.tx_hash,
    )
    await store.save(intent)
    logger.debug("Staged %s at %s", intent_cls.__name__, intent.id)
    return intent
