"""Order domain models: pure dataclasses, no SQLAlchemy dependency.

Order is the mutable current state of an order and may disappear (cancelled
auction orders are deleted). AuctionOrder is the correlation record joining the
independent auction events of one order; it is never deleted.
"""
from dataclasses import dataclass
from decimal import Decimal

from src.ix_common.enums import AuctionOrderStatus, OrderType


@dataclass
class Order:
    id: str
    subject_token: str
    order_type: OrderType
    user: str
    portfolio: str
    block_info: str
    protocol_token: str | None = None
    protocol_token_amount: int = 0
    protocol_token_investment: Decimal = Decimal("0")
    subject_amount: int = 0
    subject_amount_left: int = 0
    price: Decimal = Decimal("0")


@dataclass
class AuctionOrder:
    id: str                                   # subject-userId-buyAmount-sellAmount
    order: str                                # Order id (may no longer exist)
    new_sell_order: str
    cancellation_sell_order: str | None = None
    claimed_from_order: str | None = None     # latest claim
    status: AuctionOrderStatus = AuctionOrderStatus.PLACED

    @property
    def is_open(self) -> bool:
        return self.status != AuctionOrderStatus.CANCELLED


# ---------------------------------------------------------------------------
# Staged intents, keyed by the position (txHash-logIndex) of their own log
# ---------------------------------------------------------------------------


@dataclass
class AuctionIntent:
    id: str
    auction_id: int
    user_id: int
    buy_amount: int
    sell_amount: int
    subject: str
    block_info: str
    tx_hash: str


@dataclass
class AuctionNewSellOrder(AuctionIntent):
    pass


@dataclass
class AuctionCancellationSellOrder(AuctionIntent):
    pass


@dataclass
class AuctionClaimedFromOrder(AuctionIntent):
    pass


# ---------------------------------------------------------------------------
# Raw protocol token movements
# ---------------------------------------------------------------------------


@dataclass
class ProtocolTransfer:
    id: str                 # txHash-logIndex
    sender: str
    recipient: str
    value: int
    block_info: str
    tx_hash: str            # AuctionTransfer id


@dataclass
class AuctionTransfer:
    """Groups every protocol token transfer of one transaction."""

    id: str                 # txHash
