"""Correlation keys joining a protocol token transfer to a staged auction intent.

The auction contract logs its intent event immediately before the matching
protocol token Transfer in the same transaction, so the intent sits at
txHash-(logIndex-1). The engine takes the position function as a parameter;
an explicit event id carried in the payload can replace it without touching
the state machine.
"""
from collections.abc import Callable

from src.ix_common.keys import auction_order_id, tx_entity_id
from src.ix_order.domain.models import AuctionIntent

IntentPositionFn = Callable[[str, int], str]


def preceding_log_position(tx_hash: str, log_index: int) -> str:
    return tx_entity_id(tx_hash, log_index - 1)


def correlation_key(intent: AuctionIntent) -> str:
    return auction_order_id(intent.subject, intent.user_id, intent.buy_amount, intent.sell_amount)
