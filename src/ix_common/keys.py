"""Composite entity ids.

Ids are joined with a single "-" in a fixed operand order. Existing data is keyed
this way, so neither the separator nor the order may change.
"""

KEY_SEPARATOR = "-"


def join_key(*parts: object) -> str:
    return KEY_SEPARATOR.join(str(part) for part in parts)


def tx_entity_id(tx_hash: str, log_index: int) -> str:
    """Id of an entity created by one log: txHash-logIndex."""
    return join_key(tx_hash, log_index)


def portfolio_id(user_address: str, subject_address: str) -> str:
    return join_key(user_address, subject_address)


def snapshot_id(subject_id: str, bucket_end: int) -> str:
    return join_key(subject_id, bucket_end)


def auction_order_id(subject: str, user_id: int, buy_amount: int, sell_amount: int) -> str:
    """Correlation key shared by every event of one auction order."""
    return join_key(subject, user_id, buy_amount, sell_amount)


def authorized_function_id(signature: str, manager_address: str) -> str:
    return join_key(signature, manager_address)
