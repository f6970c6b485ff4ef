"""Domain models for ix_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field


@dataclass
class User:
    id: str                              # address
    protocol_token_spent: int = 0        # signed, never clamped
    buy_orders: list[str] = field(default_factory=list)
    sell_orders: list[str] = field(default_factory=list)
    auction_orders: list[str] = field(default_factory=list)
    protocol_orders: list[str] = field(default_factory=list)


@dataclass
class Portfolio:
    id: str                              # user-subject
    user: str
    subject: str
    balance: int = 0                     # subject token units
    protocol_token_spent: int = 0        # signed, mirrors the user's deltas for this subject


@dataclass
class LedgerEntry:
    """Append-only record of one protocol_token_spent delta."""

    id: str                              # txHash-logIndex of the transfer
    user: str
    portfolio: str
    entry_type: str                      # LedgerEntryType value
    amount: int                          # signed delta
    user_spent_after: int
    portfolio_spent_after: int
    reference_id: str | None = None      # order id
    block_number: int | None = None
