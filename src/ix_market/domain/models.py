"""Domain models for ix_market: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class BlockInfo:
    id: str                 # block number as decimal string
    block_number: int
    timestamp: int          # unix seconds
    hash: str


@dataclass
class Subject:
    """Market state for one subject token."""

    id: str                 # token address
    name: str
    symbol: str
    decimals: int
    reserve: int = 0
    current_price: Decimal = Decimal("0")
    total_supply: int = 0
    unique_holders: int = 0
    volume: int = 0             # protocol token, cumulative
    beneficiary_fee: int = 0    # protocol token, cumulative
    protocol_fee: int = 0       # protocol token, cumulative
    beneficiary: str | None = None


@dataclass
class Summary:
    """Protocol-wide configuration singleton (id = SUMMARY)."""

    id: str
    protocol_buy_fee_pct: int = 0     # scaled by PCT_BASE
    protocol_sell_fee_pct: int = 0
    subject_buy_fee_pct: int = 0
    subject_sell_fee_pct: int = 0
    active_protocol_fee_beneficiary: str | None = None


@dataclass
class ProtocolFeeBeneficiary:
    id: str                 # beneficiary address
    beneficiary: str
    total_fees: int = 0
