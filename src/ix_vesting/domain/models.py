"""Domain models for ix_vesting: token lock manager, wallets, authorized calls."""

from dataclasses import dataclass, field

from src.ix_common.enums import Revocability


@dataclass
class TokenLockManager:
    id: str                          # manager contract address
    master_copy: str | None = None
    tokens: int = 0                  # deposited minus withdrawn
    token_lock_count: int = 0
    token_destinations: list[str] = field(default_factory=list)
    subject_token_destinations: list[str] = field(default_factory=list)
    pass_token: str | None = None
    token_manager: str | None = None


@dataclass
class TokenLockWallet:
    id: str                          # wallet contract address
    manager: str
    init_hash: str
    beneficiary: str
    token: str
    managed_amount: int
    balance: int
    start_time: int
    end_time: int
    periods: int
    release_start_time: int
    vesting_cliff_time: int
    revocable: Revocability
    block_number_created: int
    tx_hash: str
    token_destinations_approved: bool = False
    tokens_withdrawn: int = 0
    tokens_revoked: int = 0
    tokens_released: int = 0
    lock_accepted: bool = False


@dataclass
class AuthorizedFunction:
    id: str                          # signature-manager
    sig: str
    target: str
    sig_hash: str
    manager: str


@dataclass
class VestingSummary:
    id: str
    total_managed: int = 0
