"""Global enums: values are persisted inside entity payloads, never rename them."""

from enum import Enum


class OrderType(str, Enum):
    SELL = "SELL"
    BUY = "BUY"
    AUCTION = "AUCTION"


class AuctionOrderStatus(str, Enum):
    """Lifecycle of an auction order as seen by its correlation record."""
    PLACED = "PLACED"
    CLAIMED = "CLAIMED"
    CANCELLED = "CANCELLED"


class LedgerEntryType(str, Enum):
    # Auction order lifecycle (protocol token committed / returned)
    AUCTION_PLACEMENT = "AUCTION_PLACEMENT"
    AUCTION_CANCELLATION = "AUCTION_CANCELLATION"
    AUCTION_CLAIM_REFUND = "AUCTION_CLAIM_REFUND"


class Revocability(str, Enum):
    NOT_SET = "NotSet"
    ENABLED = "Enabled"
    DISABLED = "Disabled"

    @classmethod
    def from_code(cls, code: int) -> "Revocability":
        """Map the on-chain uint8 (0=NotSet, 1=Enabled, anything else=Disabled)."""
        if code == 0:
            return cls.NOT_SET
        if code == 1:
            return cls.ENABLED
        return cls.DISABLED


class ContractTemplate(str, Enum):
    """Dynamically watched contract kinds."""
    SUBJECT_TOKEN = "SubjectToken"
    TOKEN_LOCK_WALLET = "TokenLockWallet"
