"""Decoded chain events, as delivered by the event source.

Every event carries its position in the chain (block, tx hash, log index) and the
address of the emitting contract. Addresses and hashes are normalised to
lowercase hex so that composite keys built from them stay stable.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalise_hex(value: str) -> str:
    value = value.strip().lower()
    if not value.startswith("0x"):
        raise ValueError(f"expected 0x-prefixed hex string, got {value!r}")
    return value


class BlockRef(BaseModel):
    number: int = Field(..., ge=0)
    timestamp: int = Field(..., ge=0)
    hash: str

    check_hex = field_validator("hash")(_normalise_hex)


class ChainEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tx_hash: str
    log_index: int = Field(..., ge=0)
    block: BlockRef
    address: str  # emitting contract

    check_hex = field_validator("tx_hash", "address")(_normalise_hex)

    @property
    def ordering_key(self) -> str:
        """Zero-padded block-logIndex; sorts lexicographically in chain order."""
        return f"{self.block.number:012d}-{self.log_index:06d}"


# ---------------------------------------------------------------------------
# Protocol token / auction
# ---------------------------------------------------------------------------


class ProtocolTokenTransferEvent(ChainEvent):
    event_type: Literal["ProtocolTokenTransfer"] = "ProtocolTokenTransfer"
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    value: int = Field(..., ge=0)

    check_params = field_validator("sender", "recipient")(_normalise_hex)


class _AuctionIntentEvent(ChainEvent):
    auction_id: int = Field(..., ge=0)
    user_id: int = Field(..., ge=0)  # auction-internal user id, not an address
    buy_amount: int = Field(..., ge=0)
    sell_amount: int = Field(..., ge=0)
    subject: str  # subject token sold in the auction

    check_params = field_validator("subject")(_normalise_hex)


class AuctionNewSellOrderEvent(_AuctionIntentEvent):
    event_type: Literal["AuctionNewSellOrder"] = "AuctionNewSellOrder"


class AuctionCancellationSellOrderEvent(_AuctionIntentEvent):
    event_type: Literal["AuctionCancellationSellOrder"] = "AuctionCancellationSellOrder"


class AuctionClaimedFromOrderEvent(_AuctionIntentEvent):
    event_type: Literal["AuctionClaimedFromOrder"] = "AuctionClaimedFromOrder"


# ---------------------------------------------------------------------------
# Subject tokens / bonding curve
# ---------------------------------------------------------------------------


class TokenDeployedEvent(ChainEvent):
    event_type: Literal["TokenDeployed"] = "TokenDeployed"
    beneficiary: str
    token: str

    check_params = field_validator("beneficiary", "token")(_normalise_hex)


class SubjectTokenTransferEvent(ChainEvent):
    """ERC20 Transfer emitted by a subject token (event.address is the token)."""

    event_type: Literal["SubjectTokenTransfer"] = "SubjectTokenTransfer"
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    value: int = Field(..., ge=0)

    check_params = field_validator("sender", "recipient")(_normalise_hex)


class _SubjectTradeEvent(ChainEvent):
    subject: str  # subject token address
    trader: str
    protocol_amount: int = Field(..., ge=0)
    subject_amount: int = Field(..., ge=0)

    check_params = field_validator("subject", "trader")(_normalise_hex)


class SubjectSharePurchasedEvent(_SubjectTradeEvent):
    event_type: Literal["SubjectSharePurchased"] = "SubjectSharePurchased"


class SubjectShareSoldEvent(_SubjectTradeEvent):
    event_type: Literal["SubjectShareSold"] = "SubjectShareSold"


class UpdateFeesEvent(ChainEvent):
    event_type: Literal["UpdateFees"] = "UpdateFees"
    protocol_buy_fee_pct: int = Field(..., ge=0)
    protocol_sell_fee_pct: int = Field(..., ge=0)
    subject_buy_fee_pct: int = Field(..., ge=0)
    subject_sell_fee_pct: int = Field(..., ge=0)


class UpdateProtocolFeeBeneficiaryEvent(ChainEvent):
    event_type: Literal["UpdateProtocolFeeBeneficiary"] = "UpdateProtocolFeeBeneficiary"
    beneficiary: str

    check_params = field_validator("beneficiary")(_normalise_hex)


# ---------------------------------------------------------------------------
# Vesting (token lock manager)
# ---------------------------------------------------------------------------


class MasterCopyUpdatedEvent(ChainEvent):
    event_type: Literal["MasterCopyUpdated"] = "MasterCopyUpdated"
    master_copy: str

    check_params = field_validator("master_copy")(_normalise_hex)


class TokenLockCreatedEvent(ChainEvent):
    event_type: Literal["TokenLockCreated"] = "TokenLockCreated"
    contract_address: str
    init_hash: str
    beneficiary: str
    token: str
    managed_amount: int = Field(..., ge=0)
    start_time: int
    end_time: int
    periods: int
    release_start_time: int
    vesting_cliff_time: int
    revocable: int = 0

    check_params = field_validator("contract_address", "init_hash", "beneficiary", "token")(
        _normalise_hex
    )


class TokensDepositedEvent(ChainEvent):
    event_type: Literal["TokensDeposited"] = "TokensDeposited"
    sender: str
    amount: int = Field(..., ge=0)

    check_params = field_validator("sender")(_normalise_hex)


class TokensWithdrawnEvent(ChainEvent):
    event_type: Literal["TokensWithdrawn"] = "TokensWithdrawn"
    sender: str
    amount: int = Field(..., ge=0)

    check_params = field_validator("sender")(_normalise_hex)


class FunctionCallAuthEvent(ChainEvent):
    event_type: Literal["FunctionCallAuth"] = "FunctionCallAuth"
    caller: str
    sig_hash: str
    target: str
    signature: str  # human-readable, e.g. "stake(uint256)"

    check_params = field_validator("caller", "sig_hash", "target")(_normalise_hex)


class TokenDestinationAllowedEvent(ChainEvent):
    event_type: Literal["TokenDestinationAllowed"] = "TokenDestinationAllowed"
    dst: str
    allowed: bool

    check_params = field_validator("dst")(_normalise_hex)


class SubjectTokenDestinationAllowedEvent(ChainEvent):
    event_type: Literal["SubjectTokenDestinationAllowed"] = "SubjectTokenDestinationAllowed"
    dst: str
    allowed: bool

    check_params = field_validator("dst")(_normalise_hex)


class PassTokenUpdatedEvent(ChainEvent):
    event_type: Literal["PassTokenUpdated"] = "PassTokenUpdated"
    pass_token: str

    check_params = field_validator("pass_token")(_normalise_hex)


class TokenManagerUpdatedEvent(ChainEvent):
    event_type: Literal["TokenManagerUpdated"] = "TokenManagerUpdated"
    token_manager: str

    check_params = field_validator("token_manager")(_normalise_hex)


AuctionIntentEvent = Union[
    AuctionNewSellOrderEvent,
    AuctionCancellationSellOrderEvent,
    AuctionClaimedFromOrderEvent,
]

SubjectTradeEvent = Union[SubjectSharePurchasedEvent, SubjectShareSoldEvent]

AnyChainEvent = Annotated[
    Union[
        ProtocolTokenTransferEvent,
        AuctionNewSellOrderEvent,
        AuctionCancellationSellOrderEvent,
        AuctionClaimedFromOrderEvent,
        TokenDeployedEvent,
        SubjectTokenTransferEvent,
        SubjectSharePurchasedEvent,
        SubjectShareSoldEvent,
        UpdateFeesEvent,
        UpdateProtocolFeeBeneficiaryEvent,
        MasterCopyUpdatedEvent,
        TokenLockCreatedEvent,
        TokensDepositedEvent,
        TokensWithdrawnEvent,
        FunctionCallAuthEvent,
        TokenDestinationAllowedEvent,
        SubjectTokenDestinationAllowedEvent,
        PassTokenUpdatedEvent,
        TokenManagerUpdatedEvent,
    ],
    Field(discriminator="event_type"),
]
