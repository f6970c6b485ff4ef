"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from src.ix_chain.infrastructure.contract_registry import StoreContractRegistry
from src.ix_common.errors import ContractReadError
from src.ix_common.events import (
    AuctionCancellationSellOrderEvent,
    AuctionClaimedFromOrderEvent,
    AuctionNewSellOrderEvent,
    BlockRef,
    ProtocolTokenTransferEvent,
    SubjectSharePurchasedEvent,
    SubjectShareSoldEvent,
    SubjectTokenTransferEvent,
    TokenDeployedEvent,
    UpdateFeesEvent,
    UpdateProtocolFeeBeneficiaryEvent,
)
from src.ix_ingest.api.dependencies import get_indexer_context
from src.ix_ingest.application.context import IndexerContext
from src.ix_store.infrastructure.memory import InMemoryEntityStore
from src.main import app

PROTOCOL_TOKEN = "0x" + "e1" * 20
AUCTION = "0x" + "ac" * 20
SUBJECT = "0x" + "5b" * 20
TOKEN_MANAGER = "0x" + "7e" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
CREATOR = "0x" + "c4" * 20
BLOCK_TS = 1_700_000_000


class FakeMetadataReader:
    """ContractMetadataReaderProtocol fake; counts reads, optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.reads: list[tuple[str, str]] = []

    async def _read(self, address: str, fn: str, value: Any) -> Any:
        self.reads.append((address, fn))
        if self.fail:
            raise ContractReadError(address, f"{fn}() failed: execution reverted")
        return value

    async def name(self, token_address: str) -> str:
        return await self._read(token_address, "name", "Subject Token")

    async def symbol(self, token_address: str) -> str:
        return await self._read(token_address, "symbol", "SBJ")

    async def decimals(self, token_address: str) -> int:
        return await self._read(token_address, "decimals", 18)


class EventFactory:
    """Builds decoded events with sensible defaults for one chain position."""

    PROTOCOL_TOKEN = PROTOCOL_TOKEN
    AUCTION = AUCTION
    SUBJECT = SUBJECT
    TOKEN_MANAGER = TOKEN_MANAGER
    ALICE = ALICE
    BOB = BOB
    CREATOR = CREATOR
    BLOCK_TS = BLOCK_TS

    def block(self, number: int = 100, timestamp: int = BLOCK_TS) -> BlockRef:
        return BlockRef(number=number, timestamp=timestamp, hash="0x" + f"{number:064x}")

    @staticmethod
    def tx(n: int) -> str:
        return "0x" + f"{n:064x}"

    def _position(self, tx_hash: str, log_index: int, block: int, timestamp: int) -> dict[str, Any]:
        return {
            "tx_hash": tx_hash,
            "log_index": log_index,
            "block": self.block(block, timestamp),
        }

    def transfer(
        self,
        sender: str,
        recipient: str,
        value: int,
        tx_hash: str,
        log_index: int,
        block: int = 100,
        timestamp: int = BLOCK_TS,
    ) -> ProtocolTokenTransferEvent:
        return ProtocolTokenTransferEvent(
            **self._position(tx_hash, log_index, block, timestamp),
            address=PROTOCOL_TOKEN,
            sender=sender,
            recipient=recipient,
            value=value,
        )

    def _intent(self, cls: type, tx_hash: str, log_index: int, **kwargs: Any) -> Any:
        params = {
            "auction_id": 1,
            "user_id": 7,
            "buy_amount": 10,
            "sell_amount": 20,
            "subject": SUBJECT,
            "block": 100,
            "timestamp": BLOCK_TS,
        }
        params.update(kwargs)
        block = params.pop("block")
        timestamp = params.pop("timestamp")
        return cls(**self._position(tx_hash, log_index, block, timestamp), address=AUCTION, **params)

    def new_sell(self, tx_hash: str, log_index: int, **kwargs: Any) -> AuctionNewSellOrderEvent:
        return self._intent(AuctionNewSellOrderEvent, tx_hash, log_index, **kwargs)

    def cancellation(
        self, tx_hash: str, log_index: int, **kwargs: Any
    ) -> AuctionCancellationSellOrderEvent:
        return self._intent(AuctionCancellationSellOrderEvent, tx_hash, log_index, **kwargs)

    def claim(self, tx_hash: str, log_index: int, **kwargs: Any) -> AuctionClaimedFromOrderEvent:
        return self._intent(AuctionClaimedFromOrderEvent, tx_hash, log_index, **kwargs)

    def token_deployed(
        self, tx_hash: str, token: str = SUBJECT, beneficiary: str = CREATOR
    ) -> TokenDeployedEvent:
        return TokenDeployedEvent(
            **self._position(tx_hash, 0, 100, BLOCK_TS),
            address=TOKEN_MANAGER,
            beneficiary=beneficiary,
            token=token,
        )

    def subject_transfer(
        self,
        sender: str,
        recipient: str,
        value: int,
        tx_hash: str,
        log_index: int = 0,
        timestamp: int = BLOCK_TS,
    ) -> SubjectTokenTransferEvent:
        return SubjectTokenTransferEvent(
            **self._position(tx_hash, log_index, 100, timestamp),
            address=SUBJECT,
            sender=sender,
            recipient=recipient,
            value=value,
        )

    def purchase(
        self, trader: str, protocol_amount: int, subject_amount: int, tx_hash: str, log_index: int = 0
    ) -> SubjectSharePurchasedEvent:
        return SubjectSharePurchasedEvent(
            **self._position(tx_hash, log_index, 100, BLOCK_TS),
            address=TOKEN_MANAGER,
            subject=SUBJECT,
            trader=trader,
            protocol_amount=protocol_amount,
            subject_amount=subject_amount,
        )

    def sale(
        self, trader: str, protocol_amount: int, subject_amount: int, tx_hash: str, log_index: int = 0
    ) -> SubjectShareSoldEvent:
        return SubjectShareSoldEvent(
            **self._position(tx_hash, log_index, 100, BLOCK_TS),
            address=TOKEN_MANAGER,
            subject=SUBJECT,
            trader=trader,
            protocol_amount=protocol_amount,
            subject_amount=subject_amount,
        )

    def update_fees(
        self,
        protocol_buy: int = 0,
        protocol_sell: int = 0,
        subject_buy: int = 0,
        subject_sell: int = 0,
        tx_hash: str = "0x" + "f0" * 32,
    ) -> UpdateFeesEvent:
        return UpdateFeesEvent(
            **self._position(tx_hash, 0, 99, BLOCK_TS),
            address=TOKEN_MANAGER,
            protocol_buy_fee_pct=protocol_buy,
            protocol_sell_fee_pct=protocol_sell,
            subject_buy_fee_pct=subject_buy,
            subject_sell_fee_pct=subject_sell,
        )

    def new_beneficiary(
        self, beneficiary: str, tx_hash: str = "0x" + "f1" * 32
    ) -> UpdateProtocolFeeBeneficiaryEvent:
        return UpdateProtocolFeeBeneficiaryEvent(
            **self._position(tx_hash, 1, 99, BLOCK_TS),
            address=TOKEN_MANAGER,
            beneficiary=beneficiary,
        )


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def reader() -> FakeMetadataReader:
    return FakeMetadataReader()


@pytest.fixture
def events() -> EventFactory:
    return EventFactory()


@pytest.fixture
def ctx(store: InMemoryEntityStore, reader: FakeMetadataReader) -> IndexerContext:
    return IndexerContext(store=store, metadata_reader=reader, watcher=StoreContractRegistry(store))


@pytest.fixture
async def client(ctx: IndexerContext) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints against the in-memory store."""

    async def _ctx_override() -> IndexerContext:
        return ctx

    app.dependency_overrides[get_indexer_context] = _ctx_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
