# tests/unit/test_market_subjects.py
"""Subject token handlers: deployment, transfers, bonding-curve trades."""
from decimal import Decimal
from typing import Any

import pytest

from src.ix_chain.domain.models import WatchedContract
from src.ix_chain.infrastructure.contract_registry import StoreContractRegistry
from src.ix_clearing.domain.fee import FeeSchedule
from src.ix_common.constants import ZERO_ADDRESS
from src.ix_common.enums import ContractTemplate, OrderType
from src.ix_common.keys import portfolio_id, tx_entity_id
from src.ix_ledger.domain.models import Portfolio, User
from src.ix_market.application.service import handle_fees_updated, handle_new_beneficiary
from src.ix_market.application.subjects import (
    handle_subject_token_transfer,
    handle_subject_trade,
    handle_token_deployed,
)
from src.ix_market.domain.models import ProtocolFeeBeneficiary, Subject
from src.ix_order.domain.models import Order
from src.ix_snapshot.domain.models import SubjectHourlySnapshot
from src.ix_store.infrastructure.memory import InMemoryEntityStore

FIVE_PCT = 5 * 10**16
TEN_PCT = 10**17

SCHEDULE = FeeSchedule(
    protocol_buy_fee_pct=FIVE_PCT,
    protocol_sell_fee_pct=FIVE_PCT,
    subject_buy_fee_pct=TEN_PCT,
    subject_sell_fee_pct=FIVE_PCT,
)


async def _balance(store: InMemoryEntityStore, user: str, subject: str) -> int:
    portfolio = await store.load(Portfolio, portfolio_id(user, subject))
    assert portfolio is not None
    return portfolio.balance


class TestTokenDeployed:
    @pytest.mark.asyncio
    async def test_creates_subject_and_watches_token(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        subject = await handle_token_deployed(
            store, reader, StoreContractRegistry(store), events.token_deployed(events.tx(1))
        )

        assert subject.beneficiary == events.CREATOR
        assert await store.load(User, events.CREATOR) is not None
        watched = await store.load(WatchedContract, events.SUBJECT)
        assert watched is not None
        assert watched.template == ContractTemplate.SUBJECT_TOKEN.value
        assert watched.created_at_block == 100
        assert len(store.entities(SubjectHourlySnapshot)) == 1


class TestSubjectTokenTransfer:
    @pytest.mark.asyncio
    async def test_mint_transfer_burn(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        await handle_subject_token_transfer(
            store, reader, events.subject_transfer(ZERO_ADDRESS, events.ALICE, 100, events.tx(1))
        )
        subject = await store.load(Subject, events.SUBJECT)
        assert subject is not None
        assert subject.total_supply == 100
        assert subject.unique_holders == 1

        subject = await handle_subject_token_transfer(
            store, reader, events.subject_transfer(events.ALICE, events.BOB, 60, events.tx(2))
        )
        assert subject.unique_holders == 2
        assert await _balance(store, events.ALICE, events.SUBJECT) == 40
        assert await _balance(store, events.BOB, events.SUBJECT) == 60

        subject = await handle_subject_token_transfer(
            store, reader, events.subject_transfer(events.ALICE, events.BOB, 40, events.tx(3))
        )
        assert subject.unique_holders == 1

        subject = await handle_subject_token_transfer(
            store, reader, events.subject_transfer(events.BOB, ZERO_ADDRESS, 100, events.tx(4))
        )
        assert subject.total_supply == 0
        assert subject.unique_holders == 0

    @pytest.mark.asyncio
    async def test_self_transfer_keeps_holder_count(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        await handle_subject_token_transfer(
            store, reader, events.subject_transfer(ZERO_ADDRESS, events.ALICE, 10, events.tx(1))
        )
        subject = await handle_subject_token_transfer(
            store, reader, events.subject_transfer(events.ALICE, events.ALICE, 10, events.tx(2))
        )
        assert subject.unique_holders == 1
        assert await _balance(store, events.ALICE, events.SUBJECT) == 10


class TestSubjectTrade:
    @pytest.mark.asyncio
    async def test_buy_applies_buy_side_fees(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        order = await handle_subject_trade(
            store, reader, SCHEDULE, events.purchase(events.ALICE, 1000, 10, events.tx(1))
        )

        assert order.id == tx_entity_id(events.tx(1), 0)
        assert order.order_type == OrderType.BUY
        assert order.protocol_token is None
        assert order.protocol_token_investment == Decimal(850)
        assert order.price == Decimal(85)

        subject = await store.load(Subject, events.SUBJECT)
        assert subject is not None
        assert subject.volume == 1000
        assert subject.protocol_fee == 50
        assert subject.beneficiary_fee == 100
        assert subject.reserve == 850
        assert subject.current_price == Decimal(85)

        user = await store.load(User, events.ALICE)
        assert user is not None
        assert user.buy_orders == [order.id]
        assert user.protocol_orders == [order.id]
        assert user.protocol_token_spent == 0

    @pytest.mark.asyncio
    async def test_sell_pays_out_of_reserve(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        await handle_subject_trade(
            store, reader, SCHEDULE, events.purchase(events.ALICE, 1000, 10, events.tx(1))
        )
        order = await handle_subject_trade(
            store, reader, SCHEDULE, events.sale(events.ALICE, 500, 5, events.tx(2))
        )

        assert order.order_type == OrderType.SELL
        subject = await store.load(Subject, events.SUBJECT)
        assert subject is not None
        assert subject.reserve == 350
        assert subject.volume == 1500
        assert subject.protocol_fee == 75
        assert subject.beneficiary_fee == 125
        assert subject.current_price == Decimal(90)

        user = await store.load(User, events.ALICE)
        assert user is not None
        assert user.sell_orders == [order.id]
        assert len(user.protocol_orders) == 2
        assert await store.load(Order, order.id) is not None

    @pytest.mark.asyncio
    async def test_zero_subject_amount_keeps_price(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        await handle_subject_trade(
            store, reader, SCHEDULE, events.purchase(events.ALICE, 1000, 10, events.tx(1))
        )
        order = await handle_subject_trade(
            store, reader, SCHEDULE, events.purchase(events.ALICE, 100, 0, events.tx(2))
        )
        assert order.price == Decimal(0)
        subject = await store.load(Subject, events.SUBJECT)
        assert subject is not None
        assert subject.current_price == Decimal(85)

    @pytest.mark.asyncio
    async def test_active_beneficiary_credited(
        self, store: InMemoryEntityStore, reader: Any, events: Any
    ) -> None:
        await handle_fees_updated(store, events.update_fees())
        await handle_new_beneficiary(store, events.new_beneficiary(events.BOB))
        await handle_subject_trade(
            store, reader, SCHEDULE, events.purchase(events.ALICE, 1000, 10, events.tx(1))
        )

        beneficiary = await store.load(ProtocolFeeBeneficiary, events.BOB)
        assert beneficiary is not None
        assert beneficiary.total_fees == 50
