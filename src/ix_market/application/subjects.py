"""Subject token handlers: deployment, ERC20 transfers and bonding-curve trades."""

import logging
from decimal import Decimal

from src.ix_chain.domain.repository import (
    ContractMetadataReaderProtocol,
    ContractWatcherProtocol,
)
from src.ix_clearing.domain.fee import (
    FeeSchedule,
    calculate_buy_side_fee,
    calculate_sell_side_fee,
)
from src.ix_common.constants import SUMMARY_ID, ZERO_ADDRESS
from src.ix_common.enums import ContractTemplate, OrderType
from src.ix_common.events import (
    SubjectSharePurchasedEvent,
    SubjectTokenTransferEvent,
    SubjectTradeEvent,
    TokenDeployedEvent,
)
from src.ix_common.keys import tx_entity_id
from src.ix_ledger.application.service import get_or_create_portfolio, get_or_create_user
from src.ix_market.application.service import (
    get_or_create_block_info,
    get_or_create_subject,
    save_subject,
)
from src.ix_market.domain.models import ProtocolFeeBeneficiary, Subject, Summary
from src.ix_order.domain.models import Order
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


async def handle_token_deployed(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    watcher: ContractWatcherProtocol,
    event: TokenDeployedEvent,
) -> Subject:
    subject = await get_or_create_subject(store, reader, event.token)
    user = await get_or_create_user(store, event.beneficiary)
    subject.beneficiary = user.id
    await save_subject(store, subject, event.block.timestamp)
    await watcher.watch(event.token, ContractTemplate.SUBJECT_TOKEN.value, event.block.number)
    return subject


async def _move_balance(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    subject: Subject,
    holder: str,
    delta: int,
    tx_hash: str,
) -> None:
    portfolio = await get_or_create_portfolio(store, reader, holder, subject.id, tx_hash)
    before = portfolio.balance
    portfolio.balance += delta
    await store.save(portfolio)

    if before <= 0 < portfolio.balance:
        subject.unique_holders += 1
    elif before > 0 >= portfolio.balance:
        subject.unique_holders -= 1


async def handle_subject_token_transfer(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    event: SubjectTokenTransferEvent,
) -> Subject:
    """Move holder balances; the zero address on either side mints or burns."""
    subject = await get_or_create_subject(store, reader, event.address)

    if event.sender == ZERO_ADDRESS:
        subject.total_supply += event.value
    else:
        await _move_balance(store, reader, subject, event.sender, -event.value, event.tx_hash)

    if event.recipient == ZERO_ADDRESS:
        subject.total_supply -= event.value
    else:
        await _move_balance(store, reader, subject, event.recipient, event.value, event.tx_hash)

    await save_subject(store, subject, event.block.timestamp)
    return subject


async def handle_subject_trade(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    schedule: FeeSchedule,
    event: SubjectTradeEvent,
) -> Order:
    """Apply a bonding-curve buy or sell to the Subject and record it as an Order.

    protocol_amount is the gross protocol token amount of the trade. A buy adds
    the amount net of fees to the reserve; a sell pays the gross amount out of it.
    """
    is_buy = isinstance(event, SubjectSharePurchasedEvent)
    if is_buy:
        fees = calculate_buy_side_fee(event.protocol_amount, schedule)
    else:
        fees = calculate_sell_side_fee(event.protocol_amount, schedule)
    net_amount = event.protocol_amount - fees.total

    block_info = await get_or_create_block_info(store, event.block)
    subject = await get_or_create_subject(store, reader, event.subject)
    portfolio = await get_or_create_portfolio(
        store, reader, event.trader, subject.id, event.tx_hash
    )
    user = await get_or_create_user(store, event.trader)

    subject.volume += event.protocol_amount
    subject.protocol_fee += fees.protocol_fee
    subject.beneficiary_fee += fees.subject_fee
    if is_buy:
        subject.reserve += net_amount
    else:
        subject.reserve -= event.protocol_amount

    price = Decimal("0")
    if event.subject_amount > 0:
        price = Decimal(net_amount) / Decimal(event.subject_amount)
        subject.current_price = price

    order = Order(
        id=tx_entity_id(event.tx_hash, event.log_index),
        subject_token=subject.id,
        order_type=OrderType.BUY if is_buy else OrderType.SELL,
        user=user.id,
        portfolio=portfolio.id,
        block_info=block_info.id,
        protocol_token_amount=event.protocol_amount,
        protocol_token_investment=Decimal(net_amount),
        subject_amount=event.subject_amount,
        subject_amount_left=event.subject_amount,
        price=price,
    )
    await store.save(order)

    if is_buy:
        user.buy_orders.append(order.id)
    else:
        user.sell_orders.append(order.id)
    user.protocol_orders.append(order.id)
    await store.save(user)

    await _credit_protocol_beneficiary(store, fees.protocol_fee)
    await save_subject(store, subject, event.block.timestamp)
    logger.info(
        "%s %s: trader=%s amount=%d fees=%d/%d",
        "Buy" if is_buy else "Sell",
        order.id,
        user.id,
        event.protocol_amount,
        fees.protocol_fee,
        fees.subject_fee,
    )
    return order


async def _credit_protocol_beneficiary(store: EntityStoreProtocol, protocol_fee: int) -> None:
    summary = await store.load(Summary, SUMMARY_ID)
    if summary is None or summary.active_protocol_fee_beneficiary is None:
        return
    beneficiary = await store.load(ProtocolFeeBeneficiary, summary.active_protocol_fee_beneficiary)
    if beneficiary is None:
        return
    beneficiary.total_fees += protocol_fee
    await store.save(beneficiary)
