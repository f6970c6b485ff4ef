"""Market reference entities: blocks, subjects, protocol configuration.

Every Subject mutation must be persisted through save_subject() so that the
hourly and daily snapshots never lag behind the live Subject.
"""

import logging

from src.ix_chain.domain.repository import ContractMetadataReaderProtocol
from src.ix_clearing.domain.fee import FeeSchedule
from src.ix_common.constants import SUMMARY_ID
from src.ix_common.errors import MissingReferenceError
from src.ix_common.events import (
    BlockRef,
    UpdateFeesEvent,
    UpdateProtocolFeeBeneficiaryEvent,
)
from src.ix_market.domain.models import BlockInfo, ProtocolFeeBeneficiary, Subject, Summary
from src.ix_snapshot.application.service import SnapshotAggregator
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


async def get_or_create_block_info(store: EntityStoreProtocol, block: BlockRef) -> BlockInfo:
    block_id = str(block.number)
    block_info = await store.load(BlockInfo, block_id)
    if block_info is None:
        block_info = BlockInfo(
            id=block_id,
            block_number=block.number,
            timestamp=block.timestamp,
            hash=block.hash,
        )
        await store.save(block_info)
    return block_info


async def get_or_create_subject(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    token_address: str,
) -> Subject:
    subject = await store.load(Subject, token_address)
    if subject is None:
        subject = Subject(
            id=token_address,
            name=await reader.name(token_address),
            symbol=await reader.symbol(token_address),
            decimals=await reader.decimals(token_address),
        )
        await store.save(subject)
        logger.info("Subject %s (%s) initialized", subject.id, subject.symbol)
    return subject


async def save_subject(store: EntityStoreProtocol, subject: Subject, timestamp: int) -> None:
    await store.save(subject)
    await SnapshotAggregator(store).record(subject, timestamp)


async def load_summary(store: EntityStoreProtocol) -> Summary:
    summary = await store.load(Summary, SUMMARY_ID)
    if summary is None:
        raise MissingReferenceError("Summary", SUMMARY_ID)
    return summary


async def load_fee_schedule(store: EntityStoreProtocol) -> FeeSchedule:
    return FeeSchedule.from_summary(await load_summary(store))


async def handle_fees_updated(store: EntityStoreProtocol, event: UpdateFeesEvent) -> FeeSchedule:
    """Create or update the Summary rates; returns the schedule to use from now on."""
    summary = await store.load(Summary, SUMMARY_ID) or Summary(id=SUMMARY_ID)
    summary.protocol_buy_fee_pct = event.protocol_buy_fee_pct
    summary.protocol_sell_fee_pct = event.protocol_sell_fee_pct
    summary.subject_buy_fee_pct = event.subject_buy_fee_pct
    summary.subject_sell_fee_pct = event.subject_sell_fee_pct
    await store.save(summary)
    logger.info(
        "Fees updated at %s: protocol buy/sell=%d/%d subject buy/sell=%d/%d",
        event.ordering_key,
        summary.protocol_buy_fee_pct,
        summary.protocol_sell_fee_pct,
        summary.subject_buy_fee_pct,
        summary.subject_sell_fee_pct,
    )
    return FeeSchedule.from_summary(summary)


async def handle_new_beneficiary(
    store: EntityStoreProtocol, event: UpdateProtocolFeeBeneficiaryEvent
) -> ProtocolFeeBeneficiary:
    summary = await load_summary(store)
    beneficiary = await store.load(ProtocolFeeBeneficiary, event.beneficiary)
    if beneficiary is None:
        beneficiary = ProtocolFeeBeneficiary(id=event.beneficiary, beneficiary=event.beneficiary)
        await store.save(beneficiary)
    summary.active_protocol_fee_beneficiary = beneficiary.id
    await store.save(summary)
    return beneficiary
