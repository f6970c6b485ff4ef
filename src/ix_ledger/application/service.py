"""Ledger: users, portfolios and the protocol_token_spent accumulators.

LedgerUpdater is the only writer of protocol_token_spent. Each call moves the
User and the matching Portfolio by the same signed delta and appends one
LedgerEntry, so at any point

    user.protocol_token_spent == sum(entry.amount for the user's entries)

No clamping: a negative accumulator reflects the netted history.
"""

import logging

from src.ix_chain.domain.repository import ContractMetadataReaderProtocol
from src.ix_common.enums import LedgerEntryType
from src.ix_common.errors import LedgerMismatchError
from src.ix_common.keys import portfolio_id
from src.ix_ledger.domain.models import LedgerEntry, Portfolio, User
from src.ix_market.application.service import get_or_create_subject
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


async def get_or_create_user(store: EntityStoreProtocol, user_address: str) -> User:
    user = await store.load(User, user_address)
    if user is None:
        user = User(id=user_address)
        await store.save(user)
    return user


async def get_or_create_portfolio(
    store: EntityStoreProtocol,
    reader: ContractMetadataReaderProtocol,
    user_address: str,
    subject_address: str,
    tx_hash: str,
) -> Portfolio:
    user = await get_or_create_user(store, user_address)
    pid = portfolio_id(user_address, subject_address)
    portfolio = await store.load(Portfolio, pid)
    if portfolio is None:
        subject = await get_or_create_subject(store, reader, subject_address)
        portfolio = Portfolio(id=pid, user=user.id, subject=subject.id)
        logger.info("Portfolio %s initialized %s balance: %d", pid, tx_hash, portfolio.balance)
        await store.save(portfolio)
    return portfolio


class LedgerUpdater:
    def __init__(self, store: EntityStoreProtocol) -> None:
        self._store = store

    async def apply(
        self,
        user: User,
        portfolio: Portfolio,
        delta: int,
        entry_type: LedgerEntryType,
        entry_id: str,
        reference_id: str | None = None,
        block_number: int | None = None,
    ) -> LedgerEntry:
        """Apply one signed delta to the user and their portfolio in lock-step.

        Saves both aggregates (including any other pending change the caller
        made on them) and the LedgerEntry.
        """
        if portfolio.user != user.id:
            raise LedgerMismatchError(user.id, portfolio.id)

        user.protocol_token_spent += delta
        portfolio.protocol_token_spent += delta
        await self._store.save(user)
        await self._store.save(portfolio)

        entry = LedgerEntry(
            id=entry_id,
            user=user.id,
            portfolio=portfolio.id,
            entry_type=entry_type.value,
            amount=delta,
            user_spent_after=user.protocol_token_spent,
            portfolio_spent_after=portfolio.protocol_token_spent,
            reference_id=reference_id,
            block_number=block_number,
        )
        await self._store.save(entry)
        logger.debug(
            "Ledger %s %s: user=%s delta=%d spent_after=%d",
            entry.id,
            entry.entry_type,
            user.id,
            delta,
            user.protocol_token_spent,
        )
        return entry
