"""Token lock manager handlers.

Every event is emitted by the manager contract, so event.address is the
TokenLockManager id. Only MasterCopyUpdated may create the manager; every other
handler requires it to exist.
"""

import logging

from src.ix_chain.domain.repository import ContractWatcherProtocol
from src.ix_common.constants import SUMMARY_ID, ZERO_ADDRESS
from src.ix_common.enums import ContractTemplate, Revocability
from src.ix_common.errors import MissingReferenceError
from src.ix_common.events import (
    FunctionCallAuthEvent,
    MasterCopyUpdatedEvent,
    PassTokenUpdatedEvent,
    SubjectTokenDestinationAllowedEvent,
    TokenDestinationAllowedEvent,
    TokenLockCreatedEvent,
    TokenManagerUpdatedEvent,
    TokensDepositedEvent,
    TokensWithdrawnEvent,
)
from src.ix_common.keys import authorized_function_id
from src.ix_store.domain.repository import EntityStoreProtocol
from src.ix_vesting.domain.models import (
    AuthorizedFunction,
    TokenLockManager,
    TokenLockWallet,
    VestingSummary,
)

logger = logging.getLogger(__name__)


async def load_manager(store: EntityStoreProtocol, manager_address: str) -> TokenLockManager:
    manager = await store.load(TokenLockManager, manager_address)
    if manager is None:
        raise MissingReferenceError("TokenLockManager", manager_address)
    return manager


def toggle_allowed(destinations: list[str], dst: str, allowed: bool) -> list[str]:
    """Add dst when allowed and absent, remove it when disallowed and present."""
    if allowed and dst not in destinations:
        destinations.append(dst)
    elif not allowed and dst in destinations:
        destinations.remove(dst)
    return destinations


async def increase_summary_balance(store: EntityStoreProtocol, amount: int) -> VestingSummary:
    summary = await store.load(VestingSummary, SUMMARY_ID) or VestingSummary(id=SUMMARY_ID)
    summary.total_managed += amount
    await store.save(summary)
    return summary


async def handle_master_copy_updated(
    store: EntityStoreProtocol, event: MasterCopyUpdatedEvent
) -> TokenLockManager:
    manager = await store.load(TokenLockManager, event.address)
    if manager is None:
        manager = TokenLockManager(id=event.address)
        logger.info("Token lock manager %s created", event.address)
    manager.master_copy = event.master_copy
    await store.save(manager)
    return manager


async def handle_token_lock_created(
    store: EntityStoreProtocol,
    watcher: ContractWatcherProtocol,
    event: TokenLockCreatedEvent,
) -> TokenLockWallet:
    manager = await load_manager(store, event.address)
    manager.token_lock_count += 1
    await store.save(manager)

    wallet = TokenLockWallet(
        id=event.contract_address,
        manager=manager.id,
        init_hash=event.init_hash,
        beneficiary=event.beneficiary,
        token=event.token,
        managed_amount=event.managed_amount,
        balance=event.managed_amount,
        start_time=event.start_time,
        end_time=event.end_time,
        periods=event.periods,
        release_start_time=event.release_start_time,
        vesting_cliff_time=event.vesting_cliff_time,
        revocable=Revocability.from_code(event.revocable),
        block_number_created=event.block.number,
        tx_hash=event.tx_hash,
    )
    await store.save(wallet)
    await increase_summary_balance(store, event.managed_amount)
    await watcher.watch(
        event.contract_address, ContractTemplate.TOKEN_LOCK_WALLET.value, event.block.number
    )
    logger.info(
        "Token lock %s created by %s for %s: %d",
        wallet.id,
        manager.id,
        wallet.beneficiary,
        wallet.managed_amount,
    )
    return wallet


async def handle_tokens_deposited(
    store: EntityStoreProtocol, event: TokensDepositedEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    manager.tokens += event.amount
    await store.save(manager)
    return manager


async def handle_tokens_withdrawn(
    store: EntityStoreProtocol, event: TokensWithdrawnEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    manager.tokens -= event.amount
    await store.save(manager)
    return manager


async def handle_function_call_auth(
    store: EntityStoreProtocol, event: FunctionCallAuthEvent
) -> AuthorizedFunction | None:
    """Authorize a call signature; a zero target revokes it."""
    fid = authorized_function_id(event.signature, event.address)
    if event.target == ZERO_ADDRESS:
        await store.delete(AuthorizedFunction, fid)
        logger.info("Authorized function %s revoked", fid)
        return None

    auth = AuthorizedFunction(
        id=fid,
        sig=event.signature,
        target=event.target,
        sig_hash=event.sig_hash,
        manager=event.address,
    )
    await store.save(auth)
    return auth


async def handle_token_destination_allowed(
    store: EntityStoreProtocol, event: TokenDestinationAllowedEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    toggle_allowed(manager.token_destinations, event.dst, event.allowed)
    await store.save(manager)
    return manager


async def handle_subject_token_destination_allowed(
    store: EntityStoreProtocol, event: SubjectTokenDestinationAllowedEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    toggle_allowed(manager.subject_token_destinations, event.dst, event.allowed)
    await store.save(manager)
    return manager


async def handle_pass_token_updated(
    store: EntityStoreProtocol, event: PassTokenUpdatedEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    manager.pass_token = event.pass_token
    await store.save(manager)
    return manager


async def handle_token_manager_updated(
    store: EntityStoreProtocol, event: TokenManagerUpdatedEvent
) -> TokenLockManager:
    manager = await load_manager(store, event.address)
    manager.token_manager = event.token_manager
    await store.save(manager)
    return manager
