"""EventProcessor: routes decoded chain events to their handlers in chain order.

Events are applied strictly one at a time. The fee schedule is read from the
Summary the first time a trade needs it and then passed explicitly; an
UpdateFees event replaces it for the rest of the run.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from src.ix_clearing.domain.fee import FeeSchedule
from src.ix_common.errors import AppError, UnsupportedEventError
from src.ix_common.events import (
    AuctionCancellationSellOrderEvent,
    AuctionClaimedFromOrderEvent,
    AuctionNewSellOrderEvent,
    ChainEvent,
    FunctionCallAuthEvent,
    MasterCopyUpdatedEvent,
    PassTokenUpdatedEvent,
    ProtocolTokenTransferEvent,
    SubjectSharePurchasedEvent,
    SubjectShareSoldEvent,
    SubjectTokenDestinationAllowedEvent,
    SubjectTokenTransferEvent,
    SubjectTradeEvent,
    TokenDeployedEvent,
    TokenDestinationAllowedEvent,
    TokenLockCreatedEvent,
    TokenManagerUpdatedEvent,
    TokensDepositedEvent,
    TokensWithdrawnEvent,
    UpdateFeesEvent,
    UpdateProtocolFeeBeneficiaryEvent,
)
from src.ix_ingest.application.context import IndexerContext
from src.ix_market.application import subjects
from src.ix_market.application.service import (
    handle_fees_updated,
    handle_new_beneficiary,
    load_fee_schedule,
)
from src.ix_order.application.engine import OrderCorrelationEngine
from src.ix_order.application.intents import stage_intent
from src.ix_vesting.application import service as vesting

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class EventProcessor:
    def __init__(self, ctx: IndexerContext, fee_schedule: FeeSchedule | None = None) -> None:
        self._ctx = ctx
        self._fee_schedule = fee_schedule
        self._engine = OrderCorrelationEngine(ctx.store, ctx.metadata_reader)
        self._handlers: dict[type[ChainEvent], Handler] = {
            ProtocolTokenTransferEvent: self._engine.handle_transfer,
            AuctionNewSellOrderEvent: self._stage_intent,
            AuctionCancellationSellOrderEvent: self._stage_intent,
            AuctionClaimedFromOrderEvent: self._stage_intent,
            TokenDeployedEvent: self._token_deployed,
            SubjectTokenTransferEvent: self._subject_transfer,
            SubjectSharePurchasedEvent: self._subject_trade,
            SubjectShareSoldEvent: self._subject_trade,
            UpdateFeesEvent: self._fees_updated,
            UpdateProtocolFeeBeneficiaryEvent: self._new_beneficiary,
            MasterCopyUpdatedEvent: self._with_store(vesting.handle_master_copy_updated),
            TokenLockCreatedEvent: self._token_lock_created,
            TokensDepositedEvent: self._with_store(vesting.handle_tokens_deposited),
            TokensWithdrawnEvent: self._with_store(vesting.handle_tokens_withdrawn),
            FunctionCallAuthEvent: self._with_store(vesting.handle_function_call_auth),
            TokenDestinationAllowedEvent: self._with_store(
                vesting.handle_token_destination_allowed
            ),
            SubjectTokenDestinationAllowedEvent: self._with_store(
                vesting.handle_subject_token_destination_allowed
            ),
            PassTokenUpdatedEvent: self._with_store(vesting.handle_pass_token_updated),
            TokenManagerUpdatedEvent: self._with_store(vesting.handle_token_manager_updated),
        }

    @property
    def fee_schedule(self) -> FeeSchedule | None:
        return self._fee_schedule

    async def process(self, event: ChainEvent) -> Any:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise UnsupportedEventError(getattr(event, "event_type", type(event).__name__))
        try:
            return await handler(event)
        except AppError as exc:
            logger.error(
                "Event %s at %s failed: [%d] %s",
                getattr(event, "event_type", type(event).__name__),
                event.ordering_key,
                exc.code,
                exc.message,
            )
            raise

    async def process_batch(self, events: Iterable[ChainEvent]) -> int:
        count = 0
        for event in events:
            await self.process(event)
            count += 1
        return count

    def _with_store(self, fn: Callable[[Any, Any], Awaitable[Any]]) -> Handler:
        async def handler(event: Any) -> Any:
            return await fn(self._ctx.store, event)

        return handler

    async def _current_fee_schedule(self) -> FeeSchedule:
        if self._fee_schedule is None:
            self._fee_schedule = await load_fee_schedule(self._ctx.store)
        return self._fee_schedule

    async def _stage_intent(self, event: Any) -> Any:
        return await stage_intent(self._ctx.store, event, self._ctx.intent_filter)

    async def _token_deployed(self, event: TokenDeployedEvent) -> Any:
        return await subjects.handle_token_deployed(
            self._ctx.store, self._ctx.metadata_reader, self._ctx.watcher, event
        )

    async def _subject_transfer(self, event: SubjectTokenTransferEvent) -> Any:
        return await subjects.handle_subject_token_transfer(
            self._ctx.store, self._ctx.metadata_reader, event
        )

    async def _subject_trade(self, event: SubjectTradeEvent) -> Any:
        schedule = await self._current_fee_schedule()
        return await subjects.handle_subject_trade(
            self._ctx.store, self._ctx.metadata_reader, schedule, event
        )

    async def _fees_updated(self, event: UpdateFeesEvent) -> FeeSchedule:
        self._fee_schedule = await handle_fees_updated(self._ctx.store, event)
        return self._fee_schedule

    async def _new_beneficiary(self, event: UpdateProtocolFeeBeneficiaryEvent) -> Any:
        return await handle_new_beneficiary(self._ctx.store, event)

    async def _token_lock_created(self, event: TokenLockCreatedEvent) -> Any:
        return await vesting.handle_token_lock_created(self._ctx.store, self._ctx.watcher, event)
