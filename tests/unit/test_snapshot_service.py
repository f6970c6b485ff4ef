# tests/unit/test_snapshot_service.py
"""SnapshotAggregator against the in-memory store."""
from decimal import Decimal

import pytest

from src.ix_common.keys import snapshot_id
from src.ix_market.domain.models import Subject
from src.ix_snapshot.application.service import SnapshotAggregator
from src.ix_snapshot.domain.models import SubjectDailySnapshot, SubjectHourlySnapshot
from src.ix_store.infrastructure.memory import InMemoryEntityStore

SUBJECT = "0x" + "5b" * 20


def _subject(**kwargs: object) -> Subject:
    subject = Subject(id=SUBJECT, name="Subject Token", symbol="SBJ", decimals=18)
    for name, value in kwargs.items():
        setattr(subject, name, value)
    return subject


class TestSnapshotAggregator:
    @pytest.mark.asyncio
    async def test_record_opens_daily_and_hourly(self, store: InMemoryEntityStore) -> None:
        snapshots = await SnapshotAggregator(store).record(_subject(volume=10), 3599)

        assert [type(s) for s in snapshots] == [SubjectDailySnapshot, SubjectHourlySnapshot]
        hourly = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 3600))
        daily = await store.load(SubjectDailySnapshot, snapshot_id(SUBJECT, 86400))
        assert hourly is not None
        assert daily is not None
        assert hourly.end_timestamp == 3600
        assert hourly.start_volume == 10
        assert hourly.volume_change == 0

    @pytest.mark.asyncio
    async def test_start_fixed_end_follows_subject(self, store: InMemoryEntityStore) -> None:
        aggregator = SnapshotAggregator(store)
        await aggregator.record(_subject(volume=10, current_price=Decimal("1.5")), 100)
        await aggregator.record(
            _subject(volume=25, current_price=Decimal("2"), unique_holders=3, reserve=40), 200
        )

        hourly = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 3600))
        assert hourly is not None
        assert hourly.start_volume == 10
        assert hourly.end_volume == 25
        assert hourly.volume_change == 15
        assert hourly.start_price == Decimal("1.5")
        assert hourly.end_price == Decimal("2")
        assert hourly.price_change == Decimal("0.5")
        assert hourly.unique_holders_change == 3
        assert hourly.reserve == 40

    @pytest.mark.asyncio
    async def test_new_bucket_starts_from_current_state(self, store: InMemoryEntityStore) -> None:
        aggregator = SnapshotAggregator(store)
        await aggregator.record(_subject(volume=10), 3599)
        await aggregator.record(_subject(volume=30), 3600)

        first = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 3600))
        second = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 7200))
        assert first is not None and second is not None
        assert first.end_volume == 10
        assert second.start_volume == 30
        assert second.volume_change == 0

        daily = await store.load(SubjectDailySnapshot, snapshot_id(SUBJECT, 86400))
        assert daily is not None
        assert daily.volume_change == 20

    @pytest.mark.asyncio
    async def test_same_values_twice_leave_bucket_unchanged(self, store: InMemoryEntityStore) -> None:
        aggregator = SnapshotAggregator(store)
        await aggregator.record(_subject(volume=10, current_price=Decimal("1.5")), 100)
        state = dict(volume=25, current_price=Decimal("2"), unique_holders=3, reserve=40)
        await aggregator.record(_subject(**state), 200)
        first = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 3600))
        await aggregator.record(_subject(**state), 300)
        second = await store.load(SubjectHourlySnapshot, snapshot_id(SUBJECT, 3600))

        assert first is not None and second is not None
        assert second == first
        assert second.start_volume == 10
        assert second.start_price == Decimal("1.5")
        assert second.volume_change == 15
        assert second.price_change == Decimal("0.5")
