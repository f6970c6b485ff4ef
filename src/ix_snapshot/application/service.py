"""SnapshotAggregator: incremental hourly/daily rollups of Subject state.

No history is replayed: each Subject mutation touches exactly one open snapshot
per granularity.
"""

import logging

from src.ix_common.keys import snapshot_id
from src.ix_market.domain.models import Subject
from src.ix_snapshot.domain.bucket import bucket_boundary
from src.ix_snapshot.domain.models import (
    SubjectDailySnapshot,
    SubjectHourlySnapshot,
    SubjectSnapshot,
)
from src.ix_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)

GRANULARITIES: tuple[type[SubjectSnapshot], ...] = (
    SubjectDailySnapshot,
    SubjectHourlySnapshot,
)


class SnapshotAggregator:
    def __init__(self, store: EntityStoreProtocol) -> None:
        self._store = store

    async def record(self, subject: Subject, timestamp: int) -> list[SubjectSnapshot]:
        """Fold the Subject's committed values into every granularity's bucket."""
        return [
            await self.update_snapshot(snapshot_cls, subject, timestamp)
            for snapshot_cls in GRANULARITIES
        ]

    async def update_snapshot(
        self, snapshot_cls: type[SubjectSnapshot], subject: Subject, timestamp: int
    ) -> SubjectSnapshot:
        bucket_end = bucket_boundary(timestamp, snapshot_cls.BUCKET_SECONDS)
        sid = snapshot_id(subject.id, bucket_end)
        snapshot = await self._store.load(snapshot_cls, sid)
        if snapshot is None:
            snapshot = snapshot_cls.open(sid, subject, bucket_end)
            logger.debug("Opened %s %s", snapshot_cls.__name__, sid)
        snapshot.track(subject)
        await self._store.save(snapshot)
        return snapshot
