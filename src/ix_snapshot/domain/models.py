"""Time-bucketed Subject snapshots: pure dataclasses."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

from src.ix_common.constants import SECONDS_IN_DAY, SECONDS_IN_HOUR
from src.ix_market.domain.models import Subject


@dataclass
class SubjectSnapshot:
    """Rollup of one Subject over one bucket.

    start_* are seeded when the bucket is opened and never change afterwards.
    end_* follow the Subject as of the last mutation inside the bucket.
    """

    BUCKET_SECONDS: ClassVar[int] = 0

    id: str                         # subject-bucketEnd
    subject: str
    end_timestamp: int
    start_price: Decimal
    start_unique_holders: int
    start_volume: int
    start_beneficiary_fee: int
    start_protocol_fee: int
    beneficiary: str | None = None
    reserve: int = 0
    total_supply: int = 0
    end_price: Decimal = Decimal("0")
    price_change: Decimal = Decimal("0")
    end_unique_holders: int = 0
    unique_holders_change: int = 0
    end_volume: int = 0
    volume_change: int = 0
    end_beneficiary_fee: int = 0
    beneficiary_fee_change: int = 0
    end_protocol_fee: int = 0
    protocol_fee_change: int = 0

    @classmethod
    def open(cls, snapshot_id: str, subject: Subject, bucket_end: int) -> "SubjectSnapshot":
        return cls(
            id=snapshot_id,
            subject=subject.id,
            end_timestamp=bucket_end,
            start_price=subject.current_price,
            start_unique_holders=subject.unique_holders,
            start_volume=subject.volume,
            start_beneficiary_fee=subject.beneficiary_fee,
            start_protocol_fee=subject.protocol_fee,
        )

    def track(self, subject: Subject) -> None:
        """Overwrite end_* with the live Subject and recompute every delta."""
        self.beneficiary = subject.beneficiary
        self.reserve = subject.reserve
        self.total_supply = subject.total_supply

        self.end_price = subject.current_price
        self.price_change = self.end_price - self.start_price

        self.end_unique_holders = subject.unique_holders
        self.unique_holders_change = self.end_unique_holders - self.start_unique_holders

        self.end_volume = subject.volume
        self.volume_change = self.end_volume - self.start_volume

        self.end_beneficiary_fee = subject.beneficiary_fee
        self.beneficiary_fee_change = self.end_beneficiary_fee - self.start_beneficiary_fee

        self.end_protocol_fee = subject.protocol_fee
        self.protocol_fee_change = self.end_protocol_fee - self.start_protocol_fee


@dataclass
class SubjectHourlySnapshot(SubjectSnapshot):
    BUCKET_SECONDS: ClassVar[int] = SECONDS_IN_HOUR


@dataclass
class SubjectDailySnapshot(SubjectSnapshot):
    BUCKET_SECONDS: ClassVar[int] = SECONDS_IN_DAY
