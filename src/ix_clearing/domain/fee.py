"""Fee calculation: fixed-point percentage split of a deposit.

Percentages are scaled by PCT_BASE (10**18 == 100%). Division floors, so the
protocol never charges more than the configured rate.
"""
from dataclasses import dataclass

from src.ix_common.constants import PCT_BASE
from src.ix_market.domain.models import Summary


@dataclass(frozen=True)
class Fees:
    protocol_fee: int
    subject_fee: int

    @property
    def total(self) -> int:
        return self.protocol_fee + self.subject_fee


@dataclass(frozen=True)
class FeeSchedule:
    """Buy- and sell-side rate tables, loaded once per processing run."""

    protocol_buy_fee_pct: int = 0
    protocol_sell_fee_pct: int = 0
    subject_buy_fee_pct: int = 0
    subject_sell_fee_pct: int = 0

    @classmethod
    def from_summary(cls, summary: Summary) -> "FeeSchedule":
        return cls(
            protocol_buy_fee_pct=summary.protocol_buy_fee_pct,
            protocol_sell_fee_pct=summary.protocol_sell_fee_pct,
            subject_buy_fee_pct=summary.subject_buy_fee_pct,
            subject_sell_fee_pct=summary.subject_sell_fee_pct,
        )


def calc_fee(amount: int, fee_pct: int, pct_base: int = PCT_BASE) -> int:
    """Floor division fee: amount x fee_pct // pct_base."""
    return amount * fee_pct // pct_base


def calc_fees(deposit_amount: int, protocol_fee_pct: int, subject_fee_pct: int) -> Fees:
    return Fees(
        protocol_fee=calc_fee(deposit_amount, protocol_fee_pct),
        subject_fee=calc_fee(deposit_amount, subject_fee_pct),
    )


def calculate_buy_side_fee(deposit_amount: int, schedule: FeeSchedule) -> Fees:
    return calc_fees(
        deposit_amount, schedule.protocol_buy_fee_pct, schedule.subject_buy_fee_pct
    )


def calculate_sell_side_fee(deposit_amount: int, schedule: FeeSchedule) -> Fees:
    return calc_fees(
        deposit_amount, schedule.protocol_sell_fee_pct, schedule.subject_sell_fee_pct
    )
