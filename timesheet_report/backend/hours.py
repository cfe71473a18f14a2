"""Shift duration arithmetic and the daily overtime split."""

from __future__ import annotations

from dataclasses import dataclass

from .forms import ShiftRow
from .parsers import parse_clock_time

MINUTES_PER_DAY = 24 * 60
DEFAULT_OVERTIME_THRESHOLD = 8.0
DEFAULT_OVERTIME_RATE = 1.5


@dataclass(frozen=True)
class OvertimePolicy:
    """Daily overtime rule: hours above `threshold` count as overtime, paid at `rate`."""

    threshold: float = DEFAULT_OVERTIME_THRESHOLD
    rate: float = DEFAULT_OVERTIME_RATE


@dataclass
class HourTotals:
    """Accumulator for the four hour figures reported at every level."""

    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    weighted_hours: float = 0.0

    def add(self, other: HourTotals) -> None:
        self.total_hours += other.total_hours
        self.regular_hours += other.regular_hours
        self.overtime_hours += other.overtime_hours
        self.weighted_hours += other.weighted_hours

    def as_dict(self) -> dict[str, float]:
        return {
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "weighted_hours": self.weighted_hours,
        }


def compute_shift_hours(row: ShiftRow) -> float:
    """Return worked hours for a shift, never negative.

    Rows without a start or end count as zero. The end is moved to the next
    day when the row says so or when it is earlier than the start.
    """
    if not row.start or not row.end:
        return 0.0
    start = parse_clock_time(row.start)
    end = parse_clock_time(row.end)
    if row.crosses_midnight or end < start:
        end += MINUTES_PER_DAY
    worked = end - start - (row.break_minutes or 0)
    return max(0.0, worked / 60)


def split_overtime(
    total_hours: float,
    threshold: float = DEFAULT_OVERTIME_THRESHOLD,
    rate: float = DEFAULT_OVERTIME_RATE,
) -> HourTotals:
    regular = min(total_hours, threshold)
    overtime = max(0.0, total_hours - threshold)
    return HourTotals(
        total_hours=total_hours,
        regular_hours=regular,
        overtime_hours=overtime,
        weighted_hours=regular + overtime * rate,
    )


def compute_daily_stats(
    row: ShiftRow,
    threshold: float = DEFAULT_OVERTIME_THRESHOLD,
    rate: float = DEFAULT_OVERTIME_RATE,
) -> HourTotals:
    """Hours for one shift split into regular and overtime under the given rule."""
    return split_overtime(compute_shift_hours(row), threshold, rate)
