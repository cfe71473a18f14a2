"""ISO-8601 week numbering and Monday-to-Sunday week bounds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class WeekInfo:
    key: str
    week_number: int
    year: int
    start: date
    end: date


def _nearest_thursday(day: date) -> date:
    # weekday(): Monday=0 .. Sunday=6, so Thursday is 3.
    return day + timedelta(days=3 - day.weekday())


def iso_week_year(day: date) -> int:
    """Year that owns the week of `day`; Dec 29-31 and Jan 1-3 may belong to a neighbour."""
    return _nearest_thursday(day).year


def iso_week_number(day: date) -> int:
    """Week number 1-53; week 1 is the week holding January 4th."""
    thursday = _nearest_thursday(day)
    first_thursday = _nearest_thursday(date(thursday.year, 1, 4))
    return 1 + (thursday - first_thursday).days // 7


def week_start(day: date) -> date:
    # isoweekday() numbers Sunday as 7, so a Sunday walks back six days.
    return day - timedelta(days=day.isoweekday() - 1)


def week_bounds(day: date) -> tuple[datetime, datetime]:
    """Return Monday 00:00:00.000 and Sunday 23:59:59.999 of the week holding `day`."""
    monday = week_start(day)
    sunday = monday + timedelta(days=6)
    return (
        datetime.combine(monday, time.min),
        datetime.combine(sunday, time(23, 59, 59, 999000)),
    )


def week_key(year: int, week_number: int) -> str:
    return f"{year}-W{week_number:02d}"


def week_info(day: date) -> WeekInfo:
    year = iso_week_year(day)
    number = iso_week_number(day)
    start, end = week_bounds(day)
    return WeekInfo(
        key=week_key(year, number),
        week_number=number,
        year=year,
        start=start.date(),
        end=end.date(),
    )
