"""Monthly P&L calendar: daily cells grouped into Sunday-first weeks."""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass

DAYS_PER_WEEK = 7


@dataclass
class DayCell:
    day: int
    key: str
    pnl: float | None = None  # None = no activity; 0.0 = traded flat
    trade_count: int = 0

    @property
    def has_trades(self) -> bool:
        return self.trade_count > 0


@dataclass
class WeekRow:
    cells: list[DayCell | None]  # always 7 wide, None for blanks
    active: bool
    pnl: float | None  # None when no day in the week was traded


@dataclass
class MonthCalendar:
    year: int
    month: int
    leading_blanks: int
    days: list[DayCell]
    weeks: list[WeekRow]

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]


def date_key(year: int, month: int, day: int) -> str:
    """Canonical YYYY-MM-DD key; matches ``date.isoformat()``."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def step_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months from (year, month). No bounds are enforced."""
    index = year * 12 + (month - 1) + delta
    new_year, new_month = divmod(index, 12)
    return new_year, new_month + 1


def previous_month(year: int, month: int) -> tuple[int, int]:
    return step_month(year, month, -1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return step_month(year, month, 1)


def first_weekday(year: int, month: int) -> int:
    """Weekday of day 1 with Sunday = 0."""
    return (calendar.weekday(year, month, 1) + 1) % DAYS_PER_WEEK


def daily_pnl(trades: Iterable) -> dict[str, tuple[float, int]]:
    """Sum pnl and count trades per calendar day, pending trades included."""
    totals: dict[str, tuple[float, int]] = {}
    for trade in trades:
        key = trade.trade_date.isoformat()
        pnl, count = totals.get(key, (0.0, 0))
        totals[key] = (pnl + (trade.pnl or 0.0), count + 1)
    return totals


def month_calendar(year: int, month: int, trades: Iterable) -> MonthCalendar:
    totals = daily_pnl(trades)
    leading = first_weekday(year, month)
    days_in_month = calendar.monthrange(year, month)[1]

    days = []
    for day in range(1, days_in_month + 1):
        key = date_key(year, month, day)
        pnl, count = totals.get(key, (None, 0))
        days.append(DayCell(day=day, key=key, pnl=pnl, trade_count=count))

    slots: list[DayCell | None] = [None] * leading + days
    trailing = -len(slots) % DAYS_PER_WEEK
    slots.extend([None] * trailing)

    weeks = []
    for start in range(0, len(slots), DAYS_PER_WEEK):
        cells = slots[start:start + DAYS_PER_WEEK]
        traded = [c for c in cells if c is not None and c.has_trades]
        active = bool(traded)
        week_pnl = sum(c.pnl for c in traded) if active else None
        weeks.append(WeekRow(cells=cells, active=active, pnl=week_pnl))

    return MonthCalendar(
        year=year,
        month=month,
        leading_blanks=leading,
        days=days,
        weeks=weeks,
    )
