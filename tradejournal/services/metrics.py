"""Performance statistics over a portfolio's trades.

All functions are pure computation — no I/O, no database access. They accept
any sequence of trade-like objects (the ``Trade`` model or equivalents) and
never mutate it. Every division is zero-guarded, so empty input yields zeros
rather than NaN.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from tradejournal.models.enums import TradeResult
from tradejournal.utils.constants import DAY_ORDER, INITIAL_POINT_LABEL, UNKNOWN_KEY


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class PerformanceSummary:
    """Headline statistics for one portfolio."""
    win_rate: float
    net_pnl: float
    avg_rr: float
    equity: float
    trade_count: int


@dataclass
class EquityPoint:
    date: str
    balance: float


@dataclass
class GroupStats:
    count: int = 0
    wins: int = 0
    pnl: float = 0.0

    @property
    def win_rate(self) -> float:
        if self.count == 0:
            return 0.0
        return self.wins / self.count * 100


@dataclass
class Breakdowns:
    strategy: dict[str, GroupStats] = field(default_factory=dict)
    session: dict[str, GroupStats] = field(default_factory=dict)
    symbol: dict[str, GroupStats] = field(default_factory=dict)
    day: dict[str, GroupStats] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Per-trade helpers
# ---------------------------------------------------------------------------

def compute_rr(entry: float, stop_loss: float, take_profit: float) -> float:
    """Reward-to-risk ratio rounded to 2 decimals; 0 when there is no risk."""
    risk = abs(entry - stop_loss)
    if risk == 0:
        return 0.0
    reward = abs(take_profit - entry)
    return round(reward / risk, 2)


def is_closed(trade) -> bool:
    return trade.result != TradeResult.PENDING


def closed_trades(trades: Iterable) -> list:
    return [t for t in trades if is_closed(t)]


# ---------------------------------------------------------------------------
# Headline stats and equity curve
# ---------------------------------------------------------------------------

def summarize(trades: Sequence, initial_balance: float) -> PerformanceSummary:
    closed = closed_trades(trades)
    count = len(closed)
    wins = sum(1 for t in closed if t.result == TradeResult.WIN)
    net_pnl = sum((t.pnl or 0.0) for t in closed)
    rr_total = sum((t.rr or 0.0) for t in closed)

    return PerformanceSummary(
        win_rate=wins / count * 100 if count > 0 else 0.0,
        net_pnl=net_pnl,
        avg_rr=rr_total / count if count > 0 else 0.0,
        equity=initial_balance + net_pnl,
        trade_count=count,
    )


def equity_curve(trades: Sequence, initial_balance: float) -> list[EquityPoint]:
    """Running balance over every trade, oldest first.

    Pending trades are included with whatever pnl they carry. ``sorted`` is
    stable, so same-day trades keep their original list order.
    """
    points = [EquityPoint(date=INITIAL_POINT_LABEL, balance=initial_balance)]
    balance = initial_balance
    for trade in sorted(trades, key=lambda t: t.trade_date):
        balance += trade.pnl or 0.0
        points.append(EquityPoint(date=trade.trade_date.isoformat(), balance=balance))
    return points


# ---------------------------------------------------------------------------
# Grouped breakdowns
# ---------------------------------------------------------------------------

def _normalize_key(value) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return UNKNOWN_KEY
    text = str(value).strip()
    return text or UNKNOWN_KEY


def strategy_key(trade) -> str:
    return _normalize_key(trade.entry_type)


def session_key(trade) -> str:
    return _normalize_key(trade.session)


def symbol_key(trade) -> str:
    return _normalize_key(trade.symbol)


def day_key(trade) -> str:
    """Weekday name of the recorded calendar date (no time-zone shift)."""
    value = trade.trade_date
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value)
        except ValueError:
            return UNKNOWN_KEY
    if not isinstance(value, date):
        return UNKNOWN_KEY
    return DAY_ORDER[value.weekday()]


def group_by(
    trades: Iterable,
    key_fn: Callable[[object], str],
    order: Sequence[str] | None = None,
) -> dict[str, GroupStats]:
    """Accumulate count, wins and pnl per key over closed trades.

    Without ``order`` the groups are sorted by summed pnl, best first, ties in
    first-seen order. With ``order`` the listed keys come first in that order;
    keys not in the list are appended afterwards in first-seen order.
    """
    groups: dict[str, GroupStats] = {}
    for trade in closed_trades(trades):
        key = _normalize_key(key_fn(trade))
        stats = groups.setdefault(key, GroupStats())
        stats.count += 1
        if trade.result == TradeResult.WIN:
            stats.wins += 1
        stats.pnl += trade.pnl or 0.0

    if order is None:
        ranked = sorted(groups.items(), key=lambda item: item[1].pnl, reverse=True)
    else:
        position = {key: i for i, key in enumerate(order)}
        ranked = sorted(groups.items(), key=lambda item: position.get(item[0], len(order)))
    return dict(ranked)


def breakdowns(trades: Sequence) -> Breakdowns:
    return Breakdowns(
        strategy=group_by(trades, strategy_key),
        session=group_by(trades, session_key),
        symbol=group_by(trades, symbol_key),
        day=group_by(trades, day_key, order=DAY_ORDER),
    )
