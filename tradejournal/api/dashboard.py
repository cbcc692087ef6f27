"""Dashboard API — summary stats, equity curve, breakdowns and P&L calendar."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query

from tradejournal.api.deps import get_portfolio_or_404, get_repository
from tradejournal.models.portfolio import Portfolio
from tradejournal.services import metrics
from tradejournal.services.pnl_calendar import month_calendar, next_month, previous_month
from tradejournal.services.repository import JournalRepository

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _group_rows(groups: dict[str, metrics.GroupStats]) -> list[dict]:
    return [
        {
            "key": key,
            "count": stats.count,
            "wins": stats.wins,
            "pnl": round(stats.pnl, 2),
            "win_rate": round(stats.win_rate, 1),
        }
        for key, stats in groups.items()
    ]


@router.get("/{portfolio_id}/summary")
def portfolio_summary(
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
):
    """Headline stats over the portfolio's closed trades."""
    trades = repository.list_trades(portfolio.id)
    summary = metrics.summarize(trades, portfolio.initial_balance)
    return {
        "portfolio_id": portfolio.id,
        "currency": portfolio.currency,
        "initial_balance": portfolio.initial_balance,
        "equity": round(summary.equity, 2),
        "net_pnl": round(summary.net_pnl, 2),
        "win_rate": round(summary.win_rate, 1),
        "avg_rr": round(summary.avg_rr, 2),
        "closed_trades": summary.trade_count,
        "total_trades": len(trades),
    }


@router.get("/{portfolio_id}/equity")
def portfolio_equity_curve(
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
):
    """Running balance from the initial balance through every trade."""
    trades = repository.list_trades(portfolio.id)
    return [
        {"date": p.date, "balance": round(p.balance, 2)}
        for p in metrics.equity_curve(trades, portfolio.initial_balance)
    ]


@router.get("/{portfolio_id}/breakdowns")
def portfolio_breakdowns(
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
):
    """Closed-trade stats grouped by strategy, session, symbol and weekday."""
    result = metrics.breakdowns(repository.list_trades(portfolio.id))
    return {
        "strategy": _group_rows(result.strategy),
        "session": _group_rows(result.session),
        "symbol": _group_rows(result.symbol),
        "day": _group_rows(result.day),
    }


@router.get("/{portfolio_id}/calendar")
def portfolio_calendar(
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
):
    """Daily and weekly P&L for one month (defaults to the current month)."""
    today = date.today()
    year = year or today.year
    month = month or today.month

    grid = month_calendar(year, month, repository.list_trades(portfolio.id))
    prev_year, prev_month = previous_month(year, month)
    nxt_year, nxt_month = next_month(year, month)
    return {
        "year": grid.year,
        "month": grid.month,
        "month_name": grid.month_name,
        "leading_blanks": grid.leading_blanks,
        "days": [asdict(d) for d in grid.days],
        "weeks": [asdict(w) for w in grid.weeks],
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": nxt_year, "month": nxt_month},
    }
