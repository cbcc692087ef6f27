"""Shared API dependencies."""

from fastapi import Depends, HTTPException
from sqlmodel import Session

from tradejournal.database import get_session
from tradejournal.models.portfolio import Portfolio
from tradejournal.services.advisor import TradeAdvisor
from tradejournal.services.repository import JournalRepository
from tradejournal.services.request_guard import AnalysisBoard

_advisor: TradeAdvisor | None = None
_board: AnalysisBoard | None = None


def get_repository(session: Session = Depends(get_session)) -> JournalRepository:
    return JournalRepository(session)


def get_portfolio_or_404(
    portfolio_id: str,
    repository: JournalRepository = Depends(get_repository),
) -> Portfolio:
    portfolio = repository.get_portfolio(portfolio_id)
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return portfolio


def get_advisor() -> TradeAdvisor:
    """Process-wide advisory client, created on first use."""
    global _advisor
    if _advisor is None:
        _advisor = TradeAdvisor()
    return _advisor


def get_analysis_board() -> AnalysisBoard:
    global _board
    if _board is None:
        _board = AnalysisBoard()
    return _board
