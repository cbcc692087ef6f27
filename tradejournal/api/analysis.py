"""AI advisory API — trade critique, behavioural patterns and market search.

Each panel is a channel on the analysis board: only the response to the most
recently issued request on a channel is applied, older ones come back with
``applied: false``.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tradejournal.api.deps import (
    get_advisor,
    get_analysis_board,
    get_portfolio_or_404,
    get_repository,
)
from tradejournal.models.portfolio import Portfolio
from tradejournal.services.advisor import TradeAdvisor
from tradejournal.services.repository import JournalRepository
from tradejournal.services.request_guard import AnalysisBoard

router = APIRouter(prefix="/api/analysis", tags=["analysis"])

MARKET_CHANNEL = "market"


def critique_channel(portfolio_id: str) -> str:
    return f"critique:{portfolio_id}"


def patterns_channel(portfolio_id: str) -> str:
    return f"patterns:{portfolio_id}"


class MarketQuery(BaseModel):
    query: str = Field(min_length=1, max_length=2000)


@router.post("/trades/{trade_id}")
async def analyze_trade(
    trade_id: str,
    repository: JournalRepository = Depends(get_repository),
    advisor: TradeAdvisor = Depends(get_advisor),
    board: AnalysisBoard = Depends(get_analysis_board),
):
    trade = repository.get_trade(trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")

    token, applied, content = await board.submit(
        critique_channel(trade.portfolio_id),
        advisor.analyze_trade(trade),
        subject_id=trade.id,
    )
    return {"request_id": token, "applied": applied, "trade_id": trade.id, "content": content}


@router.post("/{portfolio_id}/patterns")
async def analyze_patterns(
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
    advisor: TradeAdvisor = Depends(get_advisor),
    board: AnalysisBoard = Depends(get_analysis_board),
):
    trades = repository.list_trades(portfolio.id)
    token, applied, themes = await board.submit(
        patterns_channel(portfolio.id),
        advisor.analyze_patterns(trades),
    )
    return {
        "request_id": token,
        "applied": applied,
        "themes": [t.model_dump(by_alias=True) for t in themes],
    }


@router.post("/market")
async def market_intelligence(
    body: MarketQuery,
    advisor: TradeAdvisor = Depends(get_advisor),
    board: AnalysisBoard = Depends(get_analysis_board),
):
    token, applied, result = await board.submit(
        MARKET_CHANNEL,
        advisor.search_market_intelligence(body.query),
    )
    return {"request_id": token, "applied": applied, **asdict(result)}


@router.get("/{portfolio_id}/latest")
def latest_analysis(
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    board: AnalysisBoard = Depends(get_analysis_board),
):
    """The critique currently shown for the portfolio, if any."""
    current = board.get(critique_channel(portfolio.id))
    if current is None:
        return {"request_id": None, "trade_id": None, "content": None}
    return {"request_id": current.token, "trade_id": current.subject_id, "content": current.content}
