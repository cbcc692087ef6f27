"""Trade journal API."""

from fastapi import APIRouter, Depends, HTTPException

from tradejournal.api.deps import get_analysis_board, get_repository
from tradejournal.models.enums import TradeResult
from tradejournal.models.trade import Trade
from tradejournal.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from tradejournal.services.repository import JournalRepository
from tradejournal.services.request_guard import AnalysisBoard

router = APIRouter(prefix="/api/trades", tags=["trades"])

CLEARABLE_FIELDS = {"entry_image", "exit_image"}


def _get_trade_or_404(repository: JournalRepository, trade_id: str) -> Trade:
    trade = repository.get_trade(trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


@router.get("", response_model=list[TradeRead])
def list_trades(
    portfolio_id: str,
    result: TradeResult | None = None,
    repository: JournalRepository = Depends(get_repository),
):
    return repository.list_trades(portfolio_id, result=result)


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    repository: JournalRepository = Depends(get_repository),
):
    if not repository.get_portfolio(data.portfolio_id):
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return repository.save_trade(Trade(**data.model_dump()))


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: str, repository: JournalRepository = Depends(get_repository)):
    return _get_trade_or_404(repository, trade_id)


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: str,
    data: TradeUpdate,
    repository: JournalRepository = Depends(get_repository),
):
    trade = _get_trade_or_404(repository, trade_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        # null only clears a screenshot; elsewhere it means "leave as is"
        if value is None and key not in CLEARABLE_FIELDS:
            continue
        setattr(trade, key, value)
    return repository.save_trade(trade)


@router.delete("/{trade_id}", status_code=204)
async def delete_trade(
    trade_id: str,
    repository: JournalRepository = Depends(get_repository),
    board: AnalysisBoard = Depends(get_analysis_board),
):
    if not repository.delete_trade(trade_id):
        raise HTTPException(status_code=404, detail="Trade not found")
    board.discard_subject(trade_id)
