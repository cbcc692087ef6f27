"""Portfolio API. Portfolios are created and edited, never deleted."""

from fastapi import APIRouter, Depends

from tradejournal.api.deps import get_portfolio_or_404, get_repository
from tradejournal.models.portfolio import Portfolio
from tradejournal.schemas.portfolio import PortfolioCreate, PortfolioRead, PortfolioUpdate
from tradejournal.services.repository import JournalRepository

router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])


@router.get("", response_model=list[PortfolioRead])
def list_portfolios(repository: JournalRepository = Depends(get_repository)):
    return repository.list_portfolios()


@router.post("", response_model=PortfolioRead, status_code=201)
def create_portfolio(
    data: PortfolioCreate,
    repository: JournalRepository = Depends(get_repository),
):
    return repository.save_portfolio(Portfolio(**data.model_dump()))


@router.get("/{portfolio_id}", response_model=PortfolioRead)
def get_portfolio(portfolio: Portfolio = Depends(get_portfolio_or_404)):
    return portfolio


@router.put("/{portfolio_id}", response_model=PortfolioRead)
def update_portfolio(
    data: PortfolioUpdate,
    portfolio: Portfolio = Depends(get_portfolio_or_404),
    repository: JournalRepository = Depends(get_repository),
):
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(portfolio, key, value)
    return repository.save_portfolio(portfolio)
