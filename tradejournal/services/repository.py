"""Journal repository: get/save/delete for portfolios, trades and app flags.

Handlers and tests receive a ``JournalRepository`` bound to a session instead
of reaching for a module-level store, which keeps the metric functions pure.
"""

import logging

from sqlmodel import Session, select

from tradejournal.models.app_flag import AppFlag
from tradejournal.models.enums import TradeResult
from tradejournal.models.portfolio import Portfolio
from tradejournal.models.trade import Trade
from tradejournal.services.metrics import compute_rr
from tradejournal.utils.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_INITIAL_BALANCE,
    DEFAULT_PORTFOLIO_ID,
    DEFAULT_PORTFOLIO_NAME,
    ONBOARDED_FLAG,
)

logger = logging.getLogger(__name__)


class JournalRepository:
    def __init__(self, session: Session):
        self.session = session

    # -- portfolios ---------------------------------------------------------

    def list_portfolios(self) -> list[Portfolio]:
        """All portfolios in creation order; seeds the default one on first run."""
        portfolios = self.session.exec(select(Portfolio)).all()
        if portfolios:
            return list(portfolios)

        default = Portfolio(
            id=DEFAULT_PORTFOLIO_ID,
            name=DEFAULT_PORTFOLIO_NAME,
            currency=DEFAULT_CURRENCY,
            initial_balance=DEFAULT_INITIAL_BALANCE,
        )
        self.session.add(default)
        self.session.commit()
        self.session.refresh(default)
        logger.info("Created default portfolio")
        return [default]

    def get_portfolio(self, portfolio_id: str) -> Portfolio | None:
        return self.session.get(Portfolio, portfolio_id)

    def save_portfolio(self, portfolio: Portfolio) -> Portfolio:
        """Insert or replace a portfolio by id."""
        portfolio.currency = (portfolio.currency or DEFAULT_CURRENCY).upper()
        portfolio = self.session.merge(portfolio)
        self.session.commit()
        self.session.refresh(portfolio)
        return portfolio

    # -- trades -------------------------------------------------------------

    def list_trades(
        self,
        portfolio_id: str,
        result: TradeResult | None = None,
    ) -> list[Trade]:
        """A portfolio's trades, newest trade date first."""
        stmt = select(Trade).where(Trade.portfolio_id == portfolio_id)
        if result is not None:
            stmt = stmt.where(Trade.result == result)
        stmt = stmt.order_by(Trade.trade_date.desc(), Trade.created_at)
        return list(self.session.exec(stmt).all())

    def get_trade(self, trade_id: str) -> Trade | None:
        return self.session.get(Trade, trade_id)

    def save_trade(self, trade: Trade) -> Trade:
        """Insert or replace a trade by id, stamping its reward-to-risk ratio."""
        trade.symbol = (trade.symbol or "").upper()
        trade.rr = compute_rr(trade.entry, trade.stop_loss, trade.take_profit)
        trade = self.session.merge(trade)
        self.session.commit()
        self.session.refresh(trade)
        return trade

    def delete_trade(self, trade_id: str) -> bool:
        trade = self.session.get(Trade, trade_id)
        if trade is None:
            return False
        self.session.delete(trade)
        self.session.commit()
        logger.info(f"Deleted trade {trade_id}")
        return True

    # -- flags --------------------------------------------------------------

    def is_onboarded(self) -> bool:
        flag = self.session.get(AppFlag, ONBOARDED_FLAG)
        return bool(flag and flag.value)

    def set_onboarded(self, value: bool):
        self.session.merge(AppFlag(key=ONBOARDED_FLAG, value=value))
        self.session.commit()
