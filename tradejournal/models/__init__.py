"""Database models."""

from tradejournal.models.enums import TradeResult, TradeSession, TradeSide
from tradejournal.models.portfolio import Portfolio
from tradejournal.models.trade import Trade
from tradejournal.models.app_flag import AppFlag

__all__ = [
    "TradeResult",
    "TradeSession",
    "TradeSide",
    "Portfolio",
    "Trade",
    "AppFlag",
]
