"""Pydantic schemas for Trade API."""

from datetime import date
from pydantic import BaseModel, Field, field_validator

from tradejournal.models.enums import TradeResult, TradeSession, TradeSide


def _clean_symbol(value: str) -> str:
    text = value.strip().upper()
    if not text:
        raise ValueError("must not be empty")
    return text


class TradeCreate(BaseModel):
    portfolio_id: str = Field(min_length=1)
    trade_date: date = Field(default_factory=date.today)
    symbol: str = Field(min_length=1, max_length=32)
    timeframe: str = "1h"
    session: TradeSession = TradeSession.LONDON
    entry_type: str = "Retest"
    side: TradeSide = TradeSide.LONG
    lot_size: float = 0.0
    entry: float = 0.0
    stop_loss: float = 0.0
    take_profit: float = 0.0
    result: TradeResult = TradeResult.PENDING
    pnl: float = 0.0
    notes: str = ""
    entry_image: str | None = None
    exit_image: str | None = None

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return _clean_symbol(value)


class TradeUpdate(BaseModel):
    # no portfolio_id: trades are never re-parented
    trade_date: date | None = None
    symbol: str | None = Field(default=None, min_length=1, max_length=32)
    timeframe: str | None = None
    session: TradeSession | None = None
    entry_type: str | None = None
    side: TradeSide | None = None
    lot_size: float | None = None
    entry: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    result: TradeResult | None = None
    pnl: float | None = None
    notes: str | None = None
    entry_image: str | None = None
    exit_image: str | None = None

    @field_validator("symbol")
    @classmethod
    def _normalize_optional_symbol(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _clean_symbol(value)


class TradeRead(BaseModel):
    id: str
    portfolio_id: str
    trade_date: date
    symbol: str
    timeframe: str
    session: TradeSession
    entry_type: str
    side: TradeSide
    lot_size: float
    entry: float
    stop_loss: float
    take_profit: float
    result: TradeResult
    pnl: float
    rr: float
    notes: str
    entry_image: str | None
    exit_image: str | None

    model_config = {"from_attributes": True}
