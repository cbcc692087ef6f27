"""Trade model — one journal entry, owned by exactly one portfolio."""

from datetime import date, datetime, timezone
from uuid import uuid4

from sqlmodel import SQLModel, Field

from tradejournal.models.enums import TradeResult, TradeSession, TradeSide


def new_id() -> str:
    return uuid4().hex[:12]


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: str = Field(default_factory=new_id, primary_key=True)
    portfolio_id: str = Field(foreign_key="portfolio.id", index=True)
    trade_date: date = Field(index=True)
    symbol: str = ""
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
    rr: float = 0.0  # stamped by the repository on save

    notes: str = ""
    entry_image: str | None = None  # data URL
    exit_image: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
