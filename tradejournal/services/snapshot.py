"""JSON snapshot of the whole journal: ``accounts``, ``trades`` and ``onboarded``.

The layout matches the browser blob store the journal started out with
(camelCase record fields). Loading is forgiving: a malformed document or
section falls back to its default, and malformed records are skipped.
"""

import json
import logging
from datetime import date

from pydantic import BaseModel, Field, ValidationError, field_validator

from tradejournal.models.enums import TradeResult, TradeSession, TradeSide
from tradejournal.models.portfolio import Portfolio
from tradejournal.models.trade import Trade, new_id
from tradejournal.services.repository import JournalRepository

logger = logging.getLogger(__name__)

# Key names used by the browser's localStorage dump
LEGACY_KEYS = {
    "accounts": "tradeflow_accounts",
    "trades": "tradeflow_trades",
    "onboarded": "pseudo_whales_onboarded",
}


class PortfolioRecord(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    currency: str = "USD"
    initial_balance: float = Field(default=0.0, alias="initialBalance")

    model_config = {"populate_by_name": True}


class TradeRecord(BaseModel):
    id: str = Field(default_factory=new_id)
    portfolio_id: str = Field(alias="accountId")
    trade_date: date = Field(alias="date")
    symbol: str = ""
    timeframe: str = Field(default="1h", alias="timeFrame")
    session: TradeSession = TradeSession.LONDON
    entry_type: str = Field(default="", alias="entryType")
    side: TradeSide = TradeSide.LONG
    lot_size: float = Field(default=0.0, alias="lotSize")
    entry: float = 0.0
    stop_loss: float = Field(default=0.0, alias="stopLoss")
    take_profit: float = Field(default=0.0, alias="takeProfit")
    result: TradeResult = TradeResult.PENDING
    pnl: float = 0.0
    rr: float = 0.0
    notes: str = ""
    entry_image: str | None = Field(default=None, alias="entryImage")
    exit_image: str | None = Field(default=None, alias="exitImage")

    model_config = {"populate_by_name": True}

    @field_validator("lot_size", "entry", "stop_loss", "take_profit", "pnl", "rr", mode="before")
    @classmethod
    def _blank_number_is_zero(cls, value):
        if value is None or value == "":
            return 0.0
        return value


class JournalSnapshot(BaseModel):
    accounts: list[PortfolioRecord] = Field(default_factory=list)
    trades: list[TradeRecord] = Field(default_factory=list)
    onboarded: bool = False


def _section(raw: dict, name: str):
    value = raw.get(name, raw.get(LEGACY_KEYS[name]))
    # localStorage stores each section as a JSON string
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    return value


def _records(value, model: type[BaseModel]) -> list:
    if not isinstance(value, list):
        return []
    records = []
    for item in value:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__}: {e.error_count()} error(s)")
    return records


def load_snapshot(text: str | bytes | None) -> JournalSnapshot:
    """Parse a snapshot document; anything unreadable becomes the empty default."""
    try:
        raw = json.loads(text) if text else {}
    except (TypeError, ValueError):
        logger.warning("Snapshot is not valid JSON; using empty journal")
        return JournalSnapshot()
    if not isinstance(raw, dict):
        return JournalSnapshot()

    return JournalSnapshot(
        accounts=_records(_section(raw, "accounts"), PortfolioRecord),
        trades=_records(_section(raw, "trades"), TradeRecord),
        onboarded=_section(raw, "onboarded") is True,
    )


def import_snapshot(repository: JournalRepository, snapshot: JournalSnapshot) -> dict:
    """Upsert every record of ``snapshot``; returns per-section counts."""
    for record in snapshot.accounts:
        repository.save_portfolio(Portfolio(**record.model_dump()))
    for record in snapshot.trades:
        repository.save_trade(Trade(**record.model_dump(exclude={"rr"})))
    if snapshot.onboarded:
        repository.set_onboarded(True)
    return {"accounts": len(snapshot.accounts), "trades": len(snapshot.trades)}


def export_snapshot(repository: JournalRepository) -> JournalSnapshot:
    portfolios = repository.list_portfolios()
    trades = []
    for portfolio in portfolios:
        # oldest first, the order the blob store appended them in
        trades.extend(reversed(repository.list_trades(portfolio.id)))
    return JournalSnapshot(
        accounts=[PortfolioRecord.model_validate(p.model_dump()) for p in portfolios],
        trades=[TradeRecord.model_validate(t.model_dump()) for t in trades],
        onboarded=repository.is_onboarded(),
    )


def dump_snapshot(snapshot: JournalSnapshot) -> str:
    return snapshot.model_dump_json(by_alias=True, indent=2)
