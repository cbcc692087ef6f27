"""Shared fixtures: in-memory database, repository and API client."""

import os

os.environ.setdefault("TJ_DATABASE_URL", "sqlite://")
os.environ.setdefault("TJ_GEMINI_API_KEY", "")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import tradejournal.models  # noqa: F401
from tradejournal.models.enums import TradeResult, TradeSession, TradeSide
from tradejournal.models.portfolio import Portfolio
from tradejournal.models.trade import Trade
from tradejournal.services.repository import JournalRepository


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(session) -> JournalRepository:
    return JournalRepository(session)


@pytest.fixture
def make_trade():
    """Factory for unsaved trades with sensible defaults."""
    def _make(**overrides) -> Trade:
        fields = {
            "portfolio_id": "default",
            "trade_date": date(2024, 1, 1),
            "symbol": "EUR/USD",
            "timeframe": "15m",
            "session": TradeSession.LONDON,
            "entry_type": "Breakout",
            "side": TradeSide.LONG,
            "entry": 100.0,
            "stop_loss": 90.0,
            "take_profit": 130.0,
            "result": TradeResult.WIN,
            "pnl": 0.0,
            "rr": 0.0,
        }
        fields.update(overrides)
        return Trade(**fields)
    return _make


class FakeAdvisor:
    """Stands in for TradeAdvisor in API tests; records what it was asked."""

    def __init__(self):
        self.critiqued = []
        self.pattern_calls = 0
        self.queries = []

    async def analyze_trade(self, trade) -> str:
        self.critiqued.append(trade.id)
        return f"critique of {trade.symbol}"

    async def analyze_patterns(self, trades):
        from tradejournal.services.advisor import PsychologicalTheme

        self.pattern_calls += 1
        return [
            PsychologicalTheme(
                theme="Revenge Escalation",
                description="Size increases after losses",
                win_count=1,
                loss_count=3,
                total_pnl=-250.0,
                recommendation="Cap size after two losses",
            )
        ]

    async def search_market_intelligence(self, query: str):
        from tradejournal.services.advisor import SearchResult, Source

        self.queries.append(query)
        return SearchResult(text=f"notes on {query}", sources=[Source(title="Wire", uri="https://example.com")])


@pytest.fixture
def fake_advisor() -> FakeAdvisor:
    return FakeAdvisor()


@pytest.fixture
def client(session, fake_advisor):
    from tradejournal.api.deps import get_advisor, get_analysis_board
    from tradejournal.database import get_session
    from tradejournal.main import app
    from tradejournal.services.request_guard import AnalysisBoard

    board = AnalysisBoard()
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_advisor] = lambda: fake_advisor
    app.dependency_overrides[get_analysis_board] = lambda: board
    # No context manager: the lifespan would create tables on the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def portfolio(repository) -> Portfolio:
    return repository.list_portfolios()[0]
