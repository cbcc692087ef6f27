"""SQLModel database engine and session management."""

import logging

from sqlmodel import SQLModel, create_engine, Session

from tradejournal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)


def create_db_and_tables():
    """Create all tables and the default portfolio. Called on startup."""
    import tradejournal.models  # noqa: F401  populate metadata
    from tradejournal.services.repository import JournalRepository

    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        JournalRepository(session).list_portfolios()


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
