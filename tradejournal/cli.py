"""CLI tool for journal maintenance.

Usage:
    python -m tradejournal.cli init-db
    python -m tradejournal.cli summary [portfolio_id]
    python -m tradejournal.cli export <path>
    python -m tradejournal.cli import <path>
"""

import sys
from pathlib import Path

from sqlmodel import Session

from tradejournal.database import engine, create_db_and_tables
from tradejournal.services import metrics
from tradejournal.services.repository import JournalRepository
from tradejournal.services.snapshot import dump_snapshot, export_snapshot, import_snapshot, load_snapshot
from tradejournal.utils.constants import DEFAULT_PORTFOLIO_ID
from tradejournal.utils.logging import setup_logging


def init_db():
    create_db_and_tables()
    print("Database ready.")


def summary(portfolio_id: str = DEFAULT_PORTFOLIO_ID):
    """Print headline stats and the strategy breakdown for one portfolio."""
    create_db_and_tables()
    with Session(engine) as session:
        repository = JournalRepository(session)
        portfolio = repository.get_portfolio(portfolio_id)
        if portfolio is None:
            print(f"Portfolio '{portfolio_id}' not found.")
            sys.exit(1)
        trades = repository.list_trades(portfolio.id)

    stats = metrics.summarize(trades, portfolio.initial_balance)
    print(f"{portfolio.name} ({portfolio.currency})")
    print(f"  Equity:      {stats.equity:,.2f}")
    print(f"  Net P&L:     {stats.net_pnl:+,.2f}")
    print(f"  Win rate:    {stats.win_rate:.1f}%  ({stats.trade_count} closed)")
    print(f"  Avg R:R:     {stats.avg_rr:.2f}")

    by_strategy = metrics.group_by(trades, metrics.strategy_key)
    if by_strategy:
        print("\nBy strategy:")
        for key, group in by_strategy.items():
            print(f"  {key:<20} {group.count:>4} trades  {group.win_rate:5.1f}%  {group.pnl:+,.2f}")


def export_journal(path: str):
    create_db_and_tables()
    with Session(engine) as session:
        snapshot = export_snapshot(JournalRepository(session))
    Path(path).write_text(dump_snapshot(snapshot))
    print(f"Exported {len(snapshot.accounts)} portfolios and {len(snapshot.trades)} trades to {path}")


def import_journal(path: str):
    file = Path(path)
    if not file.is_file():
        print(f"File not found: {path}")
        sys.exit(1)

    create_db_and_tables()
    snapshot = load_snapshot(file.read_text())
    with Session(engine) as session:
        counts = import_snapshot(JournalRepository(session), snapshot)
    print(f"Imported {counts['accounts']} portfolios and {counts['trades']} trades.")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m tradejournal.cli <command> [args]")
        print("Commands: init-db, summary [portfolio_id], export <path>, import <path>")
        sys.exit(1)

    setup_logging()
    command, args = sys.argv[1], sys.argv[2:]
    if command == "init-db":
        init_db()
    elif command == "summary":
        summary(*args[:1])
    elif command in ("export", "import") and len(args) == 1:
        (export_journal if command == "export" else import_journal)(args[0])
    else:
        print(f"Unknown command or missing argument: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
