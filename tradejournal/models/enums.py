"""Closed enumerations shared by models, schemas and the metrics engine."""

from enum import Enum


class TradeSide(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class TradeResult(str, Enum):
    WIN = "Win"
    LOSS = "Loss"
    BREAK_EVEN = "Break Even"
    PENDING = "Pending"  # open / unscored, excluded from performance stats


class TradeSession(str, Enum):
    LONDON = "London"
    NEW_YORK = "New York"
    LONDON_CLOSE = "London Close"
    OUT_OF_SESSION = "Out of Session"
