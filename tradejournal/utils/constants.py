"""Shared constants and defaults for the journal."""

TIME_FRAMES = ["1m", "3m", "5m", "15m", "30m", "1h", "4h", "D", "W"]

ENTRY_TYPES = [
    "Breakout",
    "Retest",
    "Trend Following",
    "Reversal",
    "Scalp",
    "SMC/ICT",
    "Unicorn model",
    "Order Block",
    "Fvg",
    "Poi",
    "Liquidity",
]

SUGGESTED_SYMBOLS = ["EUR/USD", "GBP/USD", "XAU/USD"]

DAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

UNKNOWN_KEY = "Unknown"
INITIAL_POINT_LABEL = "Initial"

# Materialised on first run when no portfolio exists
DEFAULT_PORTFOLIO_ID = "default"
DEFAULT_PORTFOLIO_NAME = "Main Portfolio"
DEFAULT_CURRENCY = "USD"
DEFAULT_INITIAL_BALANCE = 10000.0

ONBOARDED_FLAG = "onboarded"
