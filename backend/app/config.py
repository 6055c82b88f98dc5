"""
Centralized business constants for the strategy payoff engine.

All values that drive pricing and curve sampling are defined here.
Import from this module instead of hardcoding values in business logic.
"""

from __future__ import annotations

import os

# --- Contract conventions ---

# One listed equity option controls 100 shares
CONTRACT_MULTIPLIER = 100

# Calendar days per year used to turn days-to-expiration into years
DAYS_PER_YEAR = 365

# Strikes and grid prices are rounded to cents
PRICE_DECIMALS = 2


# --- Price grid ---

# Number of equal intervals in a price grid (grid has GRID_INTERVALS + 1 points)
GRID_INTERVALS = 200

# Default grid spans [spot * (2 - k), spot * k]
DEFAULT_RANGE_FACTOR = 1.5

# Wider grid, [0, 2 * spot], used to probe max profit / max loss at the edges
EXTREMA_RANGE_FACTOR = 2.0


# --- Market defaults (percent units, as typed by a user) ---

DEFAULT_MARKET: dict[str, float] = {
    "spot_price": 100.0,
    "volatility": 25.0,
    "risk_free_rate": 5.0,
    "days_to_expiration": 30,
}

DEFAULT_STRATEGY_ID = "long-call"


# --- Runtime ---

def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
