"""
Strategy valuation engine.

Pure functions that turn a catalog strategy plus concrete leg instances into:
- default legs priced off the market inputs
- profit/loss at a price, and over a price grid (at expiry or before it)
- breakevens, max profit and max loss found by scanning a sampled curve
- validation, net premium and position Greeks

Nothing here keeps state between calls; every entry point takes the complete
input snapshot it needs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from app.config import (
    CONTRACT_MULTIPLIER,
    DEFAULT_RANGE_FACTOR,
    EXTREMA_RANGE_FACTOR,
    GRID_INTERVALS,
    PRICE_DECIMALS,
)
from app.meta.strategy_catalog import STRATEGIES
from app.schemas.pricing import Greeks
from app.schemas.strategy import LegInstance, LegTemplate, MarketParameters, StrategyDefinition, ValidationResult
from app.services import black_scholes
from app.services.black_scholes import intrinsic_value

logger = logging.getLogger(__name__)


class UnknownStrategyError(ValueError):
    """Raised for a strategy id that is not in the catalog."""

    def __init__(self, strategy_id: str):
        super().__init__(f"Unknown strategy_id: {strategy_id}")
        self.strategy_id = strategy_id


class InvalidStrategyError(ValueError):
    """Raised when curves or metrics are requested for an invalid leg set."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid strategy")


@dataclass(frozen=True)
class StrategyAnalysis:
    strategy_id: str
    strategy: StrategyDefinition
    legs: tuple[LegInstance, ...]
    price_grid: list[float]
    expiration_pnl: list[float]
    current_pnl: list[float]
    max_profit: float
    max_loss: float
    breakevens: list[float]
    net_premium: float
    greeks: Greeks


# -------
# Catalog
# -------


def get_strategy(strategy_id: str) -> StrategyDefinition:
    try:
        return STRATEGIES[strategy_id]
    except KeyError:
        raise UnknownStrategyError(strategy_id) from None


def list_strategies() -> list[tuple[str, StrategyDefinition]]:
    return list(STRATEGIES.items())


def describe_leg(template: LegTemplate) -> str:
    """Display label for a leg, e.g. "Long Call" or "Own Stock"."""
    if template.instrument_type == "stock":
        return "Own Stock"
    side = "Long" if template.action == "buy" else "Short"
    return f"{side} {template.instrument_type.capitalize()}"


# --------------
# Leg generation
# --------------


def _round_half_up(x: float, decimals: int = 0) -> float:
    # Half-up (not banker's) rounding, so 100.5 -> 101 and 2.345 -> 2.35.
    scale = 10**decimals
    return math.floor(x * scale + 0.5) / scale


def generate_default_legs(strategy_id: str, spot_price: float, market: MarketParameters) -> list[LegInstance]:
    """One LegInstance per template, in template order.

    Option strikes are whole dollars (spot + strike_offset, rounded) and
    premiums are theoretical values rounded to cents. The market volatility
    and rate (percent) are frozen onto each option leg as decimals.
    """
    strategy = get_strategy(strategy_id)
    if not math.isfinite(spot_price) or spot_price <= 0:
        raise ValueError("spot_price must be > 0")

    vol = market.volatility / 100.0
    rate = market.risk_free_rate / 100.0
    t_years = market.time_to_expiry

    legs: list[LegInstance] = []
    for i, template in enumerate(strategy.legs):
        if not template.is_option:
            legs.append(LegInstance.stock(cost_basis=spot_price))
            continue

        strike = _round_half_up(spot_price + template.strike_offset)
        if strike <= 0:
            raise ValueError(
                f"Leg {i + 1}: default strike {strike:g} is not positive; spot_price is too low for {strategy.name}"
            )
        theo = black_scholes.price(template.instrument_type, spot_price, strike, t_years, rate, vol)
        legs.append(
            LegInstance.option(
                strike=strike,
                premium=_round_half_up(theo, PRICE_DECIMALS),
                volatility=vol,
                risk_free_rate=rate,
            )
        )

    logger.debug("Generated %d default legs for %s at spot %.2f", len(legs), strategy_id, spot_price)
    return legs


def apply_leg_overrides(
    legs: Sequence[LegInstance],
    overrides: Mapping[int, Mapping[str, Any]],
) -> list[LegInstance]:
    """Return a new leg list with per-index field overrides applied.

    `overrides` maps a 0-based leg index to the fields to replace, e.g.
    ``{0: {"strike": 105.0, "premium": 3.2}}``. The input legs are not modified.
    """
    allowed = set(LegInstance.model_fields)
    out = list(legs)
    for index, fields in overrides.items():
        if not 0 <= index < len(out):
            raise ValueError(f"override index {index} out of range for {len(out)} legs")
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"unknown leg fields: {', '.join(sorted(unknown))}")
        out[index] = LegInstance.model_validate({**out[index].model_dump(), **fields})
    return out


# ----------
# Validation
# ----------


_OPTION_FIELDS = ("strike", "premium", "volatility", "risk_free_rate")


def _is_number(x: float | None) -> bool:
    return x is not None and math.isfinite(x)


def validate_strategy(strategy: StrategyDefinition | None, legs: Sequence[LegInstance]) -> ValidationResult:
    """Check leg count and per-leg fields; collects every problem found."""
    errors: list[str] = []

    if strategy is None:
        return ValidationResult(is_valid=False, errors=["Invalid strategy selected"])

    if len(legs) != len(strategy.legs):
        errors.append(
            f"Number of legs does not match strategy requirements (expected {len(strategy.legs)}, got {len(legs)})"
        )

    for i, (template, leg) in enumerate(zip(strategy.legs, legs), start=1):
        if template.is_option:
            if leg.cost_basis is not None:
                errors.append(f"Leg {i}: Unexpected fields for {template.instrument_type} leg: cost_basis")
            if not _is_number(leg.strike) or leg.strike <= 0:
                errors.append(f"Leg {i}: Invalid strike price")
            if not _is_number(leg.premium) or leg.premium < 0:
                errors.append(f"Leg {i}: Invalid premium")
            if not _is_number(leg.volatility) or leg.volatility <= 0:
                errors.append(f"Leg {i}: Invalid volatility")
            if not _is_number(leg.risk_free_rate):
                errors.append(f"Leg {i}: Missing risk-free rate")
        else:
            extra = [f for f in _OPTION_FIELDS if getattr(leg, f) is not None]
            if extra:
                errors.append(f"Leg {i}: Unexpected fields for stock leg: {', '.join(extra)}")
            if not _is_number(leg.cost_basis):
                errors.append(f"Leg {i}: Missing cost basis")

    return ValidationResult(is_valid=not errors, errors=errors)


def _require_valid(strategy: StrategyDefinition, legs: Sequence[LegInstance]) -> None:
    result = validate_strategy(strategy, legs)
    if not result.is_valid:
        logger.warning("Refusing to value %s: %s", strategy.name, "; ".join(result.errors))
        raise InvalidStrategyError(result.errors)


def _check_time(time_to_expiry: float) -> None:
    if not math.isfinite(time_to_expiry) or time_to_expiry < 0:
        raise ValueError("time_to_expiry must be >= 0")


# -----------
# Profit/loss
# -----------


def _leg_pnl(template: LegTemplate, leg: LegInstance, stock_price: float, time_to_expiry: float) -> float:
    if template.instrument_type == "stock":
        # Only long stock ("own") exists in the catalog.
        return (stock_price - leg.cost_basis) * template.quantity

    if time_to_expiry == 0:
        value = intrinsic_value(template.instrument_type, stock_price, leg.strike)
    else:
        value = black_scholes.price(
            template.instrument_type,
            stock_price,
            leg.strike,
            time_to_expiry,
            leg.risk_free_rate,
            leg.volatility,
        )

    if template.action == "buy":
        return (value - leg.premium) * template.quantity * CONTRACT_MULTIPLIER
    return (leg.premium - value) * template.quantity * CONTRACT_MULTIPLIER


def _pnl_at(strategy: StrategyDefinition, legs: Sequence[LegInstance], stock_price: float, time_to_expiry: float) -> float:
    total = 0.0
    for template, leg in zip(strategy.legs, legs):
        total += _leg_pnl(template, leg, stock_price, time_to_expiry)
    return total


def _curve(strategy: StrategyDefinition, legs: Sequence[LegInstance], prices: Sequence[float], time_to_expiry: float) -> list[float]:
    return [_pnl_at(strategy, legs, p, time_to_expiry) for p in prices]


def profit_loss_at_price(
    strategy: StrategyDefinition,
    legs: Sequence[LegInstance],
    stock_price: float,
    time_to_expiry: float = 0.0,
) -> float:
    """Total strategy P/L at one underlying price.

    time_to_expiry is in years; 0 values options at intrinsic, anything
    positive revalues them with Black–Scholes using each leg's own vol/rate.
    """
    _require_valid(strategy, legs)
    _check_time(time_to_expiry)
    return _pnl_at(strategy, legs, stock_price, time_to_expiry)


def profit_loss_curve(
    strategy: StrategyDefinition,
    legs: Sequence[LegInstance],
    prices: Sequence[float],
    time_to_expiry: float = 0.0,
) -> list[float]:
    """P/L at every price of `prices`, same length and order."""
    _require_valid(strategy, legs)
    _check_time(time_to_expiry)
    return _curve(strategy, legs, prices, time_to_expiry)


def price_grid(spot_price: float, range_factor: float = DEFAULT_RANGE_FACTOR) -> list[float]:
    """Strictly increasing grid over [spot*(2-k), spot*k], rounded to cents.

    Always GRID_INTERVALS + 1 points. k must be in (1, 2]: k <= 1 collapses the
    range and k > 2 would put negative prices on the grid.
    """
    if not math.isfinite(spot_price) or spot_price <= 0:
        raise ValueError("spot_price must be > 0")
    if not math.isfinite(range_factor) or range_factor <= 1.0:
        raise ValueError("range_factor must be > 1")
    if range_factor > 2.0:
        raise ValueError("range_factor must be <= 2 (grid prices cannot be negative)")

    lo = spot_price * (2.0 - range_factor)
    hi = spot_price * range_factor
    grid = np.round(np.linspace(lo, hi, GRID_INTERVALS + 1), PRICE_DECIMALS)

    if not np.all(np.diff(grid) > 0):
        raise ValueError("spot_price is too small for a cent-rounded price grid")
    return grid.tolist()


# -------
# Metrics
# -------


def find_breakevens(strategy: StrategyDefinition, legs: Sequence[LegInstance], current_price: float) -> list[float]:
    """Expiration breakevens, ascending.

    Scans the default grid for consecutive points whose P/L touches or crosses
    zero and linearly interpolates between them. A zero landing exactly on a
    grid point is matched by both neighbouring pairs; it is reported once.
    """
    _require_valid(strategy, legs)
    spots = price_grid(current_price)
    pnl = _curve(strategy, legs, spots, 0.0)

    breakevens: list[float] = []
    for i in range(1, len(pnl)):
        a = pnl[i - 1]
        b = pnl[i]
        if (a <= 0 and b >= 0) or (a >= 0 and b <= 0):
            denom = abs(a) + abs(b)
            # Flat run at exactly zero: no slope to interpolate on.
            ratio = abs(a) / denom if denom > 0 else 0.0
            be = spots[i - 1] + ratio * (spots[i] - spots[i - 1])
            if not breakevens or abs(breakevens[-1] - be) > 1e-9:
                breakevens.append(float(be))

    logger.debug("%s: %d breakeven(s) around %.2f", strategy.name, len(breakevens), current_price)
    return breakevens


def _extrema_curve(strategy: StrategyDefinition, legs: Sequence[LegInstance], current_price: float) -> list[float]:
    _require_valid(strategy, legs)
    return _curve(strategy, legs, price_grid(current_price, EXTREMA_RANGE_FACTOR), 0.0)


def calculate_max_profit(strategy: StrategyDefinition, legs: Sequence[LegInstance], current_price: float) -> float:
    """Largest expiration P/L on [0, 2*price]; +inf if still rising at the right edge."""
    pnl = _extrema_curve(strategy, legs, current_price)
    max_pnl = max(pnl)
    if pnl[-1] > pnl[-2] and pnl[-1] == max_pnl:
        return math.inf
    return max_pnl


def calculate_max_loss(strategy: StrategyDefinition, legs: Sequence[LegInstance], current_price: float) -> float:
    """Smallest expiration P/L on [0, 2*price]; -inf if still falling at either edge."""
    pnl = _extrema_curve(strategy, legs, current_price)
    min_pnl = min(pnl)
    if (pnl[0] < pnl[1] and pnl[0] == min_pnl) or (pnl[-1] < pnl[-2] and pnl[-1] == min_pnl):
        return -math.inf
    return min_pnl


def calculate_net_premium(strategy: StrategyDefinition, legs: Sequence[LegInstance]) -> float:
    """Net option premium in dollars: positive = debit paid, negative = credit received."""
    _require_valid(strategy, legs)
    net = 0.0
    for template, leg in zip(strategy.legs, legs):
        if not template.is_option:
            continue
        amount = leg.premium * template.quantity * CONTRACT_MULTIPLIER
        net += amount if template.action == "buy" else -amount
    return net


def strategy_greeks(
    strategy: StrategyDefinition,
    legs: Sequence[LegInstance],
    stock_price: float,
    time_to_expiry: float = 0.0,
) -> Greeks:
    """Position Greeks in dollars per unit move (options x quantity x 100, stock delta = shares)."""
    _require_valid(strategy, legs)
    _check_time(time_to_expiry)

    delta = gamma = vega = theta = rho = 0.0
    for template, leg in zip(strategy.legs, legs):
        if not template.is_option:
            delta += template.quantity
            continue
        g = black_scholes.price_and_greeks(
            template.instrument_type,
            stock_price,
            leg.strike,
            time_to_expiry,
            leg.risk_free_rate,
            leg.volatility,
        )
        k = template.quantity * CONTRACT_MULTIPLIER * (1.0 if template.action == "buy" else -1.0)
        delta += g.delta * k
        gamma += g.gamma * k
        vega += g.vega * k
        theta += g.theta * k
        rho += g.rho * k

    return Greeks(delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)


# -------------
# Full analysis
# -------------


def analyze_strategy(
    strategy_id: str,
    market: MarketParameters,
    legs: Sequence[LegInstance] | None = None,
) -> StrategyAnalysis:
    """One full recomputation pass for a strategy.

    Uses `legs` as given (e.g. after user edits) or generates defaults from
    the market inputs. Raises InvalidStrategyError for an invalid leg set.
    """
    strategy = get_strategy(strategy_id)
    if legs is None:
        legs = generate_default_legs(strategy_id, market.spot_price, market)
    legs = tuple(legs)
    _require_valid(strategy, legs)

    spot = market.spot_price
    t_years = market.time_to_expiry
    grid = price_grid(spot)

    analysis = StrategyAnalysis(
        strategy_id=strategy_id,
        strategy=strategy,
        legs=legs,
        price_grid=grid,
        expiration_pnl=_curve(strategy, legs, grid, 0.0),
        current_pnl=_curve(strategy, legs, grid, t_years),
        max_profit=calculate_max_profit(strategy, legs, spot),
        max_loss=calculate_max_loss(strategy, legs, spot),
        breakevens=find_breakevens(strategy, legs, spot),
        net_premium=calculate_net_premium(strategy, legs),
        greeks=strategy_greeks(strategy, legs, spot, t_years),
    )
    logger.info(
        "Analyzed %s at spot %.2f, %d DTE: max profit %s, max loss %s",
        strategy_id,
        spot,
        market.days_to_expiration,
        analysis.max_profit,
        analysis.max_loss,
    )
    return analysis
