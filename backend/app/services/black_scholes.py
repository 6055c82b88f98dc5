from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from app.services.stats import norm_cdf, norm_pdf

OptionType = Literal["call", "put"]


@dataclass(frozen=True)
class BSResult:
    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float


def intrinsic_value(option_type: OptionType, spot: float, strike: float) -> float:
    """Exercise value at expiry.

    Shared by the pricer's T == 0 branch and the strategy engine's expiration
    curve, so both paths produce identical floats.
    """
    if option_type == "call":
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def _check_contract(option_type: str, spot: float, strike: float, time_to_expiry: float) -> None:
    if option_type not in ("call", "put"):
        raise ValueError("option_type must be 'call' or 'put'")
    if not (math.isfinite(spot) and math.isfinite(strike)):
        raise ValueError("spot and strike must be finite")
    if spot <= 0 or strike <= 0:
        raise ValueError("spot and strike must be > 0")
    if not math.isfinite(time_to_expiry) or time_to_expiry < 0:
        raise ValueError("time_to_expiry must be >= 0")


def _check_diffusion(rate: float, vol: float) -> None:
    if not math.isfinite(vol) or vol <= 0:
        raise ValueError("vol must be > 0")
    if not math.isfinite(rate):
        raise ValueError("rate must be finite")


def price(
    option_type: OptionType,
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    vol: float,
) -> float:
    """Black–Scholes–Merton value of a European option (no dividends).

    Conventions:
      - time_to_expiry is in years; 0 means "at expiry" and returns intrinsic
        value without looking at rate or vol.
      - rate is a continuously-compounded annual rate (0.05 for 5%).
      - vol is annualized (0.25 for 25%).

    Raises ValueError on non-positive spot/strike/vol or negative time.
    """
    _check_contract(option_type, spot, strike, time_to_expiry)
    if time_to_expiry == 0:
        return intrinsic_value(option_type, spot, strike)
    _check_diffusion(rate, vol)

    sqrtT = math.sqrt(time_to_expiry)
    d1 = (math.log(spot / strike) + (rate + 0.5 * vol * vol) * time_to_expiry) / (vol * sqrtT)
    d2 = d1 - vol * sqrtT
    disc_r = math.exp(-rate * time_to_expiry)

    if option_type == "call":
        value = spot * norm_cdf(d1) - strike * disc_r * norm_cdf(d2)
    else:
        value = strike * disc_r * norm_cdf(-d2) - spot * norm_cdf(-d1)

    # Deep out-of-the-money values can come out as -1e-17 from cancellation.
    return max(value, 0.0)


def price_and_greeks(
    option_type: OptionType,
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    vol: float,
) -> BSResult:
    """Black–Scholes price + Greeks.

    Greeks are per 1 unit of underlying and per 1.0 absolute change in vol.
    Theta is returned per YEAR (not per day).
    """
    _check_contract(option_type, spot, strike, time_to_expiry)
    if time_to_expiry == 0:
        # At expiry: intrinsic, and set most Greeks to 0 for stability.
        intrinsic = intrinsic_value(option_type, spot, strike)
        delta = 1.0 if (option_type == "call" and spot > strike) else (-1.0 if (option_type == "put" and spot < strike) else 0.0)
        return BSResult(price=intrinsic, delta=delta, gamma=0.0, vega=0.0, theta=0.0, rho=0.0)
    _check_diffusion(rate, vol)

    sqrtT = math.sqrt(time_to_expiry)
    d1 = (math.log(spot / strike) + (rate + 0.5 * vol * vol) * time_to_expiry) / (vol * sqrtT)
    d2 = d1 - vol * sqrtT
    disc_r = math.exp(-rate * time_to_expiry)
    pdf_d1 = norm_pdf(d1)

    if option_type == "call":
        Nd2 = norm_cdf(d2)
        value = spot * norm_cdf(d1) - strike * disc_r * Nd2
        delta = norm_cdf(d1)
        theta = -(spot * pdf_d1 * vol) / (2.0 * sqrtT) - rate * strike * disc_r * Nd2
        rho = strike * time_to_expiry * disc_r * Nd2
    else:
        Nmd2 = norm_cdf(-d2)
        value = strike * disc_r * Nmd2 - spot * norm_cdf(-d1)
        delta = norm_cdf(d1) - 1.0
        theta = -(spot * pdf_d1 * vol) / (2.0 * sqrtT) + rate * strike * disc_r * Nmd2
        rho = -strike * time_to_expiry * disc_r * Nmd2

    gamma = pdf_d1 / (spot * vol * sqrtT)
    vega = spot * pdf_d1 * sqrtT

    return BSResult(price=max(value, 0.0), delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)
