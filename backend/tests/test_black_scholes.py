import math

import pytest

from app.services.black_scholes import intrinsic_value, price, price_and_greeks
from app.services.stats import norm_cdf


def test_norm_cdf_reference_points():
    assert norm_cdf(0.0) == pytest.approx(0.5, abs=1e-12)
    assert norm_cdf(1.96) == pytest.approx(0.9750021048517795, abs=1e-9)
    assert norm_cdf(-1.0) == pytest.approx(0.15865525393145707, abs=1e-9)
    assert norm_cdf(10.0) == pytest.approx(1.0, abs=1e-12)
    assert 0.0 < norm_cdf(-10.0) < 1e-20


def test_call_known_value():
    # Reference value for this parameter set (Black–Scholes) ≈ 10.4506
    assert price("call", 100.0, 100.0, 1.0, 0.05, 0.20) == pytest.approx(10.4505836, abs=1e-6)


def test_put_known_value():
    assert price("put", 100.0, 100.0, 1.0, 0.05, 0.20) == pytest.approx(5.5735260, abs=1e-6)


@pytest.mark.parametrize(
    "spot,strike,rate,vol,t",
    [
        (100.0, 100.0, 0.05, 0.25, 30 / 365),
        (125.0, 130.0, 0.03, 0.25, 0.75),
        (50.0, 80.0, 0.00, 0.60, 2.0),
        (210.0, 150.0, -0.01, 0.15, 0.1),
    ],
)
def test_put_call_parity(spot, strike, rate, vol, t):
    call = price("call", spot, strike, t, rate, vol)
    put = price("put", spot, strike, t, rate, vol)
    assert call - put == pytest.approx(spot - strike * math.exp(-rate * t), abs=1e-4)


def test_expiry_returns_intrinsic_without_vol():
    assert price("call", 110.0, 100.0, 0.0, 0.05, 0.25) == 10.0
    assert price("put", 110.0, 100.0, 0.0, 0.05, 0.25) == 0.0
    # vol is not consulted at expiry, so a zero vol is not an error there
    assert price("put", 90.0, 100.0, 0.0, 0.0, 0.0) == 10.0


def test_expiry_matches_intrinsic_bit_for_bit():
    for spot in (0.5, 99.99, 100.0, 100.01, 173.37):
        for kind in ("call", "put"):
            assert price(kind, spot, 100.0, 0.0, 0.05, 0.25) == intrinsic_value(kind, spot, 100.0)


def test_converges_to_intrinsic_as_time_shrinks():
    one_day = price("call", 110.0, 100.0, 1 / 365, 0.05, 0.25)
    thirty_days = price("call", 110.0, 100.0, 30 / 365, 0.05, 0.25)
    assert one_day > 10.0
    assert one_day - 10.0 < 0.1
    assert one_day < thirty_days


@pytest.mark.parametrize(
    "kwargs,msg",
    [
        ({"vol": 0.0}, "vol"),
        ({"vol": -0.2}, "vol"),
        ({"t": -0.01}, "time_to_expiry"),
        ({"strike": 0.0}, "strike"),
        ({"spot": -5.0}, "spot"),
        ({"spot": math.nan}, "finite"),
    ],
)
def test_contract_violations_raise(kwargs, msg):
    args = {"spot": 100.0, "strike": 100.0, "t": 0.5, "rate": 0.05, "vol": 0.25}
    args.update(kwargs)
    with pytest.raises(ValueError, match=msg):
        price("call", args["spot"], args["strike"], args["t"], args["rate"], args["vol"])


def test_unknown_option_type_raises():
    with pytest.raises(ValueError):
        price("straddle", 100.0, 100.0, 0.5, 0.05, 0.25)  # type: ignore[arg-type]


def test_greeks_match_price_and_bumps():
    res = price_and_greeks("call", 100.0, 105.0, 0.5, 0.03, 0.3)
    assert res.price == pytest.approx(price("call", 100.0, 105.0, 0.5, 0.03, 0.3), rel=1e-12)

    h = 1e-3
    up = price("call", 100.0 + h, 105.0, 0.5, 0.03, 0.3)
    dn = price("call", 100.0 - h, 105.0, 0.5, 0.03, 0.3)
    assert res.delta == pytest.approx((up - dn) / (2 * h), abs=1e-5)
    assert res.gamma == pytest.approx((up - 2 * res.price + dn) / (h * h), abs=1e-3)

    vega_bump = (price("call", 100.0, 105.0, 0.5, 0.03, 0.3 + h) - price("call", 100.0, 105.0, 0.5, 0.03, 0.3 - h)) / (2 * h)
    assert res.vega == pytest.approx(vega_bump, rel=1e-5)


def test_put_delta_is_call_delta_minus_one():
    c = price_and_greeks("call", 100.0, 95.0, 0.25, 0.05, 0.2)
    p = price_and_greeks("put", 100.0, 95.0, 0.25, 0.05, 0.2)
    assert p.delta == pytest.approx(c.delta - 1.0, abs=1e-12)
    assert p.gamma == pytest.approx(c.gamma, rel=1e-12)


def test_greeks_at_expiry():
    itm = price_and_greeks("put", 90.0, 100.0, 0.0, 0.05, 0.25)
    assert itm.price == 10.0
    assert itm.delta == -1.0
    assert itm.gamma == 0.0 and itm.vega == 0.0
