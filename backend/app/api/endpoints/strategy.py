from __future__ import annotations

import math

from fastapi import APIRouter, HTTPException

from app.schemas.strategy import (
    DefaultLegsResponse,
    MarketParameters,
    StrategyAnalyzeRequest,
    StrategyAnalyzeResponse,
    StrategyCurve,
    StrategyLegsRequest,
    ValidationResult,
)
from app.services.strategy_engine import (
    InvalidStrategyError,
    UnknownStrategyError,
    analyze_strategy,
    generate_default_legs,
    get_strategy,
    validate_strategy,
)


router = APIRouter()


def _lookup(strategy_id: str):
    try:
        return get_strategy(strategy_id)
    except UnknownStrategyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


def _finite_or_none(x: float) -> float | None:
    return x if math.isfinite(x) else None


@router.post("/{strategy_id}/default-legs", response_model=DefaultLegsResponse)
def api_default_legs(strategy_id: str, market: MarketParameters) -> DefaultLegsResponse:
    _lookup(strategy_id)
    try:
        legs = generate_default_legs(strategy_id, market.spot_price, market)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DefaultLegsResponse(strategy_id=strategy_id, legs=legs)


@router.post("/{strategy_id}/validate", response_model=ValidationResult)
def api_validate(strategy_id: str, req: StrategyLegsRequest) -> ValidationResult:
    return validate_strategy(_lookup(strategy_id), req.legs)


@router.post("/{strategy_id}/analyze", response_model=StrategyAnalyzeResponse)
def api_analyze(strategy_id: str, req: StrategyAnalyzeRequest) -> StrategyAnalyzeResponse:
    _lookup(strategy_id)
    try:
        a = analyze_strategy(strategy_id, req.market, req.legs)
    except InvalidStrategyError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors}) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return StrategyAnalyzeResponse(
        strategy_id=strategy_id,
        name=a.strategy.name,
        legs=list(a.legs),
        expiration=StrategyCurve(spots=a.price_grid, values=a.expiration_pnl),
        current=StrategyCurve(spots=a.price_grid, values=a.current_pnl),
        max_profit=_finite_or_none(a.max_profit),
        max_profit_unbounded=math.isinf(a.max_profit),
        max_loss=_finite_or_none(a.max_loss),
        max_loss_unbounded=math.isinf(a.max_loss),
        breakevens=a.breakevens,
        net_premium=a.net_premium,
        greeks=a.greeks,
    )
