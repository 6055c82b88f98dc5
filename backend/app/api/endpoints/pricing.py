from __future__ import annotations

from fastapi import APIRouter, HTTPException

from app.schemas.pricing import Greeks, OptionPricingRequest, OptionPricingResponse
from app.services.black_scholes import intrinsic_value, price_and_greeks

router = APIRouter()


@router.post("/option", response_model=OptionPricingResponse)
def price_option(req: OptionPricingRequest) -> OptionPricingResponse:
    try:
        res = price_and_greeks(
            req.option_type,
            req.spot,
            req.strike,
            req.time_to_expiry,
            req.rate,
            req.vol if req.vol is not None else 0.0,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    intrinsic = intrinsic_value(req.option_type, req.spot, req.strike)
    return OptionPricingResponse(
        price=res.price,
        intrinsic=intrinsic,
        time_value=res.price - intrinsic,
        greeks=Greeks(delta=res.delta, gamma=res.gamma, vega=res.vega, theta=res.theta, rho=res.rho),
    )
