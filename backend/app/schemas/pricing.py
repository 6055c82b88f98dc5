from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class Greeks(BaseModel):
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float


class OptionPricingRequest(BaseModel):
    option_type: Literal["call", "put"] = Field(description="Option type")
    spot: float = Field(gt=0, description="Spot price")
    strike: float = Field(gt=0, description="Strike price")
    time_to_expiry: float = Field(ge=0, description="Time to expiry in years (0 = at expiry)")
    rate: float = Field(default=0.0, description="Continuously-compounded annual risk-free rate (e.g., 0.05)")
    vol: float | None = Field(default=None, gt=0, description="Annualized volatility (e.g., 0.25)")

    @model_validator(mode="after")
    def _require_vol_before_expiry(self) -> "OptionPricingRequest":
        if self.time_to_expiry > 0 and self.vol is None:
            raise ValueError("vol is required when time_to_expiry > 0")
        return self


class OptionPricingResponse(BaseModel):
    price: float
    intrinsic: float
    time_value: float
    greeks: Greeks
