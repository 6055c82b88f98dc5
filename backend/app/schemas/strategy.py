from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.config import DAYS_PER_YEAR
from app.schemas.pricing import Greeks


Action = Literal["buy", "sell", "own"]
InstrumentType = Literal["call", "put", "stock"]
Complexity = Literal["beginner", "intermediate", "advanced"]
RiskLevel = Literal["low", "medium", "high"]


class MarketParameters(BaseModel):
    """Market inputs as a user types them.

    volatility and risk_free_rate are in PERCENT (25 means 25%); the engine
    converts them to decimals when it freezes them onto generated legs.
    """

    model_config = ConfigDict(frozen=True)

    spot_price: float = Field(gt=0, description="Current underlying price")
    volatility: float = Field(gt=0, description="Annualized volatility, percent")
    risk_free_rate: float = Field(description="Annual risk-free rate, percent")
    days_to_expiration: int = Field(ge=0, description="Calendar days to expiry")

    @property
    def time_to_expiry(self) -> float:
        return self.days_to_expiration / DAYS_PER_YEAR


# --------------------------
# Static catalog definitions
# --------------------------


class LegTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: Action
    instrument_type: InstrumentType
    quantity: int = Field(gt=0, description="Contracts for options, shares for stock")
    strike_offset: int = Field(default=0, description="Added to spot to derive the default strike")

    @model_validator(mode="after")
    def _check_shape(self) -> "LegTemplate":
        if self.instrument_type == "stock":
            if self.action != "own":
                raise ValueError("stock legs only support action 'own'")
            if self.strike_offset != 0:
                raise ValueError("strike_offset is only meaningful for option legs")
        elif self.action == "own":
            raise ValueError("option legs must be 'buy' or 'sell'")
        return self

    @property
    def is_option(self) -> bool:
        return self.instrument_type != "stock"


class StrategyDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    complexity: Complexity
    risk_level: RiskLevel
    legs: tuple[LegTemplate, ...] = Field(min_length=1)


# ------------------------
# Per-session leg instances
# ------------------------


class LegInstance(BaseModel):
    """Concrete, user-editable counterpart of a LegTemplate.

    Option legs carry strike/premium plus the volatility and rate (decimals)
    they were priced with. Stock legs carry cost_basis only. Which fields are
    required is decided by the template at the same index, so everything is
    optional here and checked by the engine's validation.
    """

    strike: float | None = None
    premium: float | None = None
    volatility: float | None = Field(default=None, description="Annualized, decimal")
    risk_free_rate: float | None = Field(default=None, description="Annual, decimal")
    cost_basis: float | None = None

    @classmethod
    def option(cls, *, strike: float, premium: float, volatility: float, risk_free_rate: float) -> "LegInstance":
        return cls(strike=strike, premium=premium, volatility=volatility, risk_free_rate=risk_free_rate)

    @classmethod
    def stock(cls, *, cost_basis: float) -> "LegInstance":
        return cls(cost_basis=cost_basis)


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


# ------------
# API payloads
# ------------


class LegTemplateView(LegTemplate):
    label: str


class StrategyCatalogEntry(BaseModel):
    strategy_id: str
    name: str
    description: str
    complexity: Complexity
    risk_level: RiskLevel
    legs: list[LegTemplateView]


class StrategyCatalogResponse(BaseModel):
    default_strategy_id: str
    default_market: MarketParameters
    strategies: list[StrategyCatalogEntry]


class DefaultLegsResponse(BaseModel):
    strategy_id: str
    legs: list[LegInstance]


class StrategyLegsRequest(BaseModel):
    legs: list[LegInstance]


class StrategyAnalyzeRequest(BaseModel):
    market: MarketParameters
    legs: list[LegInstance] | None = Field(
        default=None,
        description="Edited legs. When omitted, defaults are generated from the market inputs.",
    )


class StrategyCurve(BaseModel):
    spots: list[float]
    values: list[float]


class StrategyAnalyzeResponse(BaseModel):
    strategy_id: str
    name: str
    legs: list[LegInstance]

    expiration: StrategyCurve
    current: StrategyCurve

    # JSON has no infinity: unbounded extremes are null with the flag set.
    max_profit: float | None
    max_profit_unbounded: bool
    max_loss: float | None
    max_loss_unbounded: bool

    breakevens: list[float]
    net_premium: float
    greeks: Greeks
