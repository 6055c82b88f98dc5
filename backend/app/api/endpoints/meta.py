from __future__ import annotations

from fastapi import APIRouter

from app.config import DEFAULT_MARKET, DEFAULT_STRATEGY_ID
from app.schemas.strategy import LegTemplateView, MarketParameters, StrategyCatalogEntry, StrategyCatalogResponse
from app.services.strategy_engine import describe_leg, list_strategies


router = APIRouter()


@router.get("/strategies", response_model=StrategyCatalogResponse)
def get_strategy_catalog() -> StrategyCatalogResponse:
    """Return the strategy catalog used to build the strategy picker.

    This is static metadata: names, descriptions, tags and leg templates, plus
    the market inputs the picker starts from.
    """
    entries = [
        StrategyCatalogEntry(
            strategy_id=strategy_id,
            name=s.name,
            description=s.description,
            complexity=s.complexity,
            risk_level=s.risk_level,
            legs=[LegTemplateView(**t.model_dump(), label=describe_leg(t)) for t in s.legs],
        )
        for strategy_id, s in list_strategies()
    ]
    return StrategyCatalogResponse(
        default_strategy_id=DEFAULT_STRATEGY_ID,
        default_market=MarketParameters(**DEFAULT_MARKET),
        strategies=entries,
    )
