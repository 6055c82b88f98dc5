"""Static strategy catalog shared by the engine and the API.

Each entry is a read-only template: which legs to hold, in which order, and
how far each option strike sits from spot by default. Concrete strikes and
premiums are derived per session by the strategy engine; nothing here is ever
mutated at runtime.
"""

from __future__ import annotations

from types import MappingProxyType

from app.schemas.strategy import LegTemplate, StrategyDefinition


def _leg(action: str, instrument_type: str, quantity: int = 1, strike_offset: int = 0) -> LegTemplate:
    return LegTemplate(action=action, instrument_type=instrument_type, quantity=quantity, strike_offset=strike_offset)


_STRATEGIES: dict[str, StrategyDefinition] = {
    "long-call": StrategyDefinition(
        name="Long Call",
        description="Buy a call option. Bullish strategy with unlimited upside potential and limited downside risk.",
        complexity="beginner",
        risk_level="low",
        legs=(_leg("buy", "call"),),
    ),
    "long-put": StrategyDefinition(
        name="Long Put",
        description="Buy a put option. Bearish strategy with high profit potential and limited downside risk.",
        complexity="beginner",
        risk_level="low",
        legs=(_leg("buy", "put"),),
    ),
    "short-call": StrategyDefinition(
        name="Short Call",
        description="Sell a call option. Bearish/neutral strategy with limited profit and unlimited risk.",
        complexity="intermediate",
        risk_level="high",
        legs=(_leg("sell", "call"),),
    ),
    "short-put": StrategyDefinition(
        name="Short Put",
        description="Sell a put option. Bullish/neutral strategy with limited profit and high risk.",
        complexity="intermediate",
        risk_level="high",
        legs=(_leg("sell", "put"),),
    ),
    "bull-call-spread": StrategyDefinition(
        name="Bull Call Spread",
        description="Buy lower strike call, sell higher strike call. Limited risk and limited reward bullish strategy.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("buy", "call", strike_offset=0), _leg("sell", "call", strike_offset=5)),
    ),
    "bear-call-spread": StrategyDefinition(
        name="Bear Call Spread",
        description="Sell lower strike call, buy higher strike call. Limited risk and limited reward bearish strategy.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("sell", "call", strike_offset=0), _leg("buy", "call", strike_offset=5)),
    ),
    "bull-put-spread": StrategyDefinition(
        name="Bull Put Spread",
        description="Sell higher strike put, buy lower strike put. Limited risk and limited reward bullish strategy.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("sell", "put", strike_offset=0), _leg("buy", "put", strike_offset=-5)),
    ),
    "bear-put-spread": StrategyDefinition(
        name="Bear Put Spread",
        description="Buy higher strike put, sell lower strike put. Limited risk and limited reward bearish strategy.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("buy", "put", strike_offset=0), _leg("sell", "put", strike_offset=-5)),
    ),
    "long-straddle": StrategyDefinition(
        name="Long Straddle",
        description="Buy call and put at same strike. Profits from high volatility in either direction.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("buy", "call"), _leg("buy", "put")),
    ),
    "short-straddle": StrategyDefinition(
        name="Short Straddle",
        description="Sell call and put at same strike. Profits from low volatility but has unlimited risk.",
        complexity="advanced",
        risk_level="high",
        legs=(_leg("sell", "call"), _leg("sell", "put")),
    ),
    "long-strangle": StrategyDefinition(
        name="Long Strangle",
        description="Buy call and put at different strikes. Profits from high volatility, lower cost than straddle.",
        complexity="intermediate",
        risk_level="medium",
        legs=(_leg("buy", "call", strike_offset=5), _leg("buy", "put", strike_offset=-5)),
    ),
    "short-strangle": StrategyDefinition(
        name="Short Strangle",
        description="Sell call and put at different strikes. Profits from low volatility, unlimited risk.",
        complexity="advanced",
        risk_level="high",
        legs=(_leg("sell", "call", strike_offset=5), _leg("sell", "put", strike_offset=-5)),
    ),
    "iron-condor": StrategyDefinition(
        name="Iron Condor",
        description="Sell call spread and put spread. Profits from low volatility with defined risk.",
        complexity="advanced",
        risk_level="medium",
        legs=(
            _leg("buy", "put", strike_offset=-10),
            _leg("sell", "put", strike_offset=-5),
            _leg("sell", "call", strike_offset=5),
            _leg("buy", "call", strike_offset=10),
        ),
    ),
    "butterfly": StrategyDefinition(
        name="Butterfly Spread",
        description="Buy two options at outer strikes, sell two at middle strike. Low risk, low reward.",
        complexity="advanced",
        risk_level="low",
        legs=(
            _leg("buy", "call", strike_offset=-5),
            _leg("sell", "call", quantity=2, strike_offset=0),
            _leg("buy", "call", strike_offset=5),
        ),
    ),
    "covered-call": StrategyDefinition(
        name="Covered Call",
        description="Own 100 shares and sell a call. Conservative income strategy with limited upside.",
        complexity="beginner",
        risk_level="low",
        legs=(_leg("own", "stock", quantity=100), _leg("sell", "call")),
    ),
    "protective-put": StrategyDefinition(
        name="Protective Put",
        description="Own 100 shares and buy a put. Insurance strategy to protect against downside.",
        complexity="beginner",
        risk_level="low",
        legs=(_leg("own", "stock", quantity=100), _leg("buy", "put")),
    ),
}

# Read-only view; catalog entries are frozen models.
STRATEGIES = MappingProxyType(_STRATEGIES)
