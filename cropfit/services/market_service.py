from typing import Dict, List, Tuple

from cropfit.models.environment import Coordinate
from cropfit.models.market import (
    MarketDemand,
    MarketPrice,
    MarketRecommendation,
    MarketTrend,
)

from .crop_knowledge_base import CROP_KNOWLEDGE_BASE
from .scoring_engine import profitability

# Yield assumed when judging a crop on market data alone, t/ha.
MARKET_REFERENCE_YIELD = 3.0
MARKET_REFERENCE_FARM_SIZE = 1.0

# Static market outlook per crop; prices come from the knowledge base.
MARKET_OUTLOOK: Dict[str, Tuple[MarketTrend, MarketDemand]] = {
    "Rice": (MarketTrend.UP, MarketDemand.HIGH),
    "Wheat": (MarketTrend.STABLE, MarketDemand.MEDIUM),
    "Corn": (MarketTrend.DOWN, MarketDemand.MEDIUM),
    "Soybean": (MarketTrend.UP, MarketDemand.HIGH),
    "Cotton": (MarketTrend.STABLE, MarketDemand.HIGH),
}


def get_market_prices(coordinate: Coordinate) -> List[MarketPrice]:
    """
    Market snapshot for crops with a known outlook.

    The table is not regional yet; ``coordinate`` is accepted so that a live
    mandi price source can replace it without changing callers.
    """
    prices = []
    for crop in CROP_KNOWLEDGE_BASE:
        outlook = MARKET_OUTLOOK.get(crop.name)
        if outlook is None:
            continue
        trend, demand = outlook
        prices.append(
            MarketPrice(crop=crop.name, price=crop.market_price, trend=trend, demand=demand)
        )
    return prices


def market_verdict(trend: MarketTrend, demand: MarketDemand) -> str:
    if trend == MarketTrend.UP and demand == MarketDemand.HIGH:
        return "Highly recommended - Strong market conditions"
    if trend == MarketTrend.STABLE and demand == MarketDemand.HIGH:
        return "Recommended - Stable market with good demand"
    if trend == MarketTrend.DOWN:
        return "Consider alternatives - Market prices declining"
    return "Moderate recommendation - Average market conditions"


def get_market_based_recommendations(coordinate: Coordinate) -> List[MarketRecommendation]:
    costs = {crop.name: crop.production_cost for crop in CROP_KNOWLEDGE_BASE}
    return [
        MarketRecommendation(
            crop=item.crop,
            current_price=item.price,
            trend=item.trend,
            demand=item.demand,
            profitability=profitability(
                MARKET_REFERENCE_YIELD,
                MARKET_REFERENCE_FARM_SIZE,
                item.price,
                costs[item.crop],
            ),
            recommendation=market_verdict(item.trend, item.demand),
        )
        for item in get_market_prices(coordinate)
    ]
