from enum import Enum

from pydantic import BaseModel


class MarketTrend(str, Enum):
    UP = "up"
    STABLE = "stable"
    DOWN = "down"


class MarketDemand(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MarketPrice(BaseModel):
    crop: str
    price: float
    trend: MarketTrend
    demand: MarketDemand


class MarketRecommendation(BaseModel):
    crop: str
    current_price: float
    trend: MarketTrend
    demand: MarketDemand
    profitability: int
    recommendation: str
