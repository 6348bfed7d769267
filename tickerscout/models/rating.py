import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RecommendationTrend(str, Enum):
    """Analyst consensus bucket, serialized with the camelCase names clients expect."""
    STRONG_BUY = "strongBuy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strongSell"
    UNKNOWN = "unknown"


def compute_upside(current_price: Optional[float], target_price: Optional[float]) -> Optional[float]:
    """Percentage gap between target and current price, or None when it can't be computed."""
    if current_price is None or target_price is None or current_price == 0:
        return None
    if not (math.isfinite(current_price) and math.isfinite(target_price)):
        return None
    return (target_price - current_price) / current_price * 100


class AnalystRating(BaseModel):
    """Pydantic model for one ticker's analyst rating snapshot."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ticker: str
    company_name: str
    current_price: Optional[float] = None
    target_price: Optional[float] = None
    rating: str = "Unknown"  # Display label, e.g. "Strong Buy"
    number_of_analysts: int = Field(default=0, ge=0)
    recommendation_trend: RecommendationTrend = RecommendationTrend.UNKNOWN
    upside: Optional[float] = None  # Always derived from the two prices

    @model_validator(mode="after")
    def _derive_upside(self):
        self.upside = compute_upside(self.current_price, self.target_price)
        return self


class ScoringWeights(BaseModel):
    """Tuning constants for ranking analyst ratings into top picks."""
    trend_multiplier: float = 20
    upside_cap: float = 50  # Upside above this many percent adds nothing
    analyst_cap: int = 10
    analyst_multiplier: float = 2
