import asyncio
import math
from typing import Any, Dict, Optional

import yfinance as yf

from tickerscout.models.rating import AnalystRating, RecommendationTrend
from tickerscout.utils.logger import logger

# Yahoo recommendationKey -> (display label, trend bucket)
RECOMMENDATION_MAP = {
    "strong_buy": ("Strong Buy", RecommendationTrend.STRONG_BUY),
    "buy": ("Buy", RecommendationTrend.BUY),
    "hold": ("Hold", RecommendationTrend.HOLD),
    "underperform": ("Sell", RecommendationTrend.SELL),
    "sell": ("Strong Sell", RecommendationTrend.STRONG_SELL),
}


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


def get_quote_info(ticker: str) -> Dict[str, Any]:
    """Blocking yfinance lookup of the quote summary for one ticker."""
    return yf.Ticker(ticker).info


def build_rating(ticker: str, info: Optional[Dict[str, Any]]) -> Optional[AnalystRating]:
    """
    Convert a yfinance info dict into an AnalystRating.
    Returns None when Yahoo has nothing usable for the symbol.
    """
    if not info or len(info) <= 1:
        return None

    current_price = _number(info.get("currentPrice"))
    if current_price is None:
        current_price = _number(info.get("regularMarketPrice"))
    if current_price is None and "symbol" not in info:
        return None

    target_price = _number(info.get("targetMeanPrice"))
    key = str(info.get("recommendationKey") or "unknown").lower()
    label, trend = RECOMMENDATION_MAP.get(key, ("Unknown", RecommendationTrend.UNKNOWN))
    analysts = _number(info.get("numberOfAnalystOpinions"))

    return AnalystRating(
        ticker=ticker,
        company_name=info.get("shortName") or info.get("longName") or ticker,
        current_price=current_price,
        target_price=target_price,
        rating=label,
        number_of_analysts=max(int(analysts), 0) if analysts is not None else 0,
        recommendation_trend=trend,
    )


async def fetch_ticker_rating(ticker: str) -> Optional[AnalystRating]:
    """Fetch the analyst rating for one ticker; None on any lookup failure."""
    try:
        info = await asyncio.to_thread(get_quote_info, ticker)
    except Exception as e:
        logger.warning(f"⚠️ Yahoo Finance lookup failed for {ticker}: {e}")
        return None

    try:
        rating = build_rating(ticker, info)
    except Exception as e:
        logger.warning(f"⚠️ Malformed Yahoo Finance data for {ticker}: {e}")
        return None

    if rating is None:
        logger.warning(f"⚠️ No Yahoo Finance data for {ticker}")
        return None

    logger.debug(f"📊 {ticker}: {rating.rating}, {rating.number_of_analysts} analysts")
    return rating
