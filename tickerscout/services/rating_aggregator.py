"""
Fetch analyst ratings for a set of tickers and rank them into top picks.

Provider calls go out in fixed-size batches: every call in a batch runs
concurrently, batches run one after another with a short pause in between
to stay under Yahoo's rate limits. A failed lookup drops that ticker only.
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from tickerscout.models.rating import AnalystRating, RecommendationTrend, ScoringWeights
from tickerscout.services.yahoo_finance_service import fetch_ticker_rating
from tickerscout.utils.logger import logger

RatingFetcher = Callable[[str], Awaitable[Optional[AnalystRating]]]

DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY = 0.2  # seconds

TREND_SCORES = {
    RecommendationTrend.STRONG_BUY: 5,
    RecommendationTrend.BUY: 4,
    RecommendationTrend.HOLD: 3,
    RecommendationTrend.SELL: 2,
    RecommendationTrend.STRONG_SELL: 1,
    RecommendationTrend.UNKNOWN: 0,
}


async def _fetch_one(ticker: str, fetch_rating: RatingFetcher) -> Optional[AnalystRating]:
    try:
        return await fetch_rating(ticker)
    except Exception as e:
        logger.warning(f"⚠️ Rating fetch raised for {ticker}, skipping: {e}")
        return None


async def fetch_multiple_ratings(
    tickers: Sequence[str],
    fetch_rating: Optional[RatingFetcher] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    batch_delay: float = DEFAULT_BATCH_DELAY,
) -> List[AnalystRating]:
    """
    Fetch ratings for all tickers, batch_size at a time.

    :param tickers: Ticker symbols; batches follow this order.
    :param fetch_rating: Async provider returning a rating or None. Defaults to Yahoo Finance.
    :param batch_size: Number of concurrent provider calls per batch.
    :param batch_delay: Pause in seconds between consecutive batches.
    :return: Ratings for the tickers that resolved, grouped by batch.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    fetch_rating = fetch_rating or fetch_ticker_rating

    tickers = list(tickers)
    results: List[AnalystRating] = []

    for start in range(0, len(tickers), batch_size):
        batch = tickers[start:start + batch_size]
        logger.debug(f"Fetching ratings for batch {batch}")
        batch_results = await asyncio.gather(*(_fetch_one(t, fetch_rating) for t in batch))
        results.extend(r for r in batch_results if r is not None)

        if start + batch_size < len(tickers):
            await asyncio.sleep(batch_delay)

    logger.info(f"✅ Resolved ratings for {len(results)}/{len(tickers)} tickers")
    return results


def score_rating(rating: AnalystRating, weights: Optional[ScoringWeights] = None) -> float:
    """Trend dominates; upside and analyst coverage are capped to keep outliers in check."""
    weights = weights or ScoringWeights()
    score = TREND_SCORES.get(rating.recommendation_trend, 0) * weights.trend_multiplier
    if rating.upside is not None:
        score += min(rating.upside, weights.upside_cap)
    score += min(rating.number_of_analysts, weights.analyst_cap) * weights.analyst_multiplier
    return score


def get_top_picks(
    ratings: Sequence[AnalystRating],
    count: int = 5,
    weights: Optional[ScoringWeights] = None,
) -> List[AnalystRating]:
    """Highest-scoring ratings first, at most count of them. Ties keep input order."""
    if count <= 0:
        return []
    weights = weights or ScoringWeights()
    ranked = sorted(ratings, key=lambda r: score_rating(r, weights), reverse=True)
    return ranked[:count]
