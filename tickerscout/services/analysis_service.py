import random
import string
import time
from typing import List, Optional

from pydantic import BaseModel

from tickerscout.models.analysis import AnalysisResponse, ChannelAnalysisResponse, TopTicker
from tickerscout.models.rating import AnalystRating
from tickerscout.services import rating_aggregator, youtube_service
from tickerscout.services.ticker_extractor import extract_tickers
from tickerscout.services.youtube_service import InvalidVideoUrlError
from tickerscout.utils.config import PipelineSettings
from tickerscout.utils.dates import utc_now_iso
from tickerscout.utils.logger import logger

NO_TICKERS_MESSAGE = "No stock tickers found in the video transcript"
NO_RATING_LABEL = "No rating found on Yahoo Finance."


class NoVideosFoundError(Exception):
    """The channel page did not list any videos."""


class TranscriptAnalysis(BaseModel):
    tickers: List[str]
    ratings: List[AnalystRating]
    top_picks: List[AnalystRating]


def generate_analysis_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"analysis_{int(time.time() * 1000)}_{suffix}"


async def analyze_transcript(transcript: str, settings: Optional[PipelineSettings] = None) -> TranscriptAnalysis:
    """Extract tickers from a transcript, fetch their ratings and rank the top picks."""
    settings = settings or PipelineSettings()
    tickers = extract_tickers(transcript)
    logger.info(f"🔍 Extracted {len(tickers)} tickers: {tickers}")

    if not tickers:
        return TranscriptAnalysis(tickers=[], ratings=[], top_picks=[])

    ratings = await rating_aggregator.fetch_multiple_ratings(
        tickers,
        batch_size=settings.batch_size,
        batch_delay=settings.batch_delay_seconds,
    )
    if not ratings:
        logger.warning(f"⚠️ Tickers found but no ratings available: {tickers}")

    top_picks = rating_aggregator.get_top_picks(ratings, settings.top_picks_count, settings.scoring)
    return TranscriptAnalysis(tickers=tickers, ratings=ratings, top_picks=top_picks)


async def analyze_video(video_url: str, settings: Optional[PipelineSettings] = None) -> AnalysisResponse:
    """
    Run the full pipeline for one video URL.

    Raises InvalidVideoUrlError for non-YouTube URLs and
    TranscriptUnavailableError when the video has no captions.
    """
    settings = settings or PipelineSettings()
    video_id = youtube_service.extract_video_id(video_url)
    if not video_id:
        raise InvalidVideoUrlError(f"Invalid YouTube video URL: {video_url}")

    metadata = await youtube_service.get_video_metadata(video_id, timeout=settings.request_timeout)
    transcript = await youtube_service.fetch_transcript(video_id)
    analysis = await analyze_transcript(transcript, settings)

    return AnalysisResponse(
        id=generate_analysis_id(),
        video_url=video_url,
        video_title=metadata.title,
        channel_name=metadata.channel_name,
        extracted_tickers=analysis.tickers,
        ticker_ratings=analysis.ratings,
        top_picks=analysis.top_picks,
        analysis_date=utc_now_iso(),
        message=None if analysis.tickers else NO_TICKERS_MESSAGE,
    )


async def analyze_channel(channel_url: str, settings: Optional[PipelineSettings] = None) -> ChannelAnalysisResponse:
    """Analyze the most recent upload of a channel and summarize its top tickers."""
    settings = settings or PipelineSettings()
    latest_video_url = await youtube_service.get_latest_video_from_channel(
        channel_url, timeout=settings.request_timeout
    )
    if not latest_video_url:
        raise NoVideosFoundError(f"No videos found on {channel_url}")

    video_id = youtube_service.extract_video_id(latest_video_url)
    if not video_id:
        raise InvalidVideoUrlError(f"Could not extract video ID from {latest_video_url}")

    metadata = await youtube_service.get_video_metadata(video_id, timeout=settings.request_timeout)
    transcript = await youtube_service.fetch_transcript(video_id)
    analysis = await analyze_transcript(transcript, settings)

    top_tickers = [
        TopTicker(
            ticker=pick.ticker,
            rating=NO_RATING_LABEL if pick.rating == "Unknown" else pick.rating,
        )
        for pick in analysis.top_picks
    ]
    return ChannelAnalysisResponse(
        channel_url=channel_url,
        channel_name=metadata.channel_name,
        latest_video_id=video_id,
        latest_video_title=metadata.title,
        tickers=analysis.tickers,
        top_tickers=top_tickers,
    )
