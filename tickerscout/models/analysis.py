from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tickerscout.models.rating import AnalystRating


class CamelModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoMetadata(CamelModel):
    title: str
    channel_name: str
    published_at: str


class AnalysisRequest(CamelModel):
    video_url: Optional[str] = None


class ChannelRequest(CamelModel):
    channel_url: Optional[str] = None


class AnalysisResponse(CamelModel):
    """Full analysis of a single video."""
    id: str
    video_url: str
    video_title: str
    channel_name: str
    extracted_tickers: List[str]
    ticker_ratings: List[AnalystRating]
    top_picks: List[AnalystRating]
    analysis_date: str
    message: Optional[str] = None  # Set when the transcript mentions no tickers


class TopTicker(CamelModel):
    ticker: str
    rating: str
    source: str = "Yahoo Finance"


class ChannelAnalysisResponse(CamelModel):
    """Condensed analysis of a channel's most recent video."""
    channel_url: str
    channel_name: str
    latest_video_id: str
    latest_video_title: str
    tickers: List[str]
    top_tickers: List[TopTicker]


class LatestVideoResponse(CamelModel):
    video_url: str


class EmailResultsRequest(CamelModel):
    email: Optional[str] = None
    results: Optional[AnalysisResponse] = None


class EmailChannelResultsRequest(CamelModel):
    email: Optional[str] = None
    analysis: Optional[ChannelAnalysisResponse] = None


class EmailContent(CamelModel):
    video_title: str
    channel_name: str
    video_url: str
    analysis_date: str
    extracted_tickers: List[str]
    top_picks: List[AnalystRating]
    all_ratings: List[AnalystRating]


class EmailResponse(CamelModel):
    message: str
    message_id: str
