from fastapi import APIRouter, Depends, HTTPException

from tickerscout.api.analyze import TRANSCRIPT_UNAVAILABLE_DETAIL
from tickerscout.models.analysis import ChannelAnalysisResponse, ChannelRequest, LatestVideoResponse
from tickerscout.services import analysis_service, youtube_service
from tickerscout.services.analysis_service import NoVideosFoundError
from tickerscout.services.youtube_service import InvalidVideoUrlError, TranscriptUnavailableError
from tickerscout.utils.config import PipelineSettings, get_pipeline_settings
from tickerscout.utils.logger import logger

router = APIRouter()

NO_VIDEOS_DETAIL = "Could not find any videos on this channel"


@router.post("/api/analyze-channel", response_model=ChannelAnalysisResponse)
async def analyze_channel_api(
    request: ChannelRequest,
    settings: PipelineSettings = Depends(get_pipeline_settings),
):
    """Analyze the latest video of a YouTube channel for stock tickers."""
    if not request.channel_url:
        raise HTTPException(status_code=400, detail="channelUrl is required")
    if not youtube_service.is_valid_channel_url(request.channel_url):
        raise HTTPException(status_code=400, detail="Invalid YouTube channel URL")

    logger.info(f"📡 Received request to analyze channel: {request.channel_url}")
    try:
        result = await analysis_service.analyze_channel(request.channel_url, settings)
    except NoVideosFoundError:
        raise HTTPException(status_code=404, detail=NO_VIDEOS_DETAIL)
    except InvalidVideoUrlError:
        raise HTTPException(status_code=400, detail="Could not extract video ID")
    except TranscriptUnavailableError:
        raise HTTPException(status_code=400, detail=TRANSCRIPT_UNAVAILABLE_DETAIL)
    except Exception as e:
        logger.error(f"❌ Error analyzing channel {request.channel_url}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An error occurred while analyzing the channel: {e}")

    logger.info(f"✅ Channel analysis completed for {result.channel_name}: {result.tickers}")
    return result


@router.post("/latest-video", response_model=LatestVideoResponse)
async def latest_video_api(
    request: ChannelRequest,
    settings: PipelineSettings = Depends(get_pipeline_settings),
):
    if not request.channel_url:
        raise HTTPException(status_code=400, detail="channelUrl is required")

    logger.info(f"📡 Received latest video request for: {request.channel_url}")
    video_url = await youtube_service.get_latest_video_from_channel(
        request.channel_url, timeout=settings.request_timeout
    )
    if not video_url:
        raise HTTPException(status_code=404, detail=NO_VIDEOS_DETAIL)
    return LatestVideoResponse(video_url=video_url)
