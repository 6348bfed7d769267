from fastapi import APIRouter, Depends, HTTPException

from tickerscout.models.analysis import AnalysisRequest, AnalysisResponse
from tickerscout.services import analysis_service
from tickerscout.services.youtube_service import InvalidVideoUrlError, TranscriptUnavailableError
from tickerscout.utils.config import PipelineSettings, get_pipeline_settings
from tickerscout.utils.logger import logger

router = APIRouter()

TRANSCRIPT_UNAVAILABLE_DETAIL = (
    "Could not fetch video transcript. The video may not have captions available."
)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_video_api(
    request: AnalysisRequest,
    settings: PipelineSettings = Depends(get_pipeline_settings),
):
    """Extract tickers from a video's transcript and rank their analyst ratings."""
    if not request.video_url:
        raise HTTPException(status_code=400, detail="videoUrl is required")

    logger.info(f"📡 Received request to analyze video: {request.video_url}")
    try:
        result = await analysis_service.analyze_video(request.video_url, settings)
    except InvalidVideoUrlError:
        logger.warning(f"❌ Invalid YouTube video URL: {request.video_url}")
        raise HTTPException(status_code=400, detail="Invalid YouTube video URL")
    except TranscriptUnavailableError:
        raise HTTPException(status_code=400, detail=TRANSCRIPT_UNAVAILABLE_DETAIL)
    except Exception as e:
        logger.error(f"❌ Error analyzing {request.video_url}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An error occurred while processing the video: {e}")

    logger.info(f"✅ Analysis {result.id} completed: {len(result.top_picks)} top picks")
    return result
