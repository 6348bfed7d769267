from fastapi import APIRouter, HTTPException

from tickerscout.models.analysis import (
    EmailChannelResultsRequest,
    EmailContent,
    EmailResponse,
    EmailResultsRequest,
)
from tickerscout.models.rating import AnalystRating
from tickerscout.services import email_service
from tickerscout.utils.dates import utc_now_iso
from tickerscout.utils.logger import logger

router = APIRouter()

INVALID_EMAIL_DETAIL = "Valid email address is required"
MISSING_RESULTS_DETAIL = "Analysis results are required"


async def _send(to_address: str, content: EmailContent) -> dict:
    try:
        return await email_service.send_results_email(to_address, content)
    except Exception as e:
        logger.error(f"❌ Error sending email to {to_address}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An error occurred while sending the email: {e}")


@router.post("/email", response_model=EmailResponse)
async def email_results_api(request: EmailResultsRequest):
    """E-mail the full results of a video analysis."""
    if not email_service.is_valid_email(request.email):
        raise HTTPException(status_code=400, detail=INVALID_EMAIL_DETAIL)
    if request.results is None:
        raise HTTPException(status_code=400, detail=MISSING_RESULTS_DETAIL)

    logger.info(f"📡 Received email request for analysis {request.results.id}")
    results = request.results
    content = EmailContent(
        video_title=results.video_title,
        channel_name=results.channel_name,
        video_url=results.video_url,
        analysis_date=results.analysis_date,
        extracted_tickers=results.extracted_tickers,
        top_picks=results.top_picks,
        all_ratings=results.ticker_ratings,
    )
    return await _send(request.email, content)


@router.post("/api/email-results", response_model=EmailResponse)
async def email_channel_results_api(request: EmailChannelResultsRequest):
    """E-mail the condensed results of a channel analysis."""
    if not email_service.is_valid_email(request.email):
        raise HTTPException(status_code=400, detail=INVALID_EMAIL_DETAIL)
    if request.analysis is None:
        raise HTTPException(status_code=400, detail=MISSING_RESULTS_DETAIL)

    analysis = request.analysis
    logger.info(f"📡 Received email request for channel {analysis.channel_name}")
    # Channel summaries carry only ticker and rating label.
    top_picks = [
        AnalystRating(ticker=top.ticker, company_name=top.ticker, rating=top.rating)
        for top in analysis.top_tickers
    ]
    content = EmailContent(
        video_title=analysis.latest_video_title,
        channel_name=analysis.channel_name,
        video_url=analysis.channel_url,
        analysis_date=utc_now_iso(),
        extracted_tickers=analysis.tickers,
        top_picks=top_picks,
        all_ratings=[],
    )
    return await _send(request.email, content)
