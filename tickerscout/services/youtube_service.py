import asyncio
import re
from typing import List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup
from youtube_transcript_api import NoTranscriptFound, TranscriptsDisabled, YouTubeTranscriptApi

from tickerscout.models.analysis import VideoMetadata
from tickerscout.utils.dates import utc_now_iso
from tickerscout.utils.logger import logger

YOUTUBE_BASE_URL = "https://www.youtube.com"
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept-Language": "en-US,en;q=0.9",
}
DEFAULT_TIMEOUT = 30.0
DEFAULT_LANGUAGES = ("en",)

VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/live/([a-zA-Z0-9_-]{11})"),
]

CHANNEL_PATTERNS = [
    re.compile(r"youtube\.com/@([a-zA-Z0-9_-]+)"),
    re.compile(r"youtube\.com/channel/([a-zA-Z0-9_-]+)"),
    re.compile(r"youtube\.com/user/([a-zA-Z0-9_-]+)"),
    re.compile(r"youtube\.com/c/([a-zA-Z0-9_-]+)"),
]

PUBLISH_DATE_RE = re.compile(r'"publishDate":"([^"]+)"')
WATCH_LINK_RE = re.compile(r"/watch\?v=([a-zA-Z0-9_-]{11})")


class TranscriptUnavailableError(Exception):
    """The video has no captions, or YouTube could not be reached."""


class InvalidVideoUrlError(ValueError):
    """The URL does not point at a YouTube video."""


def extract_video_id(url: str) -> Optional[str]:
    """Pull the 11-character video id out of watch, youtu.be, embed, shorts or live URLs."""
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def extract_channel_id(url: str) -> Optional[str]:
    """Pull the handle or channel id out of a channel URL."""
    for pattern in CHANNEL_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def is_valid_channel_url(url: str) -> bool:
    return extract_channel_id(url) is not None


async def _get_text(url: str, client: Optional[httpx.AsyncClient], timeout: float) -> str:
    if client is None:
        async with httpx.AsyncClient(headers=REQUEST_HEADERS, timeout=timeout, follow_redirects=True) as own_client:
            response = await own_client.get(url)
    else:
        response = await client.get(url, headers=REQUEST_HEADERS)
    response.raise_for_status()
    return response.text


def _fetch_snippets(video_id: str, languages: Sequence[str]) -> List[str]:
    """Blocking youtube-transcript-api lookup of the caption snippets."""
    transcript = YouTubeTranscriptApi().fetch(video_id, languages=list(languages))
    return [snippet.text for snippet in transcript]


async def fetch_transcript(video_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES) -> str:
    """
    Fetch the caption track of a video as one plain-text string.

    Caption snippets are stripped and joined with single spaces.
    Raises TranscriptUnavailableError on any failure.
    """
    try:
        snippets = await asyncio.to_thread(_fetch_snippets, video_id, languages)
    except (TranscriptsDisabled, NoTranscriptFound) as e:
        logger.warning(f"⚠️ No transcript for video {video_id}: {type(e).__name__}")
        raise TranscriptUnavailableError("No captions available for this video") from e
    except Exception as e:
        logger.error(f"❌ Error fetching transcript for {video_id}: {e}")
        raise TranscriptUnavailableError(f"Failed to fetch transcript: {e}") from e

    parts = [part.strip() for part in snippets]
    parts = [part for part in parts if part]
    if not parts:
        logger.warning(f"⚠️ Transcript for video {video_id} is empty")
        raise TranscriptUnavailableError("Transcript is empty")

    logger.info(f"✅ Fetched transcript for {video_id} ({len(parts)} segments)")
    return " ".join(parts)


async def get_video_metadata(
    video_id: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> VideoMetadata:
    """Title, channel name and publish date of a video. Falls back to placeholders on failure."""
    fallback = VideoMetadata(
        title="Unknown Title",
        channel_name="Unknown Channel",
        published_at=utc_now_iso(),
    )
    try:
        html = await _get_text(f"{YOUTUBE_BASE_URL}/watch?v={video_id}", client, timeout)
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching metadata for {video_id}: {e}")
        return fallback

    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    channel_tag = soup.find("link", attrs={"itemprop": "name"})
    date_match = PUBLISH_DATE_RE.search(html)

    title = title_tag.get_text().replace(" - YouTube", "").strip() if title_tag else ""
    return VideoMetadata(
        title=title or fallback.title,
        channel_name=(channel_tag.get("content") if channel_tag else None) or fallback.channel_name,
        published_at=date_match.group(1) if date_match else fallback.published_at,
    )


async def get_latest_video_from_channel(
    channel_url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[str]:
    """URL of the most recent upload on a channel's videos tab, or None."""
    channel_id = extract_channel_id(channel_url)
    if not channel_id:
        logger.warning(f"⚠️ Invalid channel URL: {channel_url}")
        return None

    if "@" in channel_url:
        videos_url = f"{YOUTUBE_BASE_URL}/@{channel_id}/videos"
    else:
        videos_url = f"{YOUTUBE_BASE_URL}/channel/{channel_id}/videos"

    try:
        html = await _get_text(videos_url, client, timeout)
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching channel page {videos_url}: {e}")
        return None

    match = WATCH_LINK_RE.search(html)
    if not match:
        logger.warning(f"⚠️ No videos found on channel {channel_url}")
        return None
    return f"{YOUTUBE_BASE_URL}/watch?v={match.group(1)}"
