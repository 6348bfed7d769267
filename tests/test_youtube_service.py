from types import SimpleNamespace

import httpx
import pytest
from youtube_transcript_api import TranscriptsDisabled

from tickerscout.services import youtube_service
from tickerscout.services.youtube_service import (
    TranscriptUnavailableError,
    extract_channel_id,
    extract_video_id,
    fetch_transcript,
    get_latest_video_from_channel,
    get_video_metadata,
    is_valid_channel_url,
)

WATCH_PAGE = r"""
<html><head>
<title>My Top 5 Stocks for 2024 - YouTube</title>
<link itemprop="name" content="Stock Picks Daily">
</head><body><script>
var ytInitialPlayerResponse = {"captions":{"playerCaptionsTracklistRenderer":{
"captionTracks":[{"baseUrl":"https:\/\/www.youtube.com\/api\/timedtext?v=dQw4w9WgXcQ&lang=en","name":{"simpleText":"English"}}]}},
"microformat":{"publishDate":"2024-01-15T10:00:00-08:00"}};
</script></body></html>
"""


def client_for(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path not in routes:
            return httpx.Response(404)
        status, body = routes[path]
        return httpx.Response(status, text=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# --- URL parsing ---

@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    "https://www.youtube.com/live/dQw4w9WgXcQ",
])
def test_extract_video_id(url):
    assert extract_video_id(url) == "dQw4w9WgXcQ"


def test_extract_video_id_rejects_other_urls():
    assert extract_video_id("https://example.com/watch?v=dQw4w9WgXcQ") is None
    assert extract_video_id("not a url") is None
    assert extract_video_id("") is None


def test_extract_channel_id():
    assert extract_channel_id("https://www.youtube.com/@StockPicks") == "StockPicks"
    assert extract_channel_id("https://www.youtube.com/channel/UC1234abcd") == "UC1234abcd"
    assert extract_channel_id("https://www.youtube.com/user/oldname") == "oldname"
    assert is_valid_channel_url("https://www.youtube.com/c/custom")
    assert not is_valid_channel_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")


# --- Transcript ---

def transcript_api_returning(*texts, error=None):
    class FakeTranscriptApi:
        def fetch(self, video_id, languages=("en",)):
            if error is not None:
                raise error
            return [SimpleNamespace(text=text, start=float(i), duration=1.0) for i, text in enumerate(texts)]

    return FakeTranscriptApi


@pytest.mark.asyncio
async def test_fetch_transcript_joins_caption_segments(monkeypatch):
    monkeypatch.setattr(
        youtube_service,
        "YouTubeTranscriptApi",
        transcript_api_returning("Today I'm buying AAPL", "   ", "and NVDA & MSFT\n"),
    )
    transcript = await fetch_transcript("dQw4w9WgXcQ")
    assert transcript == "Today I'm buying AAPL and NVDA & MSFT"


@pytest.mark.asyncio
async def test_fetch_transcript_captions_disabled(monkeypatch):
    monkeypatch.setattr(
        youtube_service,
        "YouTubeTranscriptApi",
        transcript_api_returning(error=TranscriptsDisabled("dQw4w9WgXcQ")),
    )
    with pytest.raises(TranscriptUnavailableError, match="No captions"):
        await fetch_transcript("dQw4w9WgXcQ")


@pytest.mark.asyncio
async def test_fetch_transcript_network_failure(monkeypatch):
    monkeypatch.setattr(
        youtube_service,
        "YouTubeTranscriptApi",
        transcript_api_returning(error=ConnectionError("YouTube unreachable")),
    )
    with pytest.raises(TranscriptUnavailableError, match="Failed to fetch transcript"):
        await fetch_transcript("dQw4w9WgXcQ")


@pytest.mark.asyncio
async def test_fetch_transcript_empty_captions(monkeypatch):
    monkeypatch.setattr(youtube_service, "YouTubeTranscriptApi", transcript_api_returning(" ", ""))
    with pytest.raises(TranscriptUnavailableError, match="empty"):
        await fetch_transcript("dQw4w9WgXcQ")


# --- Metadata ---

@pytest.mark.asyncio
async def test_get_video_metadata():
    async with client_for({"/watch": (200, WATCH_PAGE)}) as client:
        metadata = await get_video_metadata("dQw4w9WgXcQ", client=client)
    assert metadata.title == "My Top 5 Stocks for 2024"
    assert metadata.channel_name == "Stock Picks Daily"
    assert metadata.published_at == "2024-01-15T10:00:00-08:00"


@pytest.mark.asyncio
async def test_get_video_metadata_falls_back_on_error():
    async with client_for({"/watch": (503, "")}) as client:
        metadata = await get_video_metadata("dQw4w9WgXcQ", client=client)
    assert metadata.title == "Unknown Title"
    assert metadata.channel_name == "Unknown Channel"
    assert metadata.published_at


# --- Latest video ---

@pytest.mark.asyncio
async def test_get_latest_video_from_handle():
    page = '<a href="/watch?v=abcdefghijk">newest</a><a href="/watch?v=zzzzzzzzzzz">older</a>'
    async with client_for({"/@StockPicks/videos": (200, page)}) as client:
        url = await get_latest_video_from_channel("https://www.youtube.com/@StockPicks", client=client)
    assert url == "https://www.youtube.com/watch?v=abcdefghijk"


@pytest.mark.asyncio
async def test_get_latest_video_from_channel_id():
    page = '{"videoId":"x","url":"/watch?v=AAAAAAAAAAA"}'
    async with client_for({"/channel/UC1234/videos": (200, page)}) as client:
        url = await get_latest_video_from_channel("https://www.youtube.com/channel/UC1234", client=client)
    assert url == "https://www.youtube.com/watch?v=AAAAAAAAAAA"


@pytest.mark.asyncio
async def test_get_latest_video_none_found():
    async with client_for({"/@Empty/videos": (200, "<html>no uploads</html>")}) as client:
        assert await get_latest_video_from_channel("https://www.youtube.com/@Empty", client=client) is None
    assert await get_latest_video_from_channel("https://example.com/nothing") is None
