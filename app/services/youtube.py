"""
YouTube service.
- Video search via YouTube Data API v3 (/search).
- Batched duration lookup via /videos (contentDetails).
Both calls are cached per request shape and never raise: any failure
is logged and degrades to an empty result.
"""
import asyncio
import logging
import re

import aiohttp
from pydantic import ValidationError

from app.config.settings import settings
from app.services.cache import TTLCache
from app.services.schemas import YouTubeSearchItem, YouTubeVideoItem, parse_items
from app.utils.http_client import HttpError, fetch_json

logger = logging.getLogger(__name__)

_YT_API_BASE = "https://www.googleapis.com/youtube/v3"
_SEARCH_MAX_RESULTS = 15

_ISO_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?", re.IGNORECASE)

_UPSTREAM_ERRORS = (
    HttpError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValidationError,
    ValueError,
)


class YouTubeService:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        cache: TTLCache,
        api_key: str = settings.YOUTUBE_API_KEY,
    ):
        self._session = session
        self._cache = cache
        self._api_key = api_key

    async def search(self, query: str) -> list[YouTubeSearchItem]:
        return await self._cache.get_or_compute(
            "yt_search_" + query, lambda: self._search(query)
        )

    async def fetch_durations(self, video_ids: list[str]) -> dict[str, int]:
        """Map native video ID → duration in seconds, one upstream call per batch."""
        if not video_ids:
            return {}
        joined = ",".join(video_ids)
        return await self._cache.get_or_compute(
            "yt_durations_" + joined, lambda: self._fetch_durations(joined)
        )

    async def _search(self, query: str) -> list[YouTubeSearchItem]:
        if not self._api_key:
            logger.warning("YOUTUBE_API_KEY not configured, skipping search")
            return []
        try:
            data = await fetch_json(
                self._session,
                f"{_YT_API_BASE}/search",
                params={
                    "part": "snippet",
                    "maxResults": _SEARCH_MAX_RESULTS,
                    "q": query,
                    "type": "video",
                    "key": self._api_key,
                },
            )
        except _UPSTREAM_ERRORS as exc:
            logger.warning("YouTube search failed", extra={"query": query, "error": str(exc)})
            return []

        if not isinstance(data, dict):
            return []
        items = parse_items(YouTubeSearchItem, data.get("items"), source="youtube")
        logger.info("YouTube search", extra={"query": query, "results": len(items)})
        return items

    async def _fetch_durations(self, joined_ids: str) -> dict[str, int]:
        if not self._api_key:
            logger.warning("YOUTUBE_API_KEY not configured, skipping durations")
            return {}
        try:
            data = await fetch_json(
                self._session,
                f"{_YT_API_BASE}/videos",
                params={
                    "part": "contentDetails",
                    "id": joined_ids,
                    "key": self._api_key,
                },
            )
        except _UPSTREAM_ERRORS as exc:
            logger.warning("YouTube duration lookup failed", extra={"error": str(exc)})
            return {}

        if not isinstance(data, dict):
            return {}
        videos = parse_items(YouTubeVideoItem, data.get("items"), source="youtube")
        return {v.id: parse_iso_duration(v.content_details.duration) for v in videos}


def parse_iso_duration(duration: str) -> int:
    """Parse an ISO 8601 `PT#H#M#S` duration to whole seconds (0 if unparseable)."""
    match = _ISO_DURATION_RE.search(duration or "")
    if not match:
        return 0
    h = int(match.group(1) or 0)
    m = int(match.group(2) or 0)
    s = int(match.group(3) or 0)
    return h * 3600 + m * 60 + s
