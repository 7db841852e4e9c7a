"""
Jamendo service.
Royalty-free track search via the Jamendo v3.0 /tracks endpoint. Callers
build the full request URL (limit, ordering, tag or text filter) with
`tracks_url`; the adapter caches and fetches it as-is.
"""
import asyncio
import logging
from typing import Optional
from urllib.parse import urlencode

import aiohttp
from pydantic import ValidationError

from app.config.settings import settings
from app.services.cache import TTLCache
from app.services.schemas import JamendoTrack, parse_items
from app.utils.http_client import HttpError, fetch_json

logger = logging.getLogger(__name__)

_JAMENDO_TRACKS_URL = "https://api.jamendo.com/v3.0/tracks/"

_UPSTREAM_ERRORS = (
    HttpError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValidationError,
    ValueError,
)


class JamendoService:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        cache: TTLCache,
        client_id: str = settings.JAMENDO_CLIENT_ID,
    ):
        self._session = session
        self._cache = cache
        self._client_id = client_id

    def tracks_url(
        self,
        limit: int,
        *,
        order: Optional[str] = None,
        tags: Optional[str] = None,
        search: Optional[str] = None,
    ) -> str:
        params: dict[str, object] = {
            "client_id": self._client_id,
            "format": "json",
            "limit": limit,
        }
        if search is not None:
            params["search"] = search
        if tags is not None:
            params["tags"] = tags
        if order is not None:
            params["order"] = order
        return f"{_JAMENDO_TRACKS_URL}?{urlencode(params)}"

    async def search(self, url: str) -> list[JamendoTrack]:
        return await self._cache.get_or_compute("jam_" + url, lambda: self._search(url))

    async def _search(self, url: str) -> list[JamendoTrack]:
        if not self._client_id:
            logger.warning("JAMENDO_CLIENT_ID not configured, skipping search")
            return []
        try:
            data = await fetch_json(self._session, url)
        except _UPSTREAM_ERRORS as exc:
            logger.warning("Jamendo search failed", extra={"error": str(exc)})
            return []

        if not isinstance(data, dict):
            return []
        tracks = parse_items(JamendoTrack, data.get("results"), source="jamendo")
        logger.info("Jamendo search", extra={"results": len(tracks)})
        return tracks
