"""
Player-side playlist client.
Fetches feeds from the nWave API into a PlayerSession. A failed fetch
is logged and leaves the current lists untouched.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from app.config.settings import settings
from app.player.session import PlayerSession
from app.services.aggregator import DEFAULT_TAG
from app.services.models import Track
from app.utils.http_client import HttpError, fetch_json

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2

_FETCH_ERRORS = (
    HttpError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValueError,
    KeyError,
    TypeError,
)


class PlaylistClient:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        player_session: PlayerSession,
        api_base: str = settings.PLAYER_API_BASE,
    ):
        self._http = session
        self._player = player_session
        self._api_base = api_base.rstrip("/")

    async def load_initial_playlists(self) -> None:
        await self.load_left_playlist()
        await self.load_right_playlist()
        logger.info("Playlists ready")

    async def select_tag(self, tag: str) -> None:
        if tag == DEFAULT_TAG:
            await asyncio.gather(self.load_left_playlist(), self.load_right_playlist())
        else:
            await asyncio.gather(
                self.load_left_playlist_by_tag(tag),
                self.load_right_playlist_by_tag(tag),
            )

    async def load_left_playlist(self) -> None:
        tracks = await self._fetch_tracks("/api/left-playlist")
        if tracks is not None:
            self._set_left(tracks, f"{len(tracks)} tracks")

    async def load_left_playlist_by_tag(self, tag: str) -> None:
        tracks = await self._fetch_tracks("/api/left-playlist-tag", {"tag": tag})
        if tracks is not None:
            self._set_left(tracks, f"{len(tracks)} mood results")

    async def search(self, query: str) -> None:
        tracks = await self._fetch_tracks("/api/left-search", {"q": query})
        if tracks is not None:
            self._set_left(tracks, f"{len(tracks)} search results")

    async def load_right_playlist(self) -> None:
        tracks = await self._fetch_tracks("/api/right-playlist")
        if tracks is not None:
            self._player.right_tracks = tracks

    async def load_right_playlist_by_tag(self, tag: str) -> None:
        tracks = await self._fetch_tracks("/api/right-playlist-tag", {"tag": tag})
        if tracks is not None:
            self._player.right_tracks = tracks

    def _set_left(self, tracks: list[Track], subtitle: str) -> None:
        self._player.left_tracks = tracks
        self._player.left_subtitle = subtitle

    async def _fetch_tracks(
        self, path: str, params: Optional[dict] = None
    ) -> Optional[list[Track]]:
        try:
            data = await fetch_json(self._http, self._api_base + path, params=params)
            if not isinstance(data, dict) or not isinstance(data.get("tracks"), list):
                raise ValueError("response has no track list")
            return [Track.from_dict(t) for t in data["tracks"]]
        except _FETCH_ERRORS as exc:
            logger.error("Playlist fetch failed", extra={"path": path, "error": str(exc)})
            return None


class SearchDebouncer:
    """Runs at most one search per settled typing pause."""

    def __init__(
        self,
        client: PlaylistClient,
        delay: float = settings.PLAYER_SEARCH_DEBOUNCE,
    ):
        self._client = client
        self._delay = delay
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> Optional[asyncio.Task]:
        return self._pending

    def on_input(self, text: str) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fire(text.strip()))

    async def _fire(self, query: str) -> None:
        await asyncio.sleep(self._delay)
        if len(query) < MIN_SEARCH_LENGTH:
            await self._client.load_left_playlist()
            return
        logger.info("Searching", extra={"query": query})
        await self._client.search(query)
