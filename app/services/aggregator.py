"""
Aggregator: high-level playlist assembly.
  cache → fan-out to adapters → durations → map → cap → PlaylistResult
Every feed is cached as a whole except cross-source search, which is
always live (its adapter calls are still cached individually).
"""
import asyncio
import logging
from typing import Iterable, Optional

from app.services.cache import TTLCache
from app.services.jamendo import JamendoService
from app.services.mapping import map_audio_item, map_video_item
from app.services.models import PlaylistResult, Track
from app.services.schemas import YouTubeSearchItem
from app.services.youtube import YouTubeService

logger = logging.getLogger(__name__)

DEFAULT_TAG = "all"

LEFT_DEFAULT_QUERIES = ("top songs", "popular music", "music video")
LEFT_TAG_QUERIES = {
    "indie-pop": "indie pop playlist",
    "lofi": "lofi beats",
    "night": "night drive music",
    "romantic": "romantic songs",
    "party": "party dance mix",
    "all": "popular music",
}

LEFT_DEFAULT_LIMIT = 15
SEARCH_LIMIT = 20
SEARCH_JAMENDO_LIMIT = 30
RIGHT_FETCH_LIMIT = 40
RIGHT_LIMIT = 25
JAMENDO_ORDER = "popularity_total"


class PlaylistAggregator:
    def __init__(self, cache: TTLCache, youtube: YouTubeService, jamendo: JamendoService):
        self._cache = cache
        self._youtube = youtube
        self._jamendo = jamendo

    # ── Left: YouTube ────────────────────────────────────────────────────────

    async def left_playlist(self) -> PlaylistResult:
        return await self._cache.get_or_compute("left_default", self._build_left_default)

    async def left_playlist_by_tag(self, tag: str = DEFAULT_TAG) -> PlaylistResult:
        return await self._cache.get_or_compute(
            "left_tag_" + tag, lambda: self._build_left_tag(tag)
        )

    async def _build_left_default(self) -> PlaylistResult:
        batches = await asyncio.gather(*(self._youtube.search(q) for q in LEFT_DEFAULT_QUERIES))
        items = [item for batch in batches for item in batch]
        tracks = (await self._map_videos(items, "left"))[:LEFT_DEFAULT_LIMIT]
        logger.info("Built default video feed", extra={"tracks": len(tracks)})
        return PlaylistResult(
            tracks=tracks,
            playlist_name="YouTube Hits",
            playlist_id="youtube-left",
        )

    async def _build_left_tag(self, tag: str) -> PlaylistResult:
        query = LEFT_TAG_QUERIES.get(tag, LEFT_TAG_QUERIES[DEFAULT_TAG])
        items = await self._youtube.search(query)
        tracks = await self._map_videos(items, tag)
        logger.info("Built tag video feed", extra={"tag": tag, "tracks": len(tracks)})
        return PlaylistResult(tracks=tracks, playlist_name=f"YouTube – {tag}")

    # ── Search: YouTube + Jamendo ────────────────────────────────────────────

    async def search(self, query: Optional[str]) -> Optional[PlaylistResult]:
        """Live cross-source search; None when there is nothing to search for."""
        if not query:
            return None

        async def videos() -> list[Track]:
            items = await self._youtube.search(query + " song")
            return await self._map_videos(items, "search")

        url = self._jamendo.tracks_url(SEARCH_JAMENDO_LIMIT, search=query)
        video_tracks, audio_items = await asyncio.gather(videos(), self._jamendo.search(url))

        tracks = (video_tracks + [map_audio_item(i) for i in audio_items])[:SEARCH_LIMIT]
        logger.info("Search", extra={"query": query, "tracks": len(tracks)})
        return PlaylistResult(tracks=tracks, playlist_name=f"Search – {query}")

    # ── Right: Jamendo ───────────────────────────────────────────────────────

    async def right_playlist(self) -> PlaylistResult:
        return await self._cache.get_or_compute("right_default", self._build_right_default)

    async def right_playlist_by_tag(self, tag: str = DEFAULT_TAG) -> PlaylistResult:
        return await self._cache.get_or_compute(
            "right_tag_" + tag, lambda: self._build_right_tag(tag)
        )

    async def _build_right_default(self) -> PlaylistResult:
        tracks = await self._jamendo_tracks(tags=None)
        return PlaylistResult(
            tracks=tracks,
            playlist_name="Jamendo Top Hits",
            playlist_id="jamendo-right",
        )

    async def _build_right_tag(self, tag: str) -> PlaylistResult:
        tracks = await self._jamendo_tracks(tags=None if tag == DEFAULT_TAG else tag)
        return PlaylistResult(tracks=tracks, playlist_name=f"Jamendo – {tag}")

    async def _jamendo_tracks(self, tags: Optional[str]) -> list[Track]:
        url = self._jamendo.tracks_url(RIGHT_FETCH_LIMIT, tags=tags, order=JAMENDO_ORDER)
        items = await self._jamendo.search(url)
        return [map_audio_item(i) for i in items][:RIGHT_LIMIT]

    # ── Helpers ──────────────────────────────────────────────────────────────

    async def _map_videos(self, items: list[YouTubeSearchItem], label: str) -> list[Track]:
        items = _unique_videos(items)
        ids = [i.video_id for i in items if i.video_id]
        durations = await self._youtube.fetch_durations(ids)
        tracks = []
        for item in items:
            track = map_video_item(item, durations.get(item.video_id or ""), label)
            if track is not None:
                tracks.append(track)
        return tracks


def _unique_videos(items: Iterable[YouTubeSearchItem]) -> list[YouTubeSearchItem]:
    """First hit per video ID; items without an ID pass through for the mapper to drop."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if item.video_id:
            if item.video_id in seen:
                continue
            seen.add(item.video_id)
        unique.append(item)
    return unique
