"""Shared fakes for upstream adapters."""
from typing import Optional

import pytest

from app.services.cache import TTLCache
from app.services.schemas import JamendoTrack, YouTubeSearchItem


def yt_item(video_id: Optional[str], title: str = "Song", channel: str = "Channel") -> YouTubeSearchItem:
    raw: dict = {
        "id": {"kind": "youtube#video"},
        "snippet": {
            "title": title,
            "channelTitle": channel,
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/{video_id}/default.jpg"},
                "medium": {"url": f"https://i.ytimg.com/{video_id}/mqdefault.jpg"},
            },
        },
    }
    if video_id is not None:
        raw["id"]["videoId"] = video_id
    return YouTubeSearchItem.model_validate(raw)


def jam_item(track_id: str, name: str = "Tune", duration: Optional[int] = 180) -> JamendoTrack:
    return JamendoTrack.model_validate({
        "id": track_id,
        "name": name,
        "artist_name": "Artist",
        "duration": duration,
        "image": f"https://img.jamendo.com/{track_id}.jpg",
        "audio": f"https://mp3.jamendo.com/{track_id}.mp3",
    })


class FakeYouTube:
    def __init__(self, results: Optional[dict[str, list[YouTubeSearchItem]]] = None,
                 durations: Optional[dict[str, int]] = None):
        self.results = results or {}
        self.durations = durations or {}
        self.search_calls: list[str] = []
        self.duration_calls: list[list[str]] = []

    async def search(self, query: str) -> list[YouTubeSearchItem]:
        self.search_calls.append(query)
        return self.results.get(query, [])

    async def fetch_durations(self, video_ids: list[str]) -> dict[str, int]:
        self.duration_calls.append(list(video_ids))
        return {v: self.durations[v] for v in video_ids if v in self.durations}


class FakeJamendo:
    def __init__(self, results: Optional[list[JamendoTrack]] = None):
        self.results = results or []
        self.urls: list[str] = []

    def tracks_url(self, limit, *, order=None, tags=None, search=None) -> str:
        parts = [f"limit={limit}"]
        if search is not None:
            parts.append(f"search={search}")
        if tags is not None:
            parts.append(f"tags={tags}")
        if order is not None:
            parts.append(f"order={order}")
        return "jamendo?" + "&".join(parts)

    async def search(self, url: str) -> list[JamendoTrack]:
        self.urls.append(url)
        return self.results


@pytest.fixture
def cache() -> TTLCache:
    return TTLCache(ttl_seconds=600, max_entries=100)
