from urllib.parse import parse_qs, urlparse

import aiohttp
import pytest

from app.services.jamendo import JamendoService
from app.services.youtube import YouTubeService
from app.utils.http_client import HttpError


class RecordingFetch:
    def __init__(self, payload=None, exc=None):
        self.payload = payload
        self.exc = exc
        self.calls = []

    async def __call__(self, session, url, *, params=None):
        self.calls.append((url, params))
        if self.exc is not None:
            raise self.exc
        return self.payload


SEARCH_PAYLOAD = {
    "items": [
        {"id": {"kind": "youtube#video", "videoId": "aaa"},
         "snippet": {"title": "One", "channelTitle": "C1", "thumbnails": {}}},
        {"id": {"kind": "youtube#channel"},
         "snippet": {"title": "A channel", "channelTitle": "C2"}},
        "garbage",
    ]
}


class TestYouTubeService:
    @pytest.mark.asyncio
    async def test_search_requests_videos_and_validates(self, monkeypatch, cache):
        fetch = RecordingFetch(SEARCH_PAYLOAD)
        monkeypatch.setattr("app.services.youtube.fetch_json", fetch)
        yt = YouTubeService(session=None, cache=cache, api_key="key")

        items = await yt.search("lofi beats")

        assert [i.video_id for i in items] == ["aaa", None]
        url, params = fetch.calls[0]
        assert url.endswith("/youtube/v3/search")
        assert params["q"] == "lofi beats"
        assert params["type"] == "video"
        assert params["maxResults"] == 15

    @pytest.mark.asyncio
    async def test_search_is_cached_per_query(self, monkeypatch, cache):
        fetch = RecordingFetch(SEARCH_PAYLOAD)
        monkeypatch.setattr("app.services.youtube.fetch_json", fetch)
        yt = YouTubeService(session=None, cache=cache, api_key="key")

        await yt.search("a")
        await yt.search("a")
        await yt.search("b")

        assert len(fetch.calls) == 2
        assert "yt_search_a" in cache

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc", [
        HttpError(403, "quotaExceeded"),
        aiohttp.ClientConnectionError("refused"),
        ValueError("bad json"),
    ])
    async def test_search_failure_returns_empty(self, monkeypatch, cache, exc):
        monkeypatch.setattr("app.services.youtube.fetch_json", RecordingFetch(exc=exc))
        yt = YouTubeService(session=None, cache=cache, api_key="key")
        assert await yt.search("x") == []

    @pytest.mark.asyncio
    async def test_search_without_key_skips_upstream(self, monkeypatch, cache):
        fetch = RecordingFetch(SEARCH_PAYLOAD)
        monkeypatch.setattr("app.services.youtube.fetch_json", fetch)
        yt = YouTubeService(session=None, cache=cache, api_key="")
        assert await yt.search("x") == []
        assert fetch.calls == []

    @pytest.mark.asyncio
    async def test_durations_batched_in_one_call(self, monkeypatch, cache):
        fetch = RecordingFetch({"items": [
            {"id": "aaa", "contentDetails": {"duration": "PT3M30S"}},
            {"id": "bbb", "contentDetails": {"duration": "PT1H"}},
        ]})
        monkeypatch.setattr("app.services.youtube.fetch_json", fetch)
        yt = YouTubeService(session=None, cache=cache, api_key="key")

        durations = await yt.fetch_durations(["aaa", "bbb"])

        assert durations == {"aaa": 210, "bbb": 3600}
        assert len(fetch.calls) == 1
        assert fetch.calls[0][1]["id"] == "aaa,bbb"
        assert "yt_durations_aaa,bbb" in cache

    @pytest.mark.asyncio
    async def test_durations_empty_ids_short_circuit(self, monkeypatch, cache):
        fetch = RecordingFetch({"items": []})
        monkeypatch.setattr("app.services.youtube.fetch_json", fetch)
        yt = YouTubeService(session=None, cache=cache, api_key="key")
        assert await yt.fetch_durations([]) == {}
        assert fetch.calls == []

    @pytest.mark.asyncio
    async def test_durations_failure_returns_empty_mapping(self, monkeypatch, cache):
        monkeypatch.setattr(
            "app.services.youtube.fetch_json", RecordingFetch(exc=HttpError(500, "oops"))
        )
        yt = YouTubeService(session=None, cache=cache, api_key="key")
        assert await yt.fetch_durations(["aaa"]) == {}


class TestJamendoService:
    def test_tracks_url(self, cache):
        jam = JamendoService(session=None, cache=cache, client_id="cid")
        url = jam.tracks_url(40, tags="lofi beats", order="popularity_total")
        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        assert parsed.netloc == "api.jamendo.com"
        assert parsed.path == "/v3.0/tracks/"
        assert query == {
            "client_id": ["cid"],
            "format": ["json"],
            "limit": ["40"],
            "tags": ["lofi beats"],
            "order": ["popularity_total"],
        }

    def test_tracks_url_search_only(self, cache):
        jam = JamendoService(session=None, cache=cache, client_id="cid")
        query = parse_qs(urlparse(jam.tracks_url(30, search="daft punk")).query)
        assert query["search"] == ["daft punk"]
        assert "order" not in query and "tags" not in query

    @pytest.mark.asyncio
    async def test_search_fetches_url_once(self, monkeypatch, cache):
        fetch = RecordingFetch({"results": [
            {"id": "1", "name": "Tune", "artist_name": "A", "duration": 100,
             "image": "i", "audio": "a"},
            {"name": "no id"},
        ]})
        monkeypatch.setattr("app.services.jamendo.fetch_json", fetch)
        jam = JamendoService(session=None, cache=cache, client_id="cid")

        first = await jam.search("https://api.jamendo.com/v3.0/tracks/?limit=1")
        second = await jam.search("https://api.jamendo.com/v3.0/tracks/?limit=1")

        assert [t.id for t in first] == ["1"]
        assert first is second
        assert len(fetch.calls) == 1

    @pytest.mark.asyncio
    async def test_search_failure_returns_empty(self, monkeypatch, cache):
        monkeypatch.setattr(
            "app.services.jamendo.fetch_json",
            RecordingFetch(exc=aiohttp.ClientConnectionError("down")),
        )
        jam = JamendoService(session=None, cache=cache, client_id="cid")
        assert await jam.search("https://api.jamendo.com/v3.0/tracks/") == []
