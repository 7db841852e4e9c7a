import pytest
import pytest_asyncio
from aiohttp import test_utils

from app.services.aggregator import PlaylistAggregator
from app.web import create_app

from conftest import FakeJamendo, FakeYouTube, jam_item, yt_item


@pytest.fixture
def upstreams():
    yt = FakeYouTube(
        {
            "top songs": [yt_item("a")],
            "popular music": [yt_item("b")],
            "lofi beats": [yt_item("c")],
            "hello song": [yt_item("d")],
        },
        durations={"a": 100},
    )
    jam = FakeJamendo([jam_item("1"), jam_item("2")])
    return yt, jam


@pytest_asyncio.fixture
async def client(cache, upstreams):
    yt, jam = upstreams
    app = create_app(aggregator=PlaylistAggregator(cache, yt, jam))
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        yield client


class TestPlaylistRoutes:
    @pytest.mark.asyncio
    async def test_left_playlist(self, client):
        resp = await client.get("/api/left-playlist")
        assert resp.status == 200
        data = await resp.json()
        assert data["playlistName"] == "YouTube Hits"
        assert data["playlistId"] == "youtube-left"
        assert data["count"] == 2
        assert data["tracks"][0] == {
            "id": "yt-a",
            "title": "Song",
            "artist": "Channel",
            "duration": 100,
            "thumb": "https://i.ytimg.com/a/mqdefault.jpg",
            "videoId": "a",
            "source": "youtube",
            "tags": ["youtube"],
            "playlistId": "left",
        }

    @pytest.mark.asyncio
    async def test_left_tag(self, client):
        data = await (await client.get("/api/left-playlist-tag", params={"tag": "lofi"})).json()
        assert [t["id"] for t in data["tracks"]] == ["yt-c"]
        assert "playlistId" not in data

    @pytest.mark.asyncio
    async def test_left_tag_defaults_to_all(self, client):
        data = await (await client.get("/api/left-playlist-tag")).json()
        assert data["playlistName"] == "YouTube – all"
        assert [t["id"] for t in data["tracks"]] == ["yt-b"]

    @pytest.mark.asyncio
    async def test_search(self, client):
        data = await (await client.get("/api/left-search", params={"q": "hello"})).json()
        assert [t["id"] for t in data["tracks"]] == ["yt-d", "jam-1", "jam-2"]
        assert data["count"] == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/left-search", "/api/left-search?q="])
    async def test_search_without_query(self, client, upstreams, path):
        resp = await client.get(path)
        assert resp.status == 200
        assert await resp.json() == {"tracks": []}
        yt, jam = upstreams
        assert yt.search_calls == [] and jam.urls == []

    @pytest.mark.asyncio
    async def test_right_playlist(self, client):
        data = await (await client.get("/api/right-playlist")).json()
        assert data["playlistId"] == "jamendo-right"
        assert data["tracks"][0]["audioUrl"] == "https://mp3.jamendo.com/1.mp3"
        assert "videoId" not in data["tracks"][0]

    @pytest.mark.asyncio
    async def test_right_tag(self, client, upstreams):
        data = await (await client.get("/api/right-playlist-tag", params={"tag": "rock"})).json()
        assert data["playlistName"] == "Jamendo – rock"
        assert upstreams[1].urls == ["jamendo?limit=40&tags=rock&order=popularity_total"]

    @pytest.mark.asyncio
    async def test_empty_upstream_is_not_an_error(self, cache):
        app = create_app(aggregator=PlaylistAggregator(cache, FakeYouTube(), FakeJamendo()))
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/api/left-playlist")
            assert resp.status == 200
            assert await resp.json() == {
                "tracks": [],
                "playlistName": "YouTube Hits",
                "playlistId": "youtube-left",
                "count": 0,
            }
