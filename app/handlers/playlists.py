"""
HTTP handlers for the playlist API.
- GET /api/left-playlist            → default YouTube feed
- GET /api/left-playlist-tag?tag=   → YouTube mood feed
- GET /api/left-search?q=           → YouTube + Jamendo search
- GET /api/right-playlist           → default Jamendo feed
- GET /api/right-playlist-tag?tag=  → Jamendo tag feed
Upstream trouble never turns into an error status; it only means fewer tracks.
"""
import logging

from aiohttp import web

from app.services.aggregator import DEFAULT_TAG, PlaylistAggregator

logger = logging.getLogger(__name__)
routes = web.RouteTableDef()

AGGREGATOR_KEY = web.AppKey("aggregator", PlaylistAggregator)


def _aggregator(request: web.Request) -> PlaylistAggregator:
    return request.app[AGGREGATOR_KEY]


def _tag(request: web.Request) -> str:
    return request.query.get("tag") or DEFAULT_TAG


@routes.get("/api/left-playlist")
async def left_playlist(request: web.Request) -> web.Response:
    result = await _aggregator(request).left_playlist()
    return web.json_response(result.to_dict())


@routes.get("/api/left-playlist-tag")
async def left_playlist_tag(request: web.Request) -> web.Response:
    result = await _aggregator(request).left_playlist_by_tag(_tag(request))
    return web.json_response(result.to_dict())


@routes.get("/api/left-search")
async def left_search(request: web.Request) -> web.Response:
    result = await _aggregator(request).search(request.query.get("q"))
    if result is None:
        return web.json_response({"tracks": []})
    return web.json_response(result.to_dict())


@routes.get("/api/right-playlist")
async def right_playlist(request: web.Request) -> web.Response:
    result = await _aggregator(request).right_playlist()
    return web.json_response(result.to_dict())


@routes.get("/api/right-playlist-tag")
async def right_playlist_tag(request: web.Request) -> web.Response:
    result = await _aggregator(request).right_playlist_by_tag(_tag(request))
    return web.json_response(result.to_dict())
