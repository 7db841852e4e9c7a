"""
aiohttp application factory.
Owns the shared upstream ClientSession and the process-wide TTL cache.
"""
import logging
from typing import Optional

from aiohttp import web

from app.config.settings import settings
from app.handlers import routes
from app.handlers.playlists import AGGREGATOR_KEY
from app.services.aggregator import PlaylistAggregator
from app.services.cache import TTLCache
from app.services.jamendo import JamendoService
from app.services.youtube import YouTubeService
from app.utils.http_client import build_session

logger = logging.getLogger(__name__)


def create_app(aggregator: Optional[PlaylistAggregator] = None) -> web.Application:
    """Build the API app; pass `aggregator` to skip wiring real upstreams."""
    app = web.Application()
    app.add_routes(routes)

    if aggregator is not None:
        app[AGGREGATOR_KEY] = aggregator
    else:
        app.cleanup_ctx.append(_upstream_ctx)
    return app


async def _upstream_ctx(app: web.Application):
    session = build_session()
    cache = TTLCache(
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        max_entries=settings.CACHE_MAX_ENTRIES,
    )
    app[AGGREGATOR_KEY] = PlaylistAggregator(
        cache,
        YouTubeService(session, cache, api_key=settings.YOUTUBE_API_KEY),
        JamendoService(session, cache, client_id=settings.JAMENDO_CLIENT_ID),
    )
    logger.info(
        "Upstreams ready",
        extra={
            "youtube_configured": bool(settings.YOUTUBE_API_KEY),
            "jamendo_configured": bool(settings.JAMENDO_CLIENT_ID),
        },
    )
    try:
        yield
    finally:
        await session.close()
        logger.info("Upstream session closed")
