"""
nWave API - Main Entrypoint
Serves aggregated YouTube and Jamendo playlists as JSON.
"""
import asyncio
import logging
import sys

from aiohttp import web

from app.config.settings import settings
from app.utils.logging import setup_logging
from app.web import create_app


async def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    runner = web.AppRunner(create_app())
    await runner.setup()
    site = web.TCPSite(runner, settings.HOST, settings.PORT)
    await site.start()

    logger.info(
        "Starting API",
        extra={"env": settings.ENV, "host": settings.HOST, "port": settings.PORT},
    )
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        logger.info("API stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
