"""
Shared async HTTP client for the YouTube and Jamendo APIs and the player:
- Retry with exponential backoff on 429/5xx and connection errors
- Redirect limits
- Total request timeout
"""
import asyncio
import logging
from typing import Any, Optional

import aiohttp
from aiohttp import ClientSession, TCPConnector

from app.config.settings import settings

logger = logging.getLogger(__name__)

_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class HttpError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"HTTP {status}: {message}")


def build_session() -> ClientSession:
    connector = TCPConnector(limit=20)
    timeout = aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS)
    return ClientSession(
        connector=connector,
        timeout=timeout,
        trust_env=False,
    )


async def fetch_json(
    session: ClientSession,
    url: str,
    *,
    params: Optional[dict] = None,
    attempts: int = settings.HTTP_RETRY_ATTEMPTS,
    backoff: float = settings.HTTP_RETRY_BACKOFF,
) -> Any:
    """GET a JSON document, retrying throttled or failed attempts.

    Raises HttpError for a non-retryable (or finally failing) 4xx/5xx status.
    """
    last_exc: Exception = RuntimeError("No attempts made")
    for attempt in range(1, attempts + 1):
        try:
            async with session.get(
                url,
                params=params,
                allow_redirects=True,
                max_redirects=settings.HTTP_MAX_REDIRECTS,
            ) as resp:
                if resp.status in _RETRYABLE_STATUSES and attempt < attempts:
                    wait = backoff ** attempt
                    logger.warning(
                        "Retryable HTTP status",
                        extra={"status": resp.status, "attempt": attempt, "wait": wait},
                    )
                    await asyncio.sleep(wait)
                    continue
                if resp.status >= 400:
                    body = await resp.text()
                    raise HttpError(resp.status, body[:200])
                return await resp.json(content_type=None)
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as exc:
            last_exc = exc
            if attempt < attempts:
                wait = backoff ** attempt
                logger.warning(
                    "Connection error, retrying",
                    extra={"error": str(exc), "attempt": attempt, "wait": wait},
                )
                await asyncio.sleep(wait)
    raise last_exc
