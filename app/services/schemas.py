"""
Upstream response schemas.
Every field the mappers read is optional here so that a sparse item
still validates; anything truly malformed is dropped per item.
"""
import logging
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ── YouTube Data API v3 ─────────────────────────────────────────────────────


class YouTubeThumbnail(_Upstream):
    url: Optional[str] = None


class YouTubeThumbnails(_Upstream):
    default: Optional[YouTubeThumbnail] = None
    medium: Optional[YouTubeThumbnail] = None
    high: Optional[YouTubeThumbnail] = None


class YouTubeSnippet(_Upstream):
    title: str = ""
    channel_title: str = Field(default="", alias="channelTitle")
    thumbnails: YouTubeThumbnails = Field(default_factory=YouTubeThumbnails)


class YouTubeSearchId(_Upstream):
    kind: Optional[str] = None
    video_id: Optional[str] = Field(default=None, alias="videoId")


class YouTubeSearchItem(_Upstream):
    id: YouTubeSearchId = Field(default_factory=YouTubeSearchId)
    snippet: YouTubeSnippet = Field(default_factory=YouTubeSnippet)

    @property
    def video_id(self) -> Optional[str]:
        return self.id.video_id


class YouTubeContentDetails(_Upstream):
    duration: str = ""


class YouTubeVideoItem(_Upstream):
    id: str
    content_details: YouTubeContentDetails = Field(
        default_factory=YouTubeContentDetails, alias="contentDetails"
    )


# ── Jamendo v3.0 ────────────────────────────────────────────────────────────


class JamendoTrack(_Upstream):
    id: str
    name: str = ""
    artist_name: str = ""
    duration: Optional[int] = None
    image: Optional[str] = None
    audio: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)


def parse_items(model: type[M], raw_items: Any, *, source: str) -> list[M]:
    """Validate a raw upstream list, dropping items that don't fit `model`."""
    if not isinstance(raw_items, list):
        return []
    items: list[M] = []
    for raw in raw_items:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed upstream item",
                extra={"source": source, "error_count": exc.error_count()},
            )
    return items
