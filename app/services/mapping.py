"""
Upstream item → Track normalization.
"""
from typing import Optional

from app.services.models import (
    ARTIST_MAX_LEN,
    DEFAULT_DURATION,
    TITLE_MAX_LEN,
    Source,
    Track,
)
from app.services.schemas import JamendoTrack, YouTubeSearchItem


def map_video_item(
    item: YouTubeSearchItem,
    duration: Optional[int],
    playlist_label: str,
) -> Optional[Track]:
    """Build a YouTube Track, or None if the search hit carries no video ID."""
    video_id = item.video_id
    if not video_id:
        return None

    snippet = item.snippet
    thumbs = snippet.thumbnails
    thumb = None
    for candidate in (thumbs.medium, thumbs.default):
        if candidate is not None and candidate.url:
            thumb = candidate.url
            break

    return Track(
        id="yt-" + video_id,
        title=snippet.title[:TITLE_MAX_LEN],
        artist=snippet.channel_title[:ARTIST_MAX_LEN],
        duration=duration or DEFAULT_DURATION,
        thumb=thumb,
        video_id=video_id,
        source=Source.YOUTUBE,
        tags=(Source.YOUTUBE.value,),
        playlist_id=playlist_label,
    )


def map_audio_item(item: JamendoTrack) -> Track:
    # Jamendo tracks always carry the "jamendo" label, whatever feed they came from
    return Track(
        id="jam-" + item.id,
        title=item.name[:TITLE_MAX_LEN],
        artist=item.artist_name[:ARTIST_MAX_LEN],
        duration=item.duration or DEFAULT_DURATION,
        thumb=item.image or None,
        audio_url=item.audio,
        source=Source.JAMENDO,
        tags=(Source.JAMENDO.value,),
        playlist_id="jamendo",
    )
