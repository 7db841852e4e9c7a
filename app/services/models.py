from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

DEFAULT_DURATION = 200
TITLE_MAX_LEN = 50
ARTIST_MAX_LEN = 30


class Source(str, Enum):
    YOUTUBE = "youtube"
    JAMENDO = "jamendo"


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    artist: str
    source: Source
    duration: int = DEFAULT_DURATION
    thumb: Optional[str] = None
    video_id: Optional[str] = None
    audio_url: Optional[str] = None
    tags: tuple[str, ...] = ()
    playlist_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration,
            "thumb": self.thumb,
            "videoId": self.video_id,
            "audioUrl": self.audio_url,
            "source": self.source.value,
            "tags": list(self.tags),
            "playlistId": self.playlist_id,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            artist=data.get("artist", ""),
            source=Source(data["source"]),
            duration=int(data.get("duration") or DEFAULT_DURATION),
            thumb=data.get("thumb"),
            video_id=data.get("videoId"),
            audio_url=data.get("audioUrl"),
            tags=tuple(data.get("tags", ())),
            playlist_id=data.get("playlistId", ""),
        )


@dataclass
class PlaylistResult:
    tracks: list[Track]
    playlist_name: str
    playlist_id: Optional[str] = None
    count: int = field(init=False)

    def __post_init__(self) -> None:
        self.count = len(self.tracks)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tracks": [t.to_dict() for t in self.tracks],
            "playlistName": self.playlist_name,
        }
        if self.playlist_id is not None:
            data["playlistId"] = self.playlist_id
        data["count"] = self.count
        return data
