"""Playback backend contracts and the two concrete adapters.

`PlayerController` only talks to `PlaybackBackend`. Each adapter wraps one
external player surface and turns its callbacks into the same small set of
events:

- `EmbeddedVideoBackend` drives an IFrame-style video player that only
  becomes usable after its ready callback and reports numeric states.
- `NativeAudioBackend` drives an audio-element-style object with a `src`,
  an awaitable `play()` and media events.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol

from app.services.models import Source, Track


class BackendKind(str, Enum):
    NONE = "none"
    EMBEDDED_VIDEO = "embedded-video"
    NATIVE_AUDIO = "native-audio"


class BackendEvent(str, Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    PROGRESS = "progress"


EventHandler = Callable[["PlaybackBackend", BackendEvent], None]


class PlaybackBackend(Protocol):
    kind: BackendKind
    source: Source
    start_delay: float

    def set_event_handler(self, handler: EventHandler) -> None: ...

    def is_available(self) -> bool: ...

    def accepts(self, track: Track) -> bool: ...

    def load(self, track: Track) -> None: ...

    async def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def position(self) -> float: ...

    def duration(self) -> float: ...

    def is_playing(self) -> bool: ...


# ── External player surfaces ────────────────────────────────────────────────


class VideoPlayerDriver(Protocol):
    def load_video_by_id(self, video_id: str) -> None: ...

    def play_video(self) -> None: ...

    def pause_video(self) -> None: ...

    def stop_video(self) -> None: ...

    def seek_to(self, seconds: float, allow_seek_ahead: bool) -> None: ...

    def get_duration(self) -> float: ...

    def get_current_time(self) -> float: ...

    def get_player_state(self) -> int: ...


class AudioElementDriver(Protocol):
    src: str
    current_time: float
    duration: float
    paused: bool

    def play(self) -> Awaitable[Any]: ...

    def pause(self) -> None: ...


class _BaseBackend:
    kind = BackendKind.NONE
    start_delay = 0.0

    def __init__(self) -> None:
        self._handler: Optional[EventHandler] = None

    def set_event_handler(self, handler: EventHandler) -> None:
        self._handler = handler

    def _emit(self, event: BackendEvent) -> None:
        if self._handler is not None:
            self._handler(self, event)


class EmbeddedVideoBackend(_BaseBackend):
    """Adapter for an IFrame-API video player."""

    kind = BackendKind.EMBEDDED_VIDEO
    source = Source.YOUTUBE

    STATE_ENDED = 0
    STATE_PLAYING = 1
    STATE_PAUSED = 2

    def __init__(self, driver: VideoPlayerDriver, start_delay: float = 1.0):
        super().__init__()
        self._driver = driver
        self._ready = False
        self.start_delay = start_delay

    # Callbacks wired to the embed's onReady / onStateChange
    def handle_ready(self) -> None:
        self._ready = True

    def handle_state_change(self, state: int) -> None:
        if state == self.STATE_PLAYING:
            self._emit(BackendEvent.PLAYING)
        elif state == self.STATE_PAUSED:
            self._emit(BackendEvent.PAUSED)
        elif state == self.STATE_ENDED:
            self._emit(BackendEvent.ENDED)

    def is_available(self) -> bool:
        return self._ready

    def accepts(self, track: Track) -> bool:
        return track.source == self.source and bool(track.video_id)

    def load(self, track: Track) -> None:
        self._driver.load_video_by_id(track.video_id or "")

    async def play(self) -> None:
        self._driver.play_video()

    def pause(self) -> None:
        self._driver.pause_video()

    def stop(self) -> None:
        self._driver.stop_video()

    def seek(self, seconds: float) -> None:
        self._driver.seek_to(seconds, True)

    def position(self) -> float:
        return self._driver.get_current_time() or 0.0

    def duration(self) -> float:
        return self._driver.get_duration() or 0.0

    def is_playing(self) -> bool:
        return self._driver.get_player_state() == self.STATE_PLAYING


class NativeAudioBackend(_BaseBackend):
    """Adapter for a media element playing a direct audio URL."""

    kind = BackendKind.NATIVE_AUDIO
    source = Source.JAMENDO

    _EVENTS = {
        "play": BackendEvent.PLAYING,
        "pause": BackendEvent.PAUSED,
        "ended": BackendEvent.ENDED,
        "timeupdate": BackendEvent.PROGRESS,
    }

    def __init__(self, driver: AudioElementDriver):
        super().__init__()
        self._driver = driver

    # Wired to the element's media events
    def handle_media_event(self, name: str) -> None:
        event = self._EVENTS.get(name)
        if event is not None:
            self._emit(event)

    def is_available(self) -> bool:
        return True

    def accepts(self, track: Track) -> bool:
        return track.source == self.source and bool(track.audio_url)

    def load(self, track: Track) -> None:
        self._driver.src = track.audio_url or ""

    async def play(self) -> None:
        await self._driver.play()

    def pause(self) -> None:
        self._driver.pause()

    def stop(self) -> None:
        self._driver.pause()
        self._driver.current_time = 0

    def seek(self, seconds: float) -> None:
        self._driver.current_time = seconds

    def position(self) -> float:
        return self._driver.current_time or 0.0

    def duration(self) -> float:
        return self._driver.duration or 0.0

    def is_playing(self) -> bool:
        return not self._driver.paused
