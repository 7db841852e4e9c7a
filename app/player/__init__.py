from app.player.backends import (
    BackendEvent,
    BackendKind,
    EmbeddedVideoBackend,
    NativeAudioBackend,
    PlaybackBackend,
)
from app.player.client import PlaylistClient, SearchDebouncer
from app.player.controller import PlayerController
from app.player.session import PlayerSession, Side

__all__ = [
    "BackendEvent",
    "BackendKind",
    "EmbeddedVideoBackend",
    "NativeAudioBackend",
    "PlaybackBackend",
    "PlaylistClient",
    "PlayerController",
    "PlayerSession",
    "SearchDebouncer",
    "Side",
]
