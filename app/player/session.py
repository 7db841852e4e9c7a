from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from app.player.backends import BackendKind
from app.services.models import Track


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass
class PlayerSession:
    """Mutable playback state owned by one PlayerController."""

    active_list: Side = Side.LEFT
    current_index: int = 0
    current_backend: BackendKind = BackendKind.NONE
    is_playing: bool = False

    left_tracks: list[Track] = field(default_factory=list)
    right_tracks: list[Track] = field(default_factory=list)
    left_subtitle: str = ""

    now_playing: Optional[Track] = None
    progress: float = 0.0  # percent of current track

    def tracks(self, side: Side) -> list[Track]:
        return self.left_tracks if side == Side.LEFT else self.right_tracks

    @property
    def active_tracks(self) -> list[Track]:
        return self.tracks(self.active_list)
