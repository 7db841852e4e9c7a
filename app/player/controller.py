"""
Playback state machine.
Drives exactly one active backend at a time over indices into the active
playlist: load, play/pause, seek, next/prev, and a random pick when a
track ends on its own.
"""
import asyncio
import logging
import random
from typing import Iterable, Optional

from app.config.settings import settings
from app.player.backends import BackendEvent, PlaybackBackend
from app.player.session import PlayerSession, Side

logger = logging.getLogger(__name__)


class PlayerController:
    def __init__(
        self,
        backends: Iterable[PlaybackBackend],
        session: Optional[PlayerSession] = None,
        poll_interval: float = settings.PLAYER_POLL_INTERVAL,
        rng: Optional[random.Random] = None,
    ):
        self.session = session or PlayerSession()
        self._backends = list(backends)
        self._active: Optional[PlaybackBackend] = None
        self._poll_interval = poll_interval
        self._rng = rng or random.Random()
        self._pending_start: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        for backend in self._backends:
            backend.set_event_handler(self._on_backend_event)

    @property
    def active_backend(self) -> Optional[PlaybackBackend]:
        return self._active

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the progress poll; needs a running event loop."""
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.get_running_loop().create_task(self._poll_progress())

    async def close(self) -> None:
        for task in (self._poll_task, self._pending_start):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._poll_task = None
        self._pending_start = None

    # ── Transport ────────────────────────────────────────────────────────────

    def select(self, side: Side, index: int) -> None:
        """A playlist row was clicked."""
        self.session.active_list = side
        self.session.current_index = index
        self.load_track_from_list(autoplay=True)

    def load_track_from_list(self, autoplay: bool = False) -> None:
        tracks = self.session.active_tracks
        index = self.session.current_index
        if not 0 <= index < len(tracks):
            return
        track = tracks[index]

        logger.info(
            "Now playing",
            extra={"title": track.title, "source": track.source.value, "index": index},
        )
        self.session.now_playing = track
        self._stop_current()

        backend = next(
            (b for b in self._backends if b.accepts(track) and b.is_available()),
            None,
        )
        if backend is None:
            logger.warning("No backend available", extra={"track_id": track.id})
            return

        self._active = backend
        self.session.current_backend = backend.kind
        backend.load(track)
        if autoplay:
            self._schedule_start(backend, backend.start_delay)

    def toggle_play_pause(self) -> None:
        backend = self._active
        if backend is None or not backend.is_available():
            return
        if backend.is_playing():
            backend.pause()
        else:
            self._schedule_start(backend, 0.0)

    def next(self) -> None:
        tracks = self.session.active_tracks
        if not tracks:
            return
        self.session.current_index = (self.session.current_index + 1) % len(tracks)
        self.load_track_from_list(autoplay=True)

    def prev(self) -> None:
        tracks = self.session.active_tracks
        if not tracks:
            return
        index = self.session.current_index
        self.session.current_index = len(tracks) - 1 if index == 0 else index - 1
        self.load_track_from_list(autoplay=True)

    def random_track(self) -> None:
        tracks = self.session.active_tracks
        if not tracks:
            return
        index = self._rng.randrange(len(tracks))
        # Step past the current track instead of re-rolling
        if index == self.session.current_index:
            index = (index + 1) % len(tracks)
        self.session.current_index = index
        logger.debug("Random next", extra={"index": index})
        self.load_track_from_list(autoplay=True)

    def seek(self, percent: float) -> None:
        backend = self._active
        if backend is None or not backend.is_available():
            return
        duration = backend.duration()
        if duration:
            backend.seek(percent / 100 * duration)

    def update_progress(self) -> None:
        backend = self._active
        if backend is None or not backend.is_available():
            return
        duration = backend.duration()
        if duration > 0:
            self.session.progress = backend.position() / duration * 100

    # ── Internals ────────────────────────────────────────────────────────────

    def _stop_current(self) -> None:
        self._cancel_pending_start()
        if self._active is not None:
            self._active.stop()
        self._set_playing(False)

    def _cancel_pending_start(self) -> None:
        if self._pending_start is not None and not self._pending_start.done():
            self._pending_start.cancel()
        self._pending_start = None

    def _schedule_start(self, backend: PlaybackBackend, delay: float) -> None:
        # At most one start in flight, so a switch can always cancel it
        self._cancel_pending_start()
        self._pending_start = asyncio.get_running_loop().create_task(
            self._start_backend(backend, delay)
        )

    async def _start_backend(self, backend: PlaybackBackend, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            await backend.play()
        except Exception as exc:
            logger.warning(
                "Playback start failed",
                extra={"backend": backend.kind.value, "error": str(exc)},
            )

    def _on_backend_event(self, backend: PlaybackBackend, event: BackendEvent) -> None:
        if backend is not self._active:
            return
        if event == BackendEvent.PLAYING:
            self._set_playing(True)
        elif event == BackendEvent.PAUSED:
            self._set_playing(False)
        elif event == BackendEvent.ENDED:
            logger.info("Track ended, picking random next", extra={"backend": backend.kind.value})
            self.random_track()
        elif event == BackendEvent.PROGRESS:
            self.update_progress()

    def _set_playing(self, playing: bool) -> None:
        self.session.is_playing = playing

    async def _poll_progress(self) -> None:
        while True:
            self.update_progress()
            await asyncio.sleep(self._poll_interval)
