"""
VLC Media Output Implementation

Output backend based on the python-vlc library, supporting:
- Local files and network streams (http/https URIs)
- Extensive format support

libVLC raises its events on its own threads; they are queued and delivered
from poll() like every other backend.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from core.audio_engine import MediaOutputBase
from core.ports.audio import MediaEnded, MediaErrorKind, OutputState

logger = logging.getLogger(__name__)

# python-vlc is an optional backend
try:
    import vlc
    VLC_AVAILABLE = True
except ImportError:
    vlc = None  # type: ignore
    VLC_AVAILABLE = False
    logger.debug("The python-vlc library is not installed; VLCMediaOutput is unavailable.")


class VLCMediaOutput(MediaOutputBase):
    """
    VLC-based Media Output
    """

    @staticmethod
    def probe() -> bool:
        """Check if python-vlc dependencies are available."""
        return VLC_AVAILABLE

    def __init__(self):
        if not VLC_AVAILABLE:
            raise ImportError("The python-vlc library is not installed.")

        super().__init__()

        self._instance: Any = vlc.Instance("--no-video")
        self._player: Any = self._instance.media_player_new()
        self._media: Optional[Any] = None

        # Set by libVLC's thread when the stream finishes; VLC needs stop() before replay
        self._ended: bool = False

        self._lock = threading.Lock()
        self._setup_event_callbacks()

    def _setup_event_callbacks(self) -> None:
        """Attach VLC event callbacks (run on libVLC threads, must not call back into the player)."""
        events = self._player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end_reached)
        events.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._on_vlc_error)

    def _on_end_reached(self, event) -> None:
        # No self._lock here: libVLC's stop() waits for this thread to return
        self._ended = True
        self._state = OutputState.STOPPED
        self._report(MediaEnded(source_uri=self._current_source))

    def _on_vlc_error(self, event) -> None:
        self._state = OutputState.ERROR
        self._report_error(MediaErrorKind.LOAD_FAILURE, "VLC could not open the source")

    def load(self, source_uri: str) -> bool:
        """Bind a local file or network stream."""
        try:
            # Stop before rebinding so late callbacks are queued under the old source
            if self._state in (OutputState.PLAYING, OutputState.PAUSED) or self._ended:
                self._player.stop()

            with self._lock:
                self._begin_load(source_uri)
                self._ended = False

                old_media = self._media
                self._media = self._instance.media_new(source_uri)
                self._player.set_media(self._media)
                if old_media is not None:
                    old_media.release()

                self._state = OutputState.STOPPED
            return True

        except Exception as e:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.LOAD_FAILURE, f"Failed to load source: {e}")
            return False

    def play(self) -> bool:
        """Start or resume output."""
        try:
            with self._lock:
                if self._media is None:
                    self._report_error(MediaErrorKind.PLAY_REJECTED, "No source bound")
                    return False

                if self._state == OutputState.PAUSED:
                    self._player.set_pause(0)
                    self._state = OutputState.PLAYING
                    return True

                if self._ended:
                    self._player.stop()
                    self._ended = False

                self._player.audio_set_volume(int(self._volume * 100))
                if self._player.play() == 0:
                    self._state = OutputState.PLAYING
                    return True

            self._report_error(MediaErrorKind.PLAY_REJECTED, "libVLC refused to start playback")
            return False

        except Exception as e:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.PLAY_REJECTED, f"Playback failed: {e}")
            return False

    def pause(self) -> None:
        """Pause output."""
        with self._lock:
            if self._state == OutputState.PLAYING:
                self._player.set_pause(1)
                self._state = OutputState.PAUSED

    def stop(self) -> None:
        """Stop output."""
        with self._lock:
            self._player.stop()
            self._ended = False
            if self._state != OutputState.ERROR:
                self._state = OutputState.STOPPED

    def seek(self, position_seconds: float) -> None:
        """Seek to a specified position."""
        with self._lock:
            self._player.set_time(int(max(0.0, position_seconds) * 1000))

    def set_volume(self, volume: float) -> None:
        """Set volume."""
        self._volume = max(0.0, min(1.0, volume))
        self._player.audio_set_volume(int(self._volume * 100))

    @property
    def position(self) -> float:
        """Current playback position (seconds)."""
        pos = self._player.get_time()
        return pos / 1000.0 if pos > 0 else 0.0

    @property
    def duration(self) -> float:
        """Duration of the bound source (seconds), 0 until VLC knows it."""
        length = self._player.get_length()
        if length <= 0 and self._media is not None:
            length = self._media.get_duration()
        return length / 1000.0 if length > 0 else 0.0

    def get_engine_name(self) -> str:
        return "vlc"

    def cleanup(self) -> None:
        """Release libVLC resources."""
        super().cleanup()
        with self._lock:
            try:
                self._player.stop()
                self._player.release()
                if self._media:
                    self._media.release()
                self._instance.release()
            except Exception as e:
                logger.warning("VLC cleanup failed: %s", e)
