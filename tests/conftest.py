"""
Test Configuration File

Unified setup for Python path, avoiding sys.path.insert in each test file.
Provides a scriptable media output and player fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from core.audio_engine import MediaOutputBase  # noqa: E402
from core.ports.audio import MediaEnded, MediaErrorKind, MediaProgress, OutputState  # noqa: E402


class FakeMediaOutput(MediaOutputBase):
    """Media output that records commands and lets tests script events."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self._position = 0.0
        self._duration = 0.0
        self.fail_load = False
        self.reject_play = False
        self.auto_progress = False

    def load(self, source_uri):
        self.calls.append(("load", source_uri))
        self._begin_load(source_uri)
        self._position = 0.0
        if self.fail_load:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.LOAD_FAILURE, "unreachable")
            return False
        self._state = OutputState.STOPPED
        return True

    def play(self):
        self.calls.append(("play",))
        if self.reject_play:
            self._report_error(MediaErrorKind.PLAY_REJECTED, "autoplay blocked")
            return False
        self._state = OutputState.PLAYING
        return True

    def pause(self):
        self.calls.append(("pause",))
        if self._state == OutputState.PLAYING:
            self._state = OutputState.PAUSED

    def stop(self):
        self.calls.append(("stop",))
        self._state = OutputState.STOPPED

    def seek(self, position_seconds):
        self.calls.append(("seek", position_seconds))
        self._position = position_seconds

    def set_volume(self, volume):
        self.calls.append(("set_volume", volume))
        self._volume = volume

    @property
    def position(self):
        return self._position

    @property
    def duration(self):
        return self._duration

    def get_engine_name(self):
        return "fake"

    # ===== Scripting helpers =====

    def set_position(self, seconds, duration=None):
        self._position = seconds
        if duration is not None:
            self._duration = duration

    def _sample_progress(self):
        # Tests script progress explicitly
        if not self.auto_progress:
            return None
        return super()._sample_progress()

    def emit_progress(self, current, total):
        self._report(MediaProgress(current, total))
        self.poll()

    def emit_ended(self):
        self._state = OutputState.STOPPED
        self._report(MediaEnded(source_uri=self._current_source))
        self.poll()

    def command_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def media_output():
    return FakeMediaOutput()


@pytest.fixture
def event_bus():
    from core.event_bus import EventBus

    bus = EventBus()
    yield bus
    bus.clear()


@pytest.fixture
def player(media_output, event_bus):
    from services.player_service import PlayerService

    return PlayerService(media_output=media_output, event_bus=event_bus)


@pytest.fixture
def make_track():
    from models.track import Track

    def _make(track_id="t1", duration=200, **kwargs):
        return Track(
            id=track_id,
            title=kwargs.pop("title", f"Song {track_id}"),
            artist=kwargs.pop("artist", "Test Artist"),
            album=kwargs.pop("album", "Test Album"),
            duration_seconds=duration,
            audio_source_uri=kwargs.pop("audio_source_uri", f"https://cdn.example.com/{track_id}.mp3"),
            **kwargs,
        )

    return _make
