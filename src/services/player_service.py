"""
Playback Service Module

Manages the playback queue, playback state, and playback control for one session.
"""

from typing import Any, Callable, Optional, Tuple
from dataclasses import dataclass
from enum import Enum
import logging
import math

from core.event_bus import EventBus, EventType
from core.ports.audio import IMediaOutput, MediaEnded, MediaError, MediaEvent, MediaProgress
from models.track import Track
from services.queue_store import QueueStore

logger = logging.getLogger(__name__)

DEFAULT_VOLUME_PERCENT = 70
DEFAULT_RESTART_THRESHOLD_SECONDS = 3.0


class PlayerStatus(Enum):
    """Derived player status"""
    IDLE = "idle"                      # Nothing loaded
    LOADED_PAUSED = "loaded_paused"
    LOADED_PLAYING = "loaded_playing"


@dataclass(frozen=True)
class PlaybackState:
    """Playback state snapshot"""
    current_track: Optional[Track] = None
    is_playing: bool = False
    volume_percent: int = DEFAULT_VOLUME_PERCENT
    progress_percent: float = 0.0
    queue: Tuple[Track, ...] = ()

    @property
    def status(self) -> PlayerStatus:
        if self.current_track is None:
            return PlayerStatus.IDLE
        if self.is_playing:
            return PlayerStatus.LOADED_PLAYING
        return PlayerStatus.LOADED_PAUSED


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class PlayerService:
    """
    Playback Service

    The session's playback controller: owns the current track, the play/pause
    intent, volume, progress and the queue, and drives exactly one media output.

    is_playing records the user's intent to play. A failed play() is logged and
    published as ERROR_OCCURRED but does not flip is_playing back; the next
    explicit resume_track() reconciles it.

    Example:
        player = PlayerService(media_output, event_bus)

        player.enqueue(track_b)
        player.play_track(track_a)

        # Skip to the next queued track
        player.next_track()
    """

    def __init__(
        self,
        media_output: IMediaOutput,
        event_bus: EventBus,
        config: Optional[Any] = None,
    ):
        self._output = media_output
        self._event_bus = event_bus

        default_volume = DEFAULT_VOLUME_PERCENT
        self._restart_threshold = DEFAULT_RESTART_THRESHOLD_SECONDS
        if config is not None:
            default_volume = config.get("playback.default_volume", DEFAULT_VOLUME_PERCENT)
            self._restart_threshold = float(
                config.get("playback.restart_threshold_seconds", DEFAULT_RESTART_THRESHOLD_SECONDS)
            )

        self._current_track: Optional[Track] = None
        self._is_playing: bool = False
        self._volume_percent: int = self._clamp_volume(default_volume)
        self._progress_percent: float = 0.0
        self._queue = QueueStore()

        self._call_output("set_volume", self._output.set_volume, self._volume_percent / 100)
        self._output.subscribe(self._on_media_event)

    # ===== Read accessors =====

    @property
    def current_track(self) -> Optional[Track]:
        """Get current track"""
        return self._current_track

    @property
    def is_playing(self) -> bool:
        """Whether playback is intended to be progressing"""
        return self._is_playing

    @property
    def volume_percent(self) -> int:
        return self._volume_percent

    @property
    def progress_percent(self) -> float:
        return self._progress_percent

    @property
    def queue_snapshot(self) -> Tuple[Track, ...]:
        """Read-only copy of the queue"""
        return self._queue.snapshot()

    @property
    def state(self) -> PlaybackState:
        """Get current playback state"""
        return PlaybackState(
            current_track=self._current_track,
            is_playing=self._is_playing,
            volume_percent=self._volume_percent,
            progress_percent=self._progress_percent,
            queue=self._queue.snapshot(),
        )

    # ===== Playback commands =====

    def play_track(self, track: Track) -> None:
        """
        Load and play a track, replacing the current one

        Args:
            track: Track to play
        """
        self._call_output("load", self._output.load, track.audio_source_uri)
        self._call_output("play", self._output.play)

        self._current_track = track
        self._is_playing = True
        self._progress_percent = 0.0

        logger.info("Playing: %s", track.display_name)
        self._event_bus.publish_sync(EventType.TRACK_STARTED, track)
        self._publish_state()

    def pause_track(self) -> None:
        """Pause playback"""
        if self._current_track is None:
            return

        was_playing = self._is_playing
        self._call_output("pause", self._output.pause)
        self._is_playing = False

        if was_playing:
            self._event_bus.publish_sync(EventType.TRACK_PAUSED, self._current_track)
        self._publish_state()

    def resume_track(self) -> None:
        """Resume playback"""
        if self._current_track is None:
            return

        self._call_output("play", self._output.play)
        self._is_playing = True

        self._event_bus.publish_sync(EventType.TRACK_RESUMED, self._current_track)
        self._publish_state()

    def toggle_play(self) -> None:
        """Toggle play/pause"""
        if self._is_playing:
            self.pause_track()
        else:
            self.resume_track()

    def next_track(self) -> Optional[Track]:
        """
        Advance to the next queued track

        With an empty queue playback stops and the player becomes idle.

        Returns:
            Track: The track now playing, or None if the queue was empty
        """
        upcoming = self._queue.dequeue_front()
        if upcoming is not None:
            self._event_bus.publish_sync(EventType.QUEUE_CHANGED, self._queue.snapshot())
            self.play_track(upcoming)
            return upcoming

        previous = self._current_track
        self._call_output("pause", self._output.pause)
        self._current_track = None
        self._is_playing = False
        self._progress_percent = 0.0

        if previous is not None:
            self._event_bus.publish_sync(EventType.PLAYBACK_STOPPED, {
                "track": previous,
                "reason": "queue_exhausted",
            })
        self._publish_state()
        return None

    def prev_track(self) -> None:
        """
        Restart the current track if it has played past the restart threshold

        Earlier than that this is a no-op; no backward history is kept.
        """
        if self._current_track is None:
            return

        position = self._call_output("position", lambda: self._output.position) or 0.0
        if position > self._restart_threshold:
            self._call_output("seek", self._output.seek, 0.0)
            self._progress_percent = 0.0
            self._publish_position(0.0, self._current_duration())
        self._publish_state()

    def seek_percent(self, percent: float) -> None:
        """
        Seek to a fraction of the current track

        Args:
            percent: Target position as a percentage (clamped to 0 - 100)
        """
        if self._current_track is None:
            return

        if math.isnan(percent):
            logger.warning("Seek ignored, invalid percent: %r", percent)
            return

        duration = self._current_duration()
        if duration <= 0:
            logger.debug("Seek ignored, duration unknown: %s", self._current_track.display_name)
            return

        percent = _clamp(percent, 0.0, 100.0)
        position = duration * percent / 100
        self._call_output("seek", self._output.seek, position)
        self._progress_percent = percent
        self._publish_position(position, duration)
        self._publish_state()

    def set_volume(self, percent: float) -> None:
        """
        Set volume

        Args:
            percent: Volume percentage; values outside 0 - 100 are clamped
        """
        self._volume_percent = self._clamp_volume(percent, fallback=self._volume_percent)
        self._call_output("set_volume", self._output.set_volume, self._volume_percent / 100)

        self._event_bus.publish_sync(EventType.VOLUME_CHANGED, self._volume_percent)
        self._publish_state()

    # ===== Queue commands =====

    def enqueue(self, track: Track) -> None:
        """Add track to end of queue"""
        self._queue.enqueue(track)
        self._publish_queue()

    def remove_from_queue(self, track_id: str) -> bool:
        """
        Remove the first queued occurrence of a track

        Returns:
            bool: Whether a track was removed
        """
        removed = self._queue.remove(track_id)
        self._publish_queue()
        return removed

    def remove_from_queue_at(self, position: int) -> Optional[Track]:
        """Remove the queued track at a position (0 is next up)"""
        removed = self._queue.remove_at(position)
        self._publish_queue()
        return removed

    def clear_queue(self) -> None:
        """Clear queue (the current track keeps playing)"""
        self._queue.clear()
        self._publish_queue()

    # ===== Media output notifications =====

    def _on_media_event(self, event: MediaEvent) -> None:
        """Route typed media events through the transition table"""
        if isinstance(event, MediaProgress):
            self._on_progress(event)
        elif isinstance(event, MediaEnded):
            self._on_ended(event)
        elif isinstance(event, MediaError):
            self._on_error(event)
        else:
            logger.debug("Ignoring unknown media event: %r", event)

    def _on_progress(self, event: MediaProgress) -> None:
        if self._current_track is None:
            return

        if event.total_seconds > 0:
            percent = 100 * event.current_seconds / event.total_seconds
            # A NaN sample keeps the last known progress
            if not math.isnan(percent):
                self._progress_percent = _clamp(percent, 0.0, 100.0)
        else:
            self._progress_percent = 0.0

        self._publish_position(event.current_seconds, event.total_seconds)
        self._publish_state()

    def _on_ended(self, event: MediaEnded) -> None:
        """Auto-advance: end-of-media takes the same path as an explicit skip"""
        ended_track = self._current_track
        if ended_track is None:
            return

        self._event_bus.publish_sync(EventType.TRACK_ENDED, {
            "track": ended_track,
            "reason": "ended",
        })
        self.next_track()

    def _on_error(self, event: MediaError) -> None:
        logger.warning(
            "Media output reported %s for %s: %s",
            event.kind.value, event.source_uri, event.message,
        )
        self._event_bus.publish_sync(EventType.ERROR_OCCURRED, {
            "source": "PlayerService",
            "kind": event.kind,
            "error": event.message,
            "track": self._current_track,
        })

    # ===== Helpers =====

    @staticmethod
    def _clamp_volume(percent: float, fallback: int = DEFAULT_VOLUME_PERCENT) -> int:
        try:
            value = float(percent)
        except (TypeError, ValueError):
            value = math.nan
        if math.isnan(value):
            logger.warning("Invalid volume %r, using %d", percent, fallback)
            return fallback
        return int(round(_clamp(value, 0.0, 100.0)))

    def _current_duration(self) -> float:
        duration = self._call_output("duration", lambda: self._output.duration) or 0.0
        if duration <= 0 and self._current_track is not None:
            duration = self._current_track.duration_seconds
        return duration

    def _call_output(self, action: str, func: Callable, *args) -> Any:
        """Call the media output; a failure is logged, never raised"""
        try:
            return func(*args)
        except Exception as e:
            logger.error("Media output %s failed: %s", action, e)
            self._event_bus.publish_sync(EventType.ERROR_OCCURRED, {
                "source": "PlayerService",
                "kind": None,
                "error": f"{action} failed: {e}",
                "track": self._current_track,
            })
            return None

    def _publish_position(self, position: float, duration: float) -> None:
        self._event_bus.publish_sync(EventType.POSITION_CHANGED, {
            "position": position,
            "duration": duration,
            "percent": self._progress_percent,
        })

    def _publish_queue(self) -> None:
        self._event_bus.publish_sync(EventType.QUEUE_CHANGED, self._queue.snapshot())
        self._publish_state()

    def _publish_state(self) -> None:
        self._event_bus.publish_sync(EventType.STATE_CHANGED, self.state)

    def cleanup(self) -> None:
        """Clean up resources"""
        self._call_output("pause", self._output.pause)
        self._queue.clear()
        self._current_track = None
        self._is_playing = False
        self._progress_percent = 0.0
        self._call_output("cleanup", self._output.cleanup)
