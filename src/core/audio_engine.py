"""
Media Output Module - Core for Audio Output

Provides the shared event plumbing for media outputs and the pygame backend.
Backends report progress, end-of-media and failures as typed events; those
events are queued and only handed to listeners from poll(), so they run on
the same thread as the player's commands.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname
import threading
import logging

from core.ports.audio import (
    MediaEnded,
    MediaError,
    MediaErrorKind,
    MediaEvent,
    MediaListener,
    MediaProgress,
    OutputState,
)

logger = logging.getLogger(__name__)


def resolve_local_path(source_uri: str) -> Optional[str]:
    """
    Map a source locator to a local file path

    Returns:
        The path for plain paths and file:// URIs, None for network URIs
    """
    parsed = urlparse(source_uri)
    if parsed.scheme == "file":
        return url2pathname(unquote(parsed.path))
    # Single-letter schemes are Windows drive letters
    if parsed.scheme and len(parsed.scheme) > 1:
        return None
    return source_uri


class MediaOutputBase(ABC):
    """
    Abstract Base Class for Media Outputs

    Defines the output interface and owns the listener list and the
    pending-event queue. Backend threads may call _report(); listeners are
    only invoked from poll().
    """

    def __init__(self):
        self._state: OutputState = OutputState.IDLE
        self._volume: float = 1.0
        self._current_source: Optional[str] = None
        self._listeners: List[MediaListener] = []
        self._pending: Deque[MediaEvent] = deque()
        self._pending_lock = threading.Lock()
        # Bumped on every load; events drained under an older generation are dropped
        self._generation: int = 0

    @staticmethod
    def probe() -> bool:
        """
        Check if backend dependencies are available (without touching output state)

        Subclasses should only check that their libraries can be imported.

        Returns:
            bool: True if dependencies are available
        """
        return False

    @property
    def state(self) -> OutputState:
        """Get the current output state"""
        return self._state

    @property
    def volume(self) -> float:
        """Get the current volume"""
        return self._volume

    @property
    def current_source(self) -> Optional[str]:
        """Get the currently bound source locator"""
        return self._current_source

    # ===== Event plumbing =====

    def subscribe(self, listener: MediaListener) -> None:
        """Register a media event listener"""
        self._listeners.append(listener)

    def _report(self, event: MediaEvent) -> None:
        """Queue an event for delivery on the next poll() (thread-safe)"""
        with self._pending_lock:
            self._pending.append(event)

    def _report_error(self, kind: MediaErrorKind, message: str) -> None:
        logger.warning("%s: %s (%s)", kind.value, message, self._current_source)
        self._report(MediaError(kind=kind, source_uri=self._current_source, message=message))

    def _begin_load(self, source_uri: str) -> None:
        """Forget the previous source: drop its undelivered events and rebind"""
        with self._pending_lock:
            self._pending.clear()
            self._generation += 1
        self._current_source = source_uri

    def _is_stale(self, event: MediaEvent) -> bool:
        if isinstance(event, (MediaEnded, MediaError)):
            return event.source_uri != self._current_source
        return False

    def poll(self) -> None:
        """
        Deliver pending events to listeners

        Checks for end-of-media, then hands queued events plus one progress
        sample (while playing) to listeners. If a listener binds a new source,
        the rest of the batch is discarded.
        """
        self._check_if_ended()

        with self._pending_lock:
            events = list(self._pending)
            self._pending.clear()
            generation = self._generation

        sample = self._sample_progress()
        if sample is not None:
            events.append(sample)

        for event in events:
            if self._generation != generation:
                break
            if self._is_stale(event):
                logger.debug("Dropping stale media event: %s", event)
                continue
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception as e:
                    logger.error("Media event listener error: %s", e)

    # ===== Output commands =====

    @abstractmethod
    def load(self, source_uri: str) -> bool:
        """
        Bind a source

        Args:
            source_uri: Local path or URI of the audio

        Returns:
            bool: True if the source was bound
        """
        pass

    @abstractmethod
    def play(self) -> bool:
        """
        Start or resume output

        Returns:
            bool: True if output started
        """
        pass

    @abstractmethod
    def pause(self) -> None:
        """Pause output"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop output"""
        pass

    @abstractmethod
    def seek(self, position_seconds: float) -> None:
        """
        Seek to a specified position

        Args:
            position_seconds: Target position in seconds
        """
        pass

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """
        Set the volume

        Args:
            volume: Volume value (0.0 - 1.0)
        """
        pass

    @property
    @abstractmethod
    def position(self) -> float:
        """Current playback position in seconds"""
        pass

    @property
    @abstractmethod
    def duration(self) -> float:
        """Duration of the bound source in seconds"""
        pass

    def _check_if_ended(self) -> None:
        """Hook for backends that detect end-of-media by polling"""
        pass

    def _sample_progress(self) -> Optional[MediaProgress]:
        """Progress report for this poll, only while playing"""
        if self._state != OutputState.PLAYING:
            return None
        return MediaProgress(self.position, self.duration)

    def get_engine_name(self) -> str:
        """
        Get the backend name

        Returns:
            str: Backend identifier name
        """
        return "base"

    def cleanup(self) -> None:
        """Release resources"""
        self._listeners.clear()


class PygameMediaOutput(MediaOutputBase):
    """
    Media output based on pygame.mixer.music

    Plays local files and file:// URIs. Duration comes from mutagen;
    end-of-media is detected by polling the mixer.
    """

    _initialized = False
    _mixer_refcount = 0
    _lock = threading.Lock()

    @staticmethod
    def probe() -> bool:
        """Check if pygame dependency is available (without initializing mixer)"""
        try:
            import pygame
            return hasattr(pygame, 'mixer')
        except ImportError:
            return False

    def __init__(self):
        super().__init__()
        self._duration_seconds: float = 0.0
        # pygame's get_pos() counts from the last play(); seeking restarts from here
        self._offset_seconds: float = 0.0
        self._playback_started = False
        self._cleaned_up = False

        self._acquire_mixer()

    def _acquire_mixer(self) -> None:
        """Initialize the global pygame mixer with reference counting."""
        with PygameMediaOutput._lock:
            if not PygameMediaOutput._initialized:
                try:
                    import pygame
                    pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=2048)
                    PygameMediaOutput._initialized = True
                except Exception as e:
                    logger.error("Pygame initialization failed: %s", e)
                    self._state = OutputState.ERROR
                    return

            PygameMediaOutput._mixer_refcount += 1

    def load(self, source_uri: str) -> bool:
        """Bind a local audio file"""
        import pygame

        if self._state in (OutputState.PLAYING, OutputState.PAUSED):
            pygame.mixer.music.stop()

        self._begin_load(source_uri)
        self._offset_seconds = 0.0
        self._duration_seconds = 0.0
        self._playback_started = False

        path = resolve_local_path(source_uri)
        if path is None:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.LOAD_FAILURE, "pygame backend only plays local files")
            return False

        try:
            pygame.mixer.music.load(path)
        except Exception as e:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.LOAD_FAILURE, f"Failed to load file: {e}")
            return False

        self._duration_seconds = self._get_duration_from_file(path)
        self._state = OutputState.STOPPED
        return True

    def _get_duration_from_file(self, file_path: str) -> float:
        """Get duration from file tags"""
        try:
            from mutagen import File
            audio = File(file_path)
            if audio and audio.info:
                return float(audio.info.length)
        except Exception as e:
            logger.debug("Could not read duration of %s: %s", file_path, e)
        return 0.0

    def play(self) -> bool:
        """Start or resume output"""
        import pygame

        if self._state == OutputState.PAUSED:
            pygame.mixer.music.unpause()
            self._state = OutputState.PLAYING
            return True

        if self._state != OutputState.STOPPED:
            self._report_error(MediaErrorKind.PLAY_REJECTED, "No playable source bound")
            return False

        try:
            pygame.mixer.music.play(start=self._offset_seconds)
        except Exception as e:
            self._state = OutputState.ERROR
            self._report_error(MediaErrorKind.PLAY_REJECTED, f"Playback failed: {e}")
            return False

        self._state = OutputState.PLAYING
        self._playback_started = True
        return True

    def pause(self) -> None:
        """Pause output"""
        import pygame

        if self._state == OutputState.PLAYING:
            pygame.mixer.music.pause()
            self._state = OutputState.PAUSED

    def stop(self) -> None:
        """Stop output"""
        import pygame

        pygame.mixer.music.stop()
        self._offset_seconds = 0.0
        if self._state != OutputState.ERROR:
            self._state = OutputState.STOPPED
        self._playback_started = False

    def seek(self, position_seconds: float) -> None:
        """Seek by restarting the stream at the target offset"""
        import pygame

        self._offset_seconds = max(0.0, position_seconds)
        if self._state not in (OutputState.PLAYING, OutputState.PAUSED):
            return

        was_paused = self._state == OutputState.PAUSED
        try:
            pygame.mixer.music.play(start=self._offset_seconds)
            if was_paused:
                pygame.mixer.music.pause()
        except Exception as e:
            logger.warning("Seek failed: %s", e)

    def set_volume(self, volume: float) -> None:
        """Set the volume"""
        import pygame

        self._volume = max(0.0, min(1.0, volume))
        try:
            pygame.mixer.music.set_volume(self._volume)
        except Exception as e:
            logger.warning("Failed to set volume: %s", e)

    @property
    def position(self) -> float:
        """Current playback position in seconds"""
        import pygame

        if self._state in (OutputState.PLAYING, OutputState.PAUSED):
            elapsed_ms = max(0, pygame.mixer.music.get_pos())
            return self._offset_seconds + elapsed_ms / 1000.0
        return self._offset_seconds

    @property
    def duration(self) -> float:
        return self._duration_seconds

    def _check_if_ended(self) -> None:
        """Detect end-of-media by polling the mixer"""
        import pygame

        if not (self._playback_started and self._state == OutputState.PLAYING):
            return

        try:
            busy = pygame.mixer.music.get_busy()
        except Exception as e:
            logger.warning("Pygame mixer not initialized, cannot check playback status: %s", e)
            self._state = OutputState.ERROR
            self._playback_started = False
            return

        if not busy:
            self._state = OutputState.STOPPED
            self._playback_started = False
            self._offset_seconds = 0.0
            self._report(MediaEnded(source_uri=self._current_source))

    def cleanup(self) -> None:
        """Release the mixer"""
        import pygame

        super().cleanup()
        with PygameMediaOutput._lock:
            if self._cleaned_up:
                return
            self._cleaned_up = True

            if PygameMediaOutput._mixer_refcount > 0:
                PygameMediaOutput._mixer_refcount -= 1

            should_quit = PygameMediaOutput._initialized and PygameMediaOutput._mixer_refcount == 0

        try:
            pygame.mixer.music.stop()
        except Exception as e:
            logger.debug("Pygame stop during cleanup failed: %s", e)

        if should_quit:
            try:
                pygame.mixer.quit()
            except Exception as e:
                logger.warning("Pygame cleanup failed: %s", e)
            finally:
                with PygameMediaOutput._lock:
                    PygameMediaOutput._initialized = False

    def get_engine_name(self) -> str:
        return "pygame"
