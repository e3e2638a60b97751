# -*- coding: utf-8 -*-
"""
Media Output Port Interface

Defines the contract between the playback controller and the platform object
that actually produces sound, plus the typed events that object reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Union, runtime_checkable


class OutputState(Enum):
    """Media output status"""
    IDLE = "idle"
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


class MediaErrorKind(Enum):
    """Failure categories reported by a media output"""
    LOAD_FAILURE = "load_failure"      # Source could not be resolved/bound
    PLAY_REJECTED = "play_rejected"    # Platform refused to start output


@dataclass(frozen=True)
class MediaProgress:
    """Playback position report"""
    current_seconds: float
    total_seconds: float


@dataclass(frozen=True)
class MediaEnded:
    """Output reached the end of the bound source"""
    source_uri: Optional[str]


@dataclass(frozen=True)
class MediaError:
    """Asynchronous failure report"""
    kind: MediaErrorKind
    source_uri: Optional[str]
    message: str = ""


MediaEvent = Union[MediaProgress, MediaEnded, MediaError]
MediaListener = Callable[[MediaEvent], None]


@runtime_checkable
class IMediaOutput(Protocol):
    """Media Output Interface

    Exactly one source is bound at a time. Commands never raise; failures
    are reported as MediaError events. Events are delivered to listeners
    only from poll(), on the thread that calls it.
    Current implementations: VLCMediaOutput, PygameMediaOutput
    """

    @property
    def state(self) -> OutputState:
        """Current output state"""
        ...

    @property
    def volume(self) -> float:
        """Current volume (0.0 - 1.0)"""
        ...

    @property
    def position(self) -> float:
        """Current playback position in seconds"""
        ...

    @property
    def duration(self) -> float:
        """Duration of the bound source in seconds (0 if unknown)"""
        ...

    def load(self, source_uri: str) -> bool:
        """Bind a new source

        Stops prior playback, resets the position to 0 and drops any
        undelivered events of the previous source.

        Returns:
            True if the source was bound
        """
        ...

    def play(self) -> bool:
        """Begin or resume output from the current position"""
        ...

    def pause(self) -> None:
        """Halt output, keeping the position"""
        ...

    def seek(self, position_seconds: float) -> None:
        """Move to a position in seconds"""
        ...

    def set_volume(self, volume: float) -> None:
        """Set volume

        Args:
            volume: Volume fraction (0.0 - 1.0)
        """
        ...

    def subscribe(self, listener: MediaListener) -> None:
        """Register a listener for MediaProgress/MediaEnded/MediaError"""
        ...

    def poll(self) -> None:
        """Deliver pending events and a progress sample to listeners"""
        ...

    def get_engine_name(self) -> str:
        """Get the backend name"""
        ...

    def cleanup(self) -> None:
        """Release backend resources"""
        ...
