# -*- coding: utf-8 -*-
"""
Protocols Definition Module

Defines the interface protocols (Protocol) for the session's services.
Uses Protocol instead of ABC to support structural subtyping checks.

Design Decisions:
- Default to using Protocol + @runtime_checkable
- ABC is only used for base classes that share default implementations (e.g., MediaOutputBase)
"""

from __future__ import annotations

from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Optional,
    Protocol,
    Set,
    Tuple,
    runtime_checkable,
)

# Re-export infrastructure interfaces from core.ports
from core.ports.audio import IMediaOutput
from core.ports.database import IDatabase

if TYPE_CHECKING:
    from models.track import Track
    from services.player_service import PlaybackState


# =============================================================================
# Event Bus Protocol
# =============================================================================

@runtime_checkable
class IEventBus(Protocol):
    """Event Bus Interface"""

    def subscribe(
        self,
        event_type: Enum,
        callback: Callable[[Any], None]
    ) -> str:
        """Subscribe to an event, returning the subscription ID"""
        ...

    def unsubscribe(self, subscription_id: str) -> bool:
        """Unsubscribe from an event"""
        ...

    def publish_sync(
        self,
        event_type: Enum,
        data: Any = None,
        timeout: Optional[float] = None
    ) -> bool:
        """Publish an event synchronously"""
        ...

    def clear(self) -> None:
        """Drop all subscriptions"""
        ...


# =============================================================================
# Configuration Service Protocol
# =============================================================================

@runtime_checkable
class IConfigService(Protocol):
    """Configuration Service Interface"""

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value (dot-separated nested keys)"""
        ...

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value"""
        ...

    def save(self) -> bool:
        """Save configuration to file"""
        ...


# =============================================================================
# Player Service Protocol
# =============================================================================

@runtime_checkable
class IPlayerService(Protocol):
    """Player Service Interface (the surface UI components are given)"""

    @property
    def current_track(self) -> Optional["Track"]:
        ...

    @property
    def is_playing(self) -> bool:
        ...

    @property
    def volume_percent(self) -> int:
        ...

    @property
    def progress_percent(self) -> float:
        ...

    @property
    def queue_snapshot(self) -> Tuple["Track", ...]:
        ...

    @property
    def state(self) -> "PlaybackState":
        ...

    def play_track(self, track: "Track") -> None:
        ...

    def pause_track(self) -> None:
        ...

    def resume_track(self) -> None:
        ...

    def toggle_play(self) -> None:
        ...

    def next_track(self) -> Optional["Track"]:
        ...

    def prev_track(self) -> None:
        ...

    def seek_percent(self, percent: float) -> None:
        ...

    def set_volume(self, percent: float) -> None:
        ...

    def enqueue(self, track: "Track") -> None:
        ...

    def remove_from_queue(self, track_id: str) -> bool:
        ...

    def remove_from_queue_at(self, position: int) -> Optional["Track"]:
        ...

    def clear_queue(self) -> None:
        ...


# =============================================================================
# Likes Service Protocol
# =============================================================================

@runtime_checkable
class ILikesService(Protocol):
    """Likes Service Interface"""

    def is_liked(self, track_id: str) -> bool:
        ...

    def liked_ids(self) -> Set[str]:
        ...

    def toggle(self, track_id: str) -> bool:
        """Flip the like state, returning the new state"""
        ...


__all__ = [
    "IConfigService",
    "IDatabase",
    "IEventBus",
    "ILikesService",
    "IMediaOutput",
    "IPlayerService",
]
