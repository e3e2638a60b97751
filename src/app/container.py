# -*- coding: utf-8 -*-
"""
Application Container Module

Defines the per-session dependency container, holding all service instances centrally.

Design Principles:
- One container per client session; nothing is looked up from module globals
- Consumers receive the services they need (usually just the player) explicitly
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.protocols import IConfigService, IDatabase, IEventBus, IMediaOutput
    from services.likes_service import LikesService
    from services.player_service import PlayerService


@dataclass
class AppContainer:
    """Session Dependency Container

    Composition root output: exactly one media output and one player per session.

    Usage Example:
        container = AppContainerFactory.create()
        container.player.play_track(track)
        ...
        container.cleanup()
    """

    config: "IConfigService"
    event_bus: "IEventBus"
    db: "IDatabase"
    media_output: "IMediaOutput"
    player: "PlayerService"
    likes: "LikesService"

    _play_history: Any = field(default=None, repr=False)

    @property
    def play_history(self) -> Any:
        """Play history recorder (attached to the event bus)"""
        return self._play_history

    def cleanup(self) -> None:
        """Clean up all resources

        Should be called when the session ends.
        """
        if self._play_history is not None:
            self._play_history.shutdown()

        # Releases the media output as well
        self.player.cleanup()

        if hasattr(self.event_bus, 'clear'):
            self.event_bus.clear()

        if hasattr(self.db, 'close'):
            self.db.close()
