# -*- coding: utf-8 -*-
"""
Container Factory Module

Responsible for creating and assembling all session dependencies.

This is the **only** instance creation point (Composition Root) for a session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.container import AppContainer
    from core.ports.audio import IMediaOutput

logger = logging.getLogger(__name__)


class AppContainerFactory:
    """Session Container Factory

    Usage Example:
        # In main.py
        container = AppContainerFactory.create()

        # In tests (fake media output, in-memory database)
        container = AppContainerFactory.create_for_testing(media_output=FakeMediaOutput())
    """

    @staticmethod
    def create(
        config_path: str = "config/default_config.yaml",
        backend: Optional[str] = None,
    ) -> "AppContainer":
        """Create a session container

        Creates all service instances in dependency order and assembles them.

        Args:
            config_path: Configuration file path
            backend: Media backend name, overriding audio.backend

        Returns:
            A configured AppContainer instance

        Raises:
            RuntimeError: If no media backend is available
        """
        from core.database import DatabaseManager
        from core.engine_factory import MediaOutputFactory
        from services.config_service import ConfigService

        logger.info("Creating session container...")

        # === 1. Infrastructure Layer ===
        config = ConfigService(config_path)
        db = DatabaseManager(config.get("storage.db_path") or None)

        # === 2. Media Output ===
        backend = backend or config.get("audio.backend", "vlc")
        try:
            media_output = MediaOutputFactory.create(backend)
        except RuntimeError as e:
            logger.error("Failed to create media output: %s", e)
            db.close()
            raise

        container = AppContainerFactory._assemble(config, db, media_output)
        logger.info("Session container creation complete (backend: %s)", media_output.get_engine_name())
        return container

    @staticmethod
    def create_for_testing(
        media_output: "IMediaOutput",
        config_path: Optional[str] = None,
        db_path: str = ":memory:",
    ) -> "AppContainer":
        """Create a container for testing

        Uses an injected media output, an in-memory database and the built-in
        configuration defaults unless a config path is given.
        """
        from core.database import DatabaseManager
        from services.config_service import ConfigService

        # Without a path only the built-in defaults apply; the user's file is never read
        config = ConfigService(config_path, load_files=config_path is not None)
        db = DatabaseManager(db_path)
        return AppContainerFactory._assemble(config, db, media_output)

    @staticmethod
    def _assemble(config, db, media_output) -> "AppContainer":
        from app.container import AppContainer
        from core.event_bus import EventBus
        from services.likes_service import LikesService
        from services.play_history_service import PlayHistoryService
        from services.player_service import PlayerService

        event_bus = EventBus()
        user_id = str(config.get("session.user_id", "local"))

        # === Service Layer ===
        player = PlayerService(media_output=media_output, event_bus=event_bus, config=config)
        likes = LikesService(db=db, event_bus=event_bus, user_id=user_id)

        play_history = PlayHistoryService(db=db, event_bus=event_bus, user_id=user_id, config=config)
        play_history.attach()

        return AppContainer(
            config=config,
            event_bus=event_bus,
            db=db,
            media_output=media_output,
            player=player,
            likes=likes,
            _play_history=play_history,
        )
