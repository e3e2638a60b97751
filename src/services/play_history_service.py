"""
Play History Service

Records every track start for the session's user and keeps per-track play counts.

Supports:
- Automatic recording while attached to the event bus (TRACK_STARTED)
- Recent-history lookup, most recent first
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, List, Optional

from core.event_bus import EventBus, EventType
from core.ports.database import IDatabase
from models.track import Track

logger = logging.getLogger(__name__)


class PlayHistoryService:
    DEFAULT_RECENT_LIMIT = 50

    def __init__(
        self,
        db: IDatabase,
        event_bus: EventBus,
        user_id: str = "local",
        config: Optional[Any] = None,
    ):
        self._db = db
        self._event_bus = event_bus
        self._user_id = user_id

        self._enabled = True
        self._recent_limit = self.DEFAULT_RECENT_LIMIT
        if config is not None:
            self._enabled = bool(config.get("history.enabled", True))
            self._recent_limit = int(config.get("history.recent_limit", self.DEFAULT_RECENT_LIMIT))

        self._sub_id: Optional[str] = None

    def attach(self) -> None:
        """Start recording plays published on the event bus."""
        if not self._enabled or self._sub_id is not None:
            return
        self._sub_id = self._event_bus.subscribe(EventType.TRACK_STARTED, self._on_track_started)

    def shutdown(self) -> None:
        """Stop recording."""
        if self._sub_id is not None:
            self._event_bus.unsubscribe(self._sub_id)
            self._sub_id = None

    def record_play(self, track_id: str) -> bool:
        """Record one play of a track and bump its counter."""
        try:
            with self._db.transaction():
                self._db.execute(
                    "INSERT INTO play_history(user_id, track_id) VALUES(?, ?)",
                    (self._user_id, track_id),
                )
                self._db.execute(
                    "INSERT INTO track_play_counts(track_id, play_count) VALUES(?, 1) "
                    "ON CONFLICT(track_id) DO UPDATE SET play_count = play_count + 1",
                    (track_id,),
                )
        except sqlite3.Error:
            logger.error("Failed to record play: track_id=%s", track_id, exc_info=True)
            return False

        self._event_bus.publish_sync(EventType.PLAY_RECORDED, track_id)
        return True

    def get_play_count(self, track_id: str) -> int:
        row = self._db.fetch_one(
            "SELECT play_count FROM track_play_counts WHERE track_id = ?",
            (track_id,),
        )
        return int(row["play_count"]) if row else 0

    def recent_track_ids(self, limit: Optional[int] = None) -> List[str]:
        """Distinct recently played track ids, most recent first."""
        limit = self._recent_limit if limit is None else limit
        rows = self._db.fetch_all(
            "SELECT track_id, MAX(id) AS last_id FROM play_history "
            "WHERE user_id = ? GROUP BY track_id ORDER BY last_id DESC LIMIT ?",
            (self._user_id, limit),
        )
        return [row["track_id"] for row in rows]

    def _on_track_started(self, track: Any) -> None:
        if isinstance(track, Track):
            self.record_play(track.id)
