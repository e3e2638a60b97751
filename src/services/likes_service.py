"""Likes Service

Keeps the session's liked-track set in sync with persistent storage,
backing the heart toggle next to each track.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional, Set

from core.event_bus import EventBus, EventType
from core.ports.database import IDatabase

logger = logging.getLogger(__name__)


class LikesService:
    """Likes Service

    Storage is written first; the local set only changes once the write
    succeeded. A storage failure is logged and leaves the local state as it was.
    """

    def __init__(self, db: IDatabase, event_bus: Optional[EventBus] = None, user_id: str = "local"):
        self._db = db
        self._event_bus = event_bus
        self._user_id = user_id
        self._liked: Set[str] = set()
        self._loaded = False

    @property
    def user_id(self) -> str:
        return self._user_id

    def load(self) -> Set[str]:
        """Fetch the persisted liked ids into the local cache"""
        try:
            rows = self._db.fetch_all(
                "SELECT track_id FROM track_likes WHERE user_id = ?",
                (self._user_id,),
            )
        except sqlite3.Error:
            logger.error("Failed to fetch liked tracks: user=%s", self._user_id, exc_info=True)
            return set(self._liked)

        self._liked = {row["track_id"] for row in rows}
        self._loaded = True
        return set(self._liked)

    def liked_ids(self) -> Set[str]:
        """Get all liked track ids"""
        if not self._loaded:
            self.load()
        return set(self._liked)

    def is_liked(self, track_id: str) -> bool:
        """Check if a track is liked"""
        return track_id in self.liked_ids()

    def like(self, track_id: str) -> bool:
        """Like a track (no-op if already liked)

        Returns:
            bool: Whether the track is liked afterwards
        """
        if self.is_liked(track_id):
            return True
        try:
            self._db.execute(
                "INSERT OR IGNORE INTO track_likes(user_id, track_id) VALUES(?, ?)",
                (self._user_id, track_id),
            )
        except sqlite3.Error:
            logger.error("Failed to like track: track_id=%s", track_id, exc_info=True)
            return False

        self._liked.add(track_id)
        self._publish(track_id, True)
        return True

    def unlike(self, track_id: str) -> bool:
        """Unlike a track (no-op if not liked)

        Returns:
            bool: Whether the track is liked afterwards
        """
        if not self.is_liked(track_id):
            return False
        try:
            self._db.delete(
                "track_likes",
                "user_id = ? AND track_id = ?",
                (self._user_id, track_id),
            )
        except sqlite3.Error:
            logger.error("Failed to unlike track: track_id=%s", track_id, exc_info=True)
            return True

        self._liked.discard(track_id)
        self._publish(track_id, False)
        return False

    def toggle(self, track_id: str) -> bool:
        """Flip the like state of a track

        Returns:
            bool: The like state after the toggle
        """
        if self.is_liked(track_id):
            return self.unlike(track_id)
        return self.like(track_id)

    def _publish(self, track_id: str, liked: bool) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish_sync(EventType.LIKES_CHANGED, {
            "track_id": track_id,
            "liked": liked,
        })
