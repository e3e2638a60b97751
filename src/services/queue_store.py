"""
Playback Queue Store

Ordered FIFO of tracks waiting to be played after the current one.
Only PlayerService mutates it.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Optional, Tuple

from models.track import Track


class QueueStore:
    """
    FIFO queue of Track descriptors

    Duplicates are allowed: the same track may be queued more than once.
    """

    def __init__(self):
        self._items: Deque[Track] = deque()

    def enqueue(self, track: Track) -> None:
        """Append a track to the tail"""
        self._items.append(track)

    def dequeue_front(self) -> Optional[Track]:
        """Remove and return the head, or None if the queue is empty"""
        if not self._items:
            return None
        return self._items.popleft()

    def peek_front(self) -> Optional[Track]:
        """Return the head without removing it"""
        return self._items[0] if self._items else None

    def remove(self, track_id: str) -> bool:
        """
        Remove the first queued track with this id

        Later duplicates stay queued.

        Returns:
            bool: Whether a track was removed
        """
        for i, track in enumerate(self._items):
            if track.id == track_id:
                del self._items[i]
                return True
        return False

    def remove_at(self, position: int) -> Optional[Track]:
        """
        Remove the track at a queue position (0 is the head)

        Returns:
            The removed track, or None if the position is out of range
        """
        if not 0 <= position < len(self._items):
            return None
        track = self._items[position]
        del self._items[position]
        return track

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> Tuple[Track, ...]:
        """Read-only copy of the queue, head first"""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Track]:
        return iter(self.snapshot())
