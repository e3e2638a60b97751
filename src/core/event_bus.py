# -*- coding: utf-8 -*-
"""
Event Bus Module - Publish-Subscribe Pattern Implementation

Provides loose-coupled communication between the player session and its consumers.

Design Notes:
- Pure Python implementation, does not depend on any UI framework
- One bus per session, created by AppContainerFactory and passed explicitly
- publish_sync runs callbacks on the caller's thread (the session's event loop)
"""

from typing import Dict, Callable, Any, Optional
from enum import Enum
import threading
import uuid
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event type enumeration"""

    # Playback events
    STATE_CHANGED = "state_changed"        # Fired after every controller transition
    TRACK_STARTED = "track_started"
    TRACK_ENDED = "track_ended"
    PLAYBACK_STOPPED = "playback_stopped"  # Queue exhausted (distinguished from natural end)
    TRACK_PAUSED = "track_paused"
    TRACK_RESUMED = "track_resumed"
    POSITION_CHANGED = "position_changed"
    VOLUME_CHANGED = "volume_changed"
    QUEUE_CHANGED = "queue_changed"

    # User data events
    LIKES_CHANGED = "likes_changed"
    PLAY_RECORDED = "play_recorded"

    # System events
    ERROR_OCCURRED = "error_occurred"


class EventBus:
    """
    Event Bus

    Publish-subscribe event system. publish_sync() runs callbacks in the
    current thread, in subscription order.

    Usage example:
        event_bus = EventBus()

        def on_track_started(track):
            logger.info("Playing: %s", track.title)

        sub_id = event_bus.subscribe(EventType.TRACK_STARTED, on_track_started)
        event_bus.publish_sync(EventType.TRACK_STARTED, track)
        event_bus.unsubscribe(sub_id)
    """

    def __init__(self):
        self._subscribers: Dict[EventType, Dict[str, Callable]] = {}
        self._sub_lock = threading.Lock()

    def subscribe(
        self,
        event_type: EventType,
        callback: Callable[[Any], None]
    ) -> str:
        """
        Subscribe to event

        Args:
            event_type: Event type
            callback: Callback function, receiving event data as an argument

        Returns:
            str: Subscription ID, used for unsubscription
        """
        subscription_id = str(uuid.uuid4())

        with self._sub_lock:
            if event_type not in self._subscribers:
                self._subscribers[event_type] = {}
            self._subscribers[event_type][subscription_id] = callback

        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """
        Unsubscribe

        Args:
            subscription_id: The ID returned when subscribing

        Returns:
            bool: Whether the unsubscription was successful
        """
        with self._sub_lock:
            for event_type in self._subscribers:
                if subscription_id in self._subscribers[event_type]:
                    del self._subscribers[event_type][subscription_id]
                    return True
        return False

    def publish_sync(
        self,
        event_type: EventType,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Publish event synchronously

        All callbacks are executed in the current thread.

        Args:
            event_type: Event type
            data: Event data
            timeout: Kept for interface compatibility with thread-dispatching buses; unused here.

        Returns:
            bool: Always True (synchronous execution cannot time out)
        """
        with self._sub_lock:
            callbacks = list(self._subscribers.get(event_type, {}).values())

        for callback in callbacks:
            self._safe_call(callback, data)

        return True

    def subscriber_count(self, event_type: EventType) -> int:
        """Number of callbacks subscribed to an event type"""
        with self._sub_lock:
            return len(self._subscribers.get(event_type, {}))

    def _safe_call(self, callback: Callable, data: Any) -> None:
        """Safely call a callback function"""
        try:
            callback(data)
        except Exception as e:
            # Do not publish ERROR_OCCURRED here, a failing error handler would loop
            logger.error("Event callback execution error: %s", e)

    def clear(self) -> None:
        """Clear all subscriptions"""
        with self._sub_lock:
            self._subscribers.clear()
