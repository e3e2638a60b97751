# -*- coding: utf-8 -*-
"""
Event Types Module

Re-exports EventType from core.event_bus so consumers of a session
do not import from the core layer directly.

Usage Example:
    from app.events import EventType

    container.event_bus.subscribe(EventType.STATE_CHANGED, on_state_changed)
"""

from core.event_bus import EventType

__all__ = ["EventType"]
