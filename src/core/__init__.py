"""
Player Session Core Module
"""

from .event_bus import EventBus, EventType
from .audio_engine import MediaOutputBase, PygameMediaOutput
from .database import DatabaseManager
from .engine_factory import MediaOutputFactory
from .ports.audio import (
    MediaEnded,
    MediaError,
    MediaErrorKind,
    MediaProgress,
    OutputState,
)

__all__ = [
    'EventBus',
    'EventType',
    'MediaOutputBase',
    'PygameMediaOutput',
    'DatabaseManager',
    'MediaOutputFactory',
    'MediaEnded',
    'MediaError',
    'MediaErrorKind',
    'MediaProgress',
    'OutputState',
]
