"""
Service Layer Module
"""

from .player_service import PlayerService, PlaybackState, PlayerStatus
from .queue_store import QueueStore
from .config_service import ConfigService
from .likes_service import LikesService
from .play_history_service import PlayHistoryService

__all__ = [
    'PlayerService',
    'PlaybackState',
    'PlayerStatus',
    'QueueStore',
    'ConfigService',
    'LikesService',
    'PlayHistoryService',
]
