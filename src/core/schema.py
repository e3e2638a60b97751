"""
Database Schema Definitions

Contains all table structure and index definitions.
"""

from __future__ import annotations

from typing import List

# Table structure SQL statements
TABLE_STATEMENTS = [
    # Liked tracks (one row per user/track pair, so adds and removes behave like a set)
    """
    CREATE TABLE IF NOT EXISTS track_likes (
        user_id TEXT NOT NULL,
        track_id TEXT NOT NULL,
        liked_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (user_id, track_id)
    )
    """,

    # Play history
    """
    CREATE TABLE IF NOT EXISTS play_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        track_id TEXT NOT NULL,
        played_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Per-track play counters
    """
    CREATE TABLE IF NOT EXISTS track_play_counts (
        track_id TEXT PRIMARY KEY,
        play_count INTEGER NOT NULL DEFAULT 0
    )
    """,
]

# Index SQL statements
INDEX_STATEMENTS = [
    "CREATE INDEX IF NOT EXISTS idx_play_history_user ON play_history(user_id, id)",
]


def get_all_schema_statements() -> List[str]:
    """Get all schema statements (tables first, then indexes)"""
    return TABLE_STATEMENTS + INDEX_STATEMENTS
