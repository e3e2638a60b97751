"""
Database Management Module

Provides SQLite database operation encapsulation for per-user session data
(liked tracks, play history).
"""

import sqlite3
import re
import sys
import os
import time
from typing import Optional, List, Dict, Any
from pathlib import Path
import threading
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database Manager

    Provides thread-safe SQLite operation encapsulation. One instance per
    session, created by AppContainerFactory.

    Example:
        db = DatabaseManager("player.db")

        rows = db.fetch_all("SELECT track_id FROM track_likes WHERE user_id = ?", (user_id,))

        with db.transaction():
            db.execute("INSERT INTO play_history ...")
    """

    @staticmethod
    def _get_default_db_path() -> str:
        """Get the default database path in the user data directory"""
        if sys.platform == "win32":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        db_dir = base / "stream-player"
        db_dir.mkdir(parents=True, exist_ok=True)
        return str(db_dir / "player.db")

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path or self._get_default_db_path()
        self._local = threading.local()
        self._write_lock = threading.RLock()
        self._init_schema()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def _conn(self) -> sqlite3.Connection:
        """Get thread-local connection"""
        if not hasattr(self._local, 'connection') or self._local.connection is None:
            self._local.connection = sqlite3.connect(self._db_path, timeout=30.0)
            self._local.connection.row_factory = sqlite3.Row

            if self._db_path != ":memory:":
                with self._write_lock:
                    self._local.connection.execute("PRAGMA journal_mode=WAL")
                    self._local.connection.execute("PRAGMA synchronous=NORMAL")

            self._local.connection.execute("PRAGMA foreign_keys = ON")
            self._local.in_transaction = False
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Transaction context manager

        Write operations within this context are committed or rolled back
        together when the context ends.
        """
        with self._write_lock:
            conn = self._conn
            self._local.in_transaction = True
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._local.in_transaction = False

    @staticmethod
    def _is_write_sql(sql: str) -> bool:
        write_keywords = ("INSERT", "UPDATE", "DELETE", "REPLACE", "CREATE", "DROP", "ALTER")
        match = re.match(r"[A-Z]+", sql.lstrip().upper())
        return bool(match) and match.group(0) in write_keywords

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL statement

        Write statements are committed immediately unless running inside
        transaction(). "database is locked" errors are retried with backoff.
        """
        max_retries = 5
        retry_delay = 0.1

        is_write = self._is_write_sql(sql)
        in_transaction = getattr(self._local, 'in_transaction', False)

        for i in range(max_retries):
            try:
                if is_write:
                    with self._write_lock:
                        cursor = self._conn.execute(sql, params)
                        if not in_transaction:
                            self._conn.commit()
                else:
                    cursor = self._conn.execute(sql, params)
                return cursor
            except sqlite3.OperationalError as e:
                if "locked" in str(e).lower() and i < max_retries - 1:
                    time.sleep(retry_delay * (i + 1))
                    continue
                raise

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Fetch single record"""
        cursor = self.execute(sql, params)
        row = cursor.fetchone()
        return dict(row) if row else None

    def fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Fetch all records"""
        cursor = self.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def delete(self, table: str, where: str, where_params: tuple) -> int:
        """
        Delete record

        Returns:
            int: Number of affected rows
        """
        sql = f"DELETE FROM {table} WHERE {where}"
        cursor = self.execute(sql, where_params)
        return cursor.rowcount

    def _init_schema(self) -> None:
        """Initialize database schema"""
        from core.schema import get_all_schema_statements

        for statement in get_all_schema_statements():
            self.execute(statement.strip())
        self._conn.commit()

    def close(self) -> None:
        """Close current thread's connection"""
        if hasattr(self._local, 'connection') and self._local.connection:
            self._local.connection.close()
            self._local.connection = None
