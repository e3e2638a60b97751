# -*- coding: utf-8 -*-
"""
Database Port Interface

Defines an abstract interface for database operations, so the user-data
services do not depend on a specific storage implementation.
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IDatabase(Protocol):
    """Database Operations Interface

    Current implementation: DatabaseManager (SQLite)
    """

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute a SQL statement

        Args:
            sql: SQL statement
            params: Parameter tuple

        Returns:
            Cursor of the executed statement
        """
        ...

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Fetch a single record as a dictionary, or None"""
        ...

    def fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Fetch all records as dictionaries"""
        ...

    def delete(self, table: str, where: str, where_params: tuple) -> int:
        """Delete records

        Returns:
            Number of affected rows
        """
        ...

    def transaction(self) -> ContextManager[Any]:
        """Group writes; commit on success, roll back on error"""
        ...

    def close(self) -> None:
        """Close the connection"""
        ...
