"""SQLite client for the embedded database variant."""

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from wiretime.database.config import SQLiteConfig
from wiretime.logger.logger import get_logger
from wiretime.logger.types import Category, param

MEMORY = ":memory:"


class SQLiteClient:
    """SQLite client with the same surface as MySQLClient."""

    placeholder = "?"

    def __init__(self, config: SQLiteConfig) -> None:
        self.config = config
        self._connection: sqlite3.Connection | None = None
        self.logger = get_logger().with_category(Category.DATABASE)

    async def connect(self) -> None:
        """Open the database file, creating parent directories."""
        try:
            if self.config.path != MEMORY:
                Path(self.config.path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(self.config.path, check_same_thread=False)
            self.logger.info("Opened SQLite database", param("path", self.config.path))
        except (sqlite3.Error, OSError) as e:
            self.logger.error(
                "Failed to open SQLite database",
                e,
                param("path", self.config.path),
            )
            raise ConnectionError(f"Failed to open SQLite database: {e}") from e

    async def close(self) -> None:
        if self._connection:
            try:
                self._connection.close()
                self.logger.info("SQLite database closed")
            finally:
                self._connection = None

    def _ensure_connected(self) -> sqlite3.Connection:
        if self._connection is None:
            raise RuntimeError("SQLite not connected. Call connect() first.")
        return self._connection

    @contextmanager
    def cursor(self) -> Generator[sqlite3.Cursor, None, None]:
        cursor = self._ensure_connected().cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def commit(self) -> None:
        self._ensure_connected().commit()

    def rollback(self) -> None:
        if self._connection:
            self._connection.rollback()

    def execute(self, query: str, params: tuple[Any, ...] | None = None) -> int:
        """Execute query and commit, returning the affected row count."""
        with self.cursor() as cursor:
            cursor.execute(query, params or ())
            rowcount = cursor.rowcount
        self.commit()
        return rowcount

    def fetch_one(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> tuple[Any, ...] | None:
        with self.cursor() as cursor:
            cursor.execute(query, params or ())
            return cursor.fetchone()  # type: ignore[no-any-return]

    def fetch_all(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[tuple[Any, ...]]:
        with self.cursor() as cursor:
            cursor.execute(query, params or ())
            return cursor.fetchall()

    def ping(self) -> bool:
        try:
            self.fetch_one("SELECT 1")
            return True
        except (sqlite3.Error, RuntimeError):
            return False
