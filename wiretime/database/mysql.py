"""MySQL client built on PyMySQL.

The connection is recycled once it outlives connections.max_lifetime or has
been idle longer than connections.max_idle_time (zero disables either check).
"""

import time
from collections.abc import Generator
from contextlib import contextmanager, suppress
from typing import Any

import pymysql
from pymysql.connections import Connection
from pymysql.cursors import Cursor

from wiretime.database.config import MySQLConfig
from wiretime.logger.logger import get_logger
from wiretime.logger.types import Category, param


class MySQLClient:
    """MySQL client holding a single managed connection."""

    placeholder = "%s"

    def __init__(self, config: MySQLConfig, database_name: str = "") -> None:
        """
        Initialize MySQL client.

        Args:
            config: MySQLConfig instance
            database_name: Schema to select after connecting
        """
        self.config = config
        self.database_name = database_name
        self._connection: Connection | None = None
        self._opened_at = 0.0
        self._last_used = 0.0
        self.logger = get_logger().with_category(Category.DATABASE)

    def _open(self) -> Connection:
        conn = pymysql.connect(**self.config.connect_kwargs(self.database_name))
        self._opened_at = self._last_used = time.monotonic()
        return conn

    async def connect(self) -> None:
        """Connect to MySQL."""
        try:
            self._connection = self._open()
            self.logger.info(
                "Connected to MySQL",
                param("config", self.config.to_dict()),
                param("database", self.database_name),
            )
        except pymysql.Error as e:
            self.logger.error(
                "Failed to connect to MySQL",
                e,
                param("address", self.config.address),
            )
            raise ConnectionError(f"Failed to connect to MySQL: {e}") from e

    async def close(self) -> None:
        """Close MySQL connection."""
        if self._connection:
            try:
                self._connection.close()
                self.logger.info("MySQL connection closed")
            except pymysql.Error as e:
                self.logger.warn("Error closing MySQL connection", param("error", str(e)))
            finally:
                self._connection = None

    def _expired(self, current: float) -> bool:
        limits = self.config.connections
        lifetime = limits.max_lifetime.total_seconds()
        idle_time = limits.max_idle_time.total_seconds()
        if lifetime > 0 and current - self._opened_at >= lifetime:
            return True
        return idle_time > 0 and current - self._last_used >= idle_time

    def _ensure_connected(self) -> Connection:
        """Return a live connection, recycling or reconnecting as needed."""
        if self._connection is None:
            raise RuntimeError("MySQL not connected. Call connect() first.")

        current = time.monotonic()
        if self._expired(current):
            self.logger.debug("Recycling MySQL connection")
            with suppress(pymysql.Error):
                self._connection.close()
            self._connection = self._open()
        else:
            try:
                self._connection.ping(reconnect=True)
            except pymysql.Error as e:
                self.logger.warn(
                    "MySQL connection lost, reconnecting...",
                    param("error", str(e)),
                )
                self._connection = self._open()

        self._last_used = current
        return self._connection

    @contextmanager
    def cursor(self) -> Generator[Cursor, None, None]:
        """Get cursor context manager."""
        conn = self._ensure_connected()
        cursor = conn.cursor()
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
        """
        Execute query and commit.

        Returns:
            Number of affected rows
        """
        with self.cursor() as cursor:
            cursor.execute(query, params)
            rowcount = cursor.rowcount
        self.commit()
        return rowcount

    def fetch_one(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> tuple[Any, ...] | None:
        with self.cursor() as cursor:
            cursor.execute(query, params)
            return cursor.fetchone()  # type: ignore[no-any-return]

    def fetch_all(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[tuple[Any, ...]]:
        with self.cursor() as cursor:
            cursor.execute(query, params)
            return list(cursor.fetchall())

    def ping(self) -> bool:
        """Check if connection is alive."""
        try:
            self._ensure_connected()
            return True
        except (pymysql.Error, RuntimeError):
            return False
