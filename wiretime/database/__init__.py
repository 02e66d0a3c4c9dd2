"""Database configuration and clients."""

from wiretime.database.config import (
    ConnectionsConfig,
    DatabaseConfig,
    MySQLConfig,
    SQLiteConfig,
)
from wiretime.database.mysql import MySQLClient
from wiretime.database.sqlite import SQLiteClient

Client = MySQLClient | SQLiteClient


def new_client(config: DatabaseConfig) -> Client:
    """
    Build the client for the configured engine. Call connect() on the result.

    Raises:
        ValueError: neither mysql nor sqlite is configured
    """
    if config.mysql is not None:
        return MySQLClient(config.mysql, config.database_name)
    if config.sqlite is not None:
        return SQLiteClient(config.sqlite)
    raise ValueError("database config has neither mysql nor sqlite section")


__all__ = [
    "Client",
    "ConnectionsConfig",
    "DatabaseConfig",
    "MySQLClient",
    "MySQLConfig",
    "SQLiteClient",
    "SQLiteConfig",
    "new_client",
]
