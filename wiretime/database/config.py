"""Database connection configuration.

Plain data holders. The only behaviour is masking the MySQL password
whenever a config is serialized (dict, JSON, repr).
"""

import json
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from wiretime.database.mask import password as mask_password

SECRETS_DIR = "/run/secrets"

Mask = Callable[[str], str]


def _read_secret(name: str, env_key: str, default: str = "") -> str:
    """Read value from Docker secret or env."""
    secret_file = os.path.join(SECRETS_DIR, name)
    if os.path.exists(secret_file):
        with open(secret_file) as f:
            return f.read().strip()
    return os.getenv(env_key, default)


def _env_int(key: str, default: int = 0) -> int:
    return int(os.getenv(key, str(default)))


def _env_seconds(key: str) -> timedelta:
    return timedelta(seconds=float(os.getenv(key, "0")))


@dataclass
class ConnectionsConfig:
    """Pool sizing. Zero means no limit (max_idle: driver default)."""

    max_open: int = 0
    max_idle: int = 0
    max_lifetime: timedelta = field(default_factory=timedelta)
    max_idle_time: timedelta = field(default_factory=timedelta)

    def to_dict(self) -> dict[str, Any]:
        """Durations are written as seconds."""
        return {
            "max_open": self.max_open,
            "max_idle": self.max_idle,
            "max_lifetime": self.max_lifetime.total_seconds(),
            "max_idle_time": self.max_idle_time.total_seconds(),
        }

    @classmethod
    def from_env(cls, prefix: str = "MYSQL_") -> "ConnectionsConfig":
        return cls(
            max_open=_env_int(f"{prefix}MAX_OPEN"),
            max_idle=_env_int(f"{prefix}MAX_IDLE"),
            max_lifetime=_env_seconds(f"{prefix}MAX_LIFETIME"),
            max_idle_time=_env_seconds(f"{prefix}MAX_IDLE_TIME"),
        )


@dataclass(repr=False)
class MySQLConfig:
    """MySQL connection configuration.

    address is host:port, the Go driver style tcp(host:port) is accepted too.
    """

    address: str = "localhost:3306"
    user: str = ""
    password: str = ""
    connections: ConnectionsConfig = field(default_factory=ConnectionsConfig)

    @property
    def host(self) -> str:
        return self._split_address()[0]

    @property
    def port(self) -> int:
        return self._split_address()[1]

    def _split_address(self) -> tuple[str, int]:
        address = self.address
        if address.startswith("tcp(") and address.endswith(")"):
            address = address[4:-1]
        host, sep, port = address.rpartition(":")
        if not sep:
            return address, 3306
        return host, int(port)

    def to_dict(self, mask: Mask = mask_password) -> dict[str, Any]:
        """
        Serializable view with the password replaced by mask(password).

        Args:
            mask: Masking function, defaults to mask.password
        """
        return {
            "address": self.address,
            "user": self.user,
            "password": mask(self.password),
            "connections": self.connections.to_dict(),
        }

    def to_json(self, mask: Mask = mask_password) -> str:
        return json.dumps(self.to_dict(mask))

    def connect_kwargs(self, database: str) -> dict[str, Any]:
        """PyMySQL connection kwargs. Holds the real password, never log it."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": database or None,
            "charset": "utf8mb4",
            "autocommit": False,
        }

    def __repr__(self) -> str:
        masked = self.to_dict()
        return (
            f"MySQLConfig(address={masked['address']!r}, user={masked['user']!r}, "
            f"password={masked['password']!r}, connections={self.connections!r})"
        )

    @classmethod
    def from_env(cls) -> "MySQLConfig":
        """Read config from env, the password from Docker secret or env."""
        return cls(
            address=os.getenv("MYSQL_ADDRESS", "localhost:3306"),
            user=_read_secret("mysql_user", "MYSQL_USER", "wiretime"),
            password=_read_secret("mysql_password", "MYSQL_PASSWORD"),
            connections=ConnectionsConfig.from_env("MYSQL_"),
        )


@dataclass
class SQLiteConfig:
    """Embedded database file. ':memory:' keeps everything in memory."""

    path: str = ":memory:"

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}

    @classmethod
    def from_env(cls) -> "SQLiteConfig":
        return cls(path=os.getenv("SQLITE_PATH", ":memory:"))


@dataclass
class DatabaseConfig:
    """Top level database configuration; exactly one engine is expected."""

    mysql: MySQLConfig | None = None
    sqlite: SQLiteConfig | None = None
    database_name: str = ""

    def to_dict(self, mask: Mask = mask_password) -> dict[str, Any]:
        return {
            "mysql": self.mysql.to_dict(mask) if self.mysql else None,
            "sqlite": self.sqlite.to_dict() if self.sqlite else None,
            "database_name": self.database_name,
        }

    def to_json(self, mask: Mask = mask_password) -> str:
        return json.dumps(self.to_dict(mask))

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """MySQL when MYSQL_ADDRESS is set, SQLite otherwise."""
        database_name = os.getenv("DATABASE_NAME", "wiretime")
        if os.getenv("MYSQL_ADDRESS"):
            return cls(mysql=MySQLConfig.from_env(), database_name=database_name)
        return cls(sqlite=SQLiteConfig.from_env(), database_name=database_name)
