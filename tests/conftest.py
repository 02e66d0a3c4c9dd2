from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from wiretime.database import config as database_config
from wiretime.database.config import SQLiteConfig
from wiretime.database.sqlite import SQLiteClient
from wiretime.logger import logger as logger_module

_ENV_KEYS = (
    "ENVIRONMENT",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "LOG_LEVEL",
    "LOG_TO_DATABASE",
    "DATABASE_NAME",
    "MYSQL_ADDRESS",
    "MYSQL_USER",
    "MYSQL_PASSWORD",
    "MYSQL_MAX_OPEN",
    "MYSQL_MAX_IDLE",
    "MYSQL_MAX_LIFETIME",
    "MYSQL_MAX_IDLE_TIME",
    "SQLITE_PATH",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    secrets_dir = tmp_path / "secrets"
    secrets_dir.mkdir()
    monkeypatch.setattr(database_config, "SECRETS_DIR", str(secrets_dir))
    monkeypatch.setattr(logger_module, "_global_logger", None)
    return secrets_dir


@pytest.fixture()
def sqlite_client(tmp_path: Path) -> SQLiteClient:
    client = SQLiteClient(SQLiteConfig(path=str(tmp_path / "wiretime.sqlite3")))
    asyncio.run(client.connect())
    yield client
    asyncio.run(client.close())
