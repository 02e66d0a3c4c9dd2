from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import pytest

from wiretime import lift
from wiretime.database.sqlite import SQLiteClient
from wiretime.logger import Category, Level, Logger, SQLWriter, get_logger, init_logger
from wiretime.logger.sql_writer import CREATE_TABLE
from wiretime.logger.types import boolean, category, duration_ms, error, integer, param, string


def test_logger_without_writer_prints_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    logger = Logger("wiretime", "test").with_category(Category.CODEC)
    at = lift(datetime(2018, 11, 27, 0, 54, 53, tzinfo=timezone.utc))

    logger.info("decoded", param("at", at), param("format", "rfc3339"))

    err = capsys.readouterr().err
    assert "[info] codec: decoded" in err
    assert '"at": "2018-11-27T00:54:53Z"' in err
    assert "+0000 UTC" in err


def test_min_level_filters_entries(capsys: pytest.CaptureFixture[str]) -> None:
    logger = Logger("wiretime", "test", min_level=Level.WARN)

    logger.debug("hidden")
    logger.info("hidden")
    logger.warn("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "[warn] shown" in err


def test_error_includes_error_message(capsys: pytest.CaptureFixture[str]) -> None:
    Logger("wiretime", "test").error("decode failed", ValueError("boom"))
    assert "error='boom'" in capsys.readouterr().err


def test_fatal_exits_and_panic_raises() -> None:
    logger = Logger("wiretime", "test")
    with pytest.raises(SystemExit):
        logger.fatal("stop")
    with pytest.raises(RuntimeError, match="halt"):
        logger.panic("halt")


def test_with_helpers_copy_context() -> None:
    base = Logger("wiretime", "test")
    derived = base.with_category(Category.DATABASE).with_trace_id("t-1").with_request_id("r-1")
    derived = derived.with_fields(param("engine", "sqlite"))

    assert derived._category is Category.DATABASE
    assert derived._trace_id == "t-1"
    assert derived._request_id == "r-1"
    assert derived._fields == {"engine": "sqlite"}
    assert derived.instance_id == base.instance_id
    assert base._category is None
    assert base._fields == {}


def test_init_logger_sets_global() -> None:
    logger = init_logger("svc", "prod", min_level="error")
    assert get_logger() is logger
    assert logger.min_level is Level.ERROR


def test_get_logger_creates_default() -> None:
    logger = get_logger()
    assert logger.service_name == "wiretime"
    assert get_logger() is logger


def test_logger_writes_through_sql_writer(sqlite_client: SQLiteClient) -> None:
    sqlite_client.execute(CREATE_TABLE)
    writer = SQLWriter(sqlite_client, batch_size=100, flush_interval=60)
    logger = Logger("wiretime", "test", writer=writer)

    logger.info(
        "stored",
        category(Category.DATABASE),
        param("attempt", 1),
        duration_ms(12),
    )
    asyncio.run(writer.flush())

    rows = sqlite_client.fetch_all(
        "SELECT timestamp, level, category, message, context, duration_ms, function_name FROM logs"
    )
    assert len(rows) == 1
    timestamp, level, cat, message, context, duration, function_name = rows[0]
    assert timestamp.endswith("Z")
    assert level == "info"
    assert cat == "database"
    assert message == "stored"
    assert json.loads(context) == {"attempt": 1}
    assert duration == 12
    assert function_name == "test_logger_writes_through_sql_writer"


def test_field_helpers() -> None:
    assert (string("k", "v").key, string("k", "v").value) == ("k", "v")
    assert integer("rows", 3).value == 3
    assert boolean("ok", True).value is True
    assert error(ValueError("boom")).value == "boom"
    assert error(ValueError("boom")).key == "error"
    assert category(Category.CLI).key == "_category"
