"""Structured logger."""

import asyncio
import inspect
import os
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from wiretime.domain.jsonutil import dumps
from wiretime.domain.timestamp import now
from wiretime.logger.sql_writer import LogEncoder, SQLWriter
from wiretime.logger.types import Category, Field, Level, LogEntry


class Logger:
    """Structured logger writing through SQLWriter, or to stderr without one."""

    def __init__(
        self,
        service_name: str,
        environment: str,
        writer: SQLWriter | None = None,
        min_level: Level = Level.TRACE,
    ) -> None:
        """
        Initialize Logger.

        Args:
            service_name: Service name stored on every entry
            environment: dev, stage, prod
            writer: SQLWriter for persisting entries
            min_level: Entries below this level are dropped
        """
        self.service_name = service_name
        self.environment = environment
        self.writer = writer
        self.min_level = min_level
        self.instance_id = self._get_instance_id()
        self.node_name = self._get_node_name()

        self._fields: dict[str, Any] = {}
        self._category: Category | None = None
        self._trace_id: str | None = None
        self._span_id: str | None = None
        self._request_id: str | None = None

    def trace(self, msg: str, *fields: Field) -> None:
        self._log(Level.TRACE, msg, None, *fields)

    def debug(self, msg: str, *fields: Field) -> None:
        self._log(Level.DEBUG, msg, None, *fields)

    def info(self, msg: str, *fields: Field) -> None:
        self._log(Level.INFO, msg, None, *fields)

    def warn(self, msg: str, *fields: Field) -> None:
        self._log(Level.WARN, msg, None, *fields)

    def error(self, msg: str, err: Exception | None = None, *fields: Field) -> None:
        self._log(Level.ERROR, msg, err, *fields)

    def fatal(self, msg: str, err: Exception | None = None, *fields: Field) -> None:
        """Log and exit with status 1."""
        self._log(Level.FATAL, msg, err, *fields)
        raise SystemExit(1)

    def panic(self, msg: str, err: Exception | None = None, *fields: Field) -> None:
        """Log and raise RuntimeError."""
        self._log(Level.PANIC, msg, err, *fields)
        raise RuntimeError(msg)

    def _log(
        self,
        level: Level,
        msg: str,
        err: Exception | None,
        *fields: Field,
    ) -> None:
        if level.severity < self.min_level.severity:
            return

        frame = inspect.currentframe()
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None

        function_name = None
        file_path = None
        line_number = None

        if caller_frame:
            function_name = caller_frame.f_code.co_name
            file_path = self._clean_file_path(caller_frame.f_code.co_filename)
            line_number = caller_frame.f_lineno

        context: dict[str, Any] = dict(self._fields)
        category = self._category

        for field in fields:
            if field.key == "_category":
                if isinstance(field.value, Category):
                    category = field.value
                continue
            context[field.key] = field.value

        duration_ms = context.pop("duration_ms", None)
        if duration_ms is not None:
            duration_ms = int(duration_ms)

        entry = LogEntry(
            timestamp=now(),
            service_name=self.service_name,
            instance_id=self.instance_id,
            node_name=self.node_name,
            environment=self.environment,
            level=level,
            category=category,
            trace_id=self._trace_id,
            span_id=self._span_id,
            request_id=self._request_id,
            function_name=function_name,
            file_path=file_path,
            line_number=line_number,
            message=msg,
            context=context if context else None,
            duration_ms=duration_ms,
        )

        if err:
            entry.error_message = str(err)
            if level in (Level.ERROR, Level.FATAL, Level.PANIC):
                entry.stack_trace = "".join(
                    traceback.format_exception(type(err), err, err.__traceback__)
                )

        if self.writer:
            try:
                try:
                    loop = asyncio.get_running_loop()
                    loop.create_task(self.writer.write(entry))
                except RuntimeError:
                    # no running loop
                    asyncio.run(self.writer.write(entry))
            except Exception as write_err:
                print(f"[LOGGER ERROR] Failed to write log: {write_err}", file=sys.stderr)
        else:
            print(self.format_line(entry), file=sys.stderr)

    @staticmethod
    def format_line(entry: LogEntry) -> str:
        """Single line rendering used when no writer is configured."""
        line = f"{entry.timestamp} [{entry.level.value}]"
        if entry.category:
            line += f" {entry.category.value}:"
        line += f" {entry.message}"
        if entry.context:
            line += f" {dumps(entry.context, cls=LogEncoder)}"
        if entry.error_message:
            line += f" error={entry.error_message!r}"
        return line

    def with_category(self, category: Category) -> "Logger":
        new_logger = self._copy()
        new_logger._category = category
        return new_logger

    def with_trace_id(self, trace_id: str) -> "Logger":
        new_logger = self._copy()
        new_logger._trace_id = trace_id
        return new_logger

    def with_span_id(self, span_id: str) -> "Logger":
        new_logger = self._copy()
        new_logger._span_id = span_id
        return new_logger

    def with_request_id(self, request_id: str) -> "Logger":
        new_logger = self._copy()
        new_logger._request_id = request_id
        return new_logger

    def with_fields(self, *fields: Field) -> "Logger":
        new_logger = self._copy()
        for field in fields:
            new_logger._fields[field.key] = field.value
        return new_logger

    def _copy(self) -> "Logger":
        new_logger = Logger(self.service_name, self.environment, self.writer, self.min_level)
        new_logger.instance_id = self.instance_id
        new_logger.node_name = self.node_name
        new_logger._fields = dict(self._fields)
        new_logger._category = self._category
        new_logger._trace_id = self._trace_id
        new_logger._span_id = self._span_id
        new_logger._request_id = self._request_id
        return new_logger

    @staticmethod
    def _get_instance_id() -> str:
        """Pod name, container ID, or a fresh UUID for local runs."""
        if hostname := os.getenv("HOSTNAME"):
            return hostname
        if container_id := os.getenv("CONTAINER_ID"):
            return container_id
        return str(uuid.uuid4())

    @staticmethod
    def _get_node_name() -> str | None:
        return os.getenv("NODE_NAME")

    @staticmethod
    def _clean_file_path(file_path: str) -> str:
        """Path relative to the wiretime package, or the bare file name."""
        path = Path(file_path)
        parts = path.parts
        if "wiretime" in parts:
            idx = parts.index("wiretime")
            return str(Path(*parts[idx:]))
        return path.name


_global_logger: Logger | None = None


def get_logger() -> Logger:
    """Return the global logger; a stderr logger is created on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = Logger("wiretime", os.getenv("ENVIRONMENT", "dev"))
    return _global_logger


def init_logger(
    service_name: str,
    environment: str,
    writer: SQLWriter | None = None,
    min_level: Level | str = Level.TRACE,
) -> Logger:
    """
    Initialize the global logger.

    Args:
        service_name: Service name
        environment: dev, stage, prod
        writer: SQLWriter for persisting entries
        min_level: Minimum level, Level or its string value

    Returns:
        Logger instance
    """
    global _global_logger
    _global_logger = Logger(service_name, environment, writer, Level(min_level))
    return _global_logger
