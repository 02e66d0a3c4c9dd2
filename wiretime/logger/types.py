"""Types and constants for structured logging."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wiretime.domain.timestamp import Timestamp, now


class Level(str, Enum):
    """Log level, ordered from most to least verbose."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"
    PANIC = "panic"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {level: idx for idx, level in enumerate(Level)}


class Category(str, Enum):
    """Category groups log events by subsystem."""

    CODEC = "codec"  # Timestamp encode/decode
    CONFIG = "config"  # Settings loading
    DATABASE = "database"  # MySQL / SQLite clients
    CLI = "cli"


@dataclass
class LogEntry:
    """One log record, as stored in the logs table."""

    timestamp: Timestamp
    service_name: str
    instance_id: str
    environment: str
    level: Level
    message: str
    ingestion_time: Timestamp = field(default_factory=now)
    node_name: str | None = None
    category: Category | None = None
    trace_id: str | None = None
    span_id: str | None = None
    request_id: str | None = None
    function_name: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    error_message: str | None = None
    stack_trace: str | None = None
    context: dict[str, Any] | None = None
    duration_ms: int | None = None


@dataclass
class Field:
    """Structured key/value attached to a log entry."""

    key: str
    value: Any


def category(cat: Category) -> Field:
    """Field overriding the logger category for one entry."""
    return Field(key="_category", value=cat)


def param(key: str, value: Any) -> Field:
    return Field(key=key, value=value)


def string(key: str, value: str) -> Field:
    return Field(key=key, value=value)


def integer(key: str, value: int) -> Field:
    return Field(key=key, value=value)


def boolean(key: str, value: bool) -> Field:
    return Field(key=key, value=value)


def duration_ms(value: int) -> Field:
    return Field(key="duration_ms", value=value)


def error(err: Exception) -> Field:
    return Field(key="error", value=str(err))
