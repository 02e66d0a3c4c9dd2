"""Batched log writer storing entries in a SQL logs table."""

import asyncio
import contextlib
import sys
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from wiretime.domain.jsonutil import TimestampEncoder, dumps
from wiretime.logger.types import LogEntry

if TYPE_CHECKING:
    from wiretime.database import Client

COLUMNS = (
    "timestamp",
    "service_name",
    "instance_id",
    "node_name",
    "environment",
    "level",
    "category",
    "trace_id",
    "span_id",
    "request_id",
    "function_name",
    "file_path",
    "line_number",
    "message",
    "error_message",
    "stack_trace",
    "context",
    "duration_ms",
    "ingestion_time",
)

CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS logs (
        timestamp VARCHAR(32) NOT NULL,
        service_name VARCHAR(255) NOT NULL,
        instance_id VARCHAR(255) NOT NULL,
        node_name VARCHAR(255),
        environment VARCHAR(64) NOT NULL,
        level VARCHAR(16) NOT NULL,
        category VARCHAR(64),
        trace_id VARCHAR(64),
        span_id VARCHAR(64),
        request_id VARCHAR(64),
        function_name VARCHAR(255),
        file_path VARCHAR(1024),
        line_number INTEGER,
        message TEXT NOT NULL,
        error_message TEXT,
        stack_trace TEXT,
        context TEXT,
        duration_ms INTEGER,
        ingestion_time VARCHAR(32) NOT NULL
    )
"""


class LogEncoder(TimestampEncoder):
    """TimestampEncoder that stringifies anything else it cannot encode."""

    def default(self, o: Any) -> Any:
        try:
            return super().default(o)
        except TypeError:
            return str(o)


def entry_row(entry: LogEntry) -> tuple[Any, ...]:
    """Row values in COLUMNS order; timestamps in canonical form."""
    return (
        entry.timestamp.to_json_value(),
        entry.service_name,
        entry.instance_id,
        entry.node_name,
        entry.environment,
        entry.level.value,
        entry.category.value if entry.category else None,
        entry.trace_id,
        entry.span_id,
        entry.request_id,
        entry.function_name,
        entry.file_path,
        entry.line_number,
        entry.message,
        entry.error_message,
        entry.stack_trace,
        dumps(entry.context, cls=LogEncoder) if entry.context is not None else None,
        entry.duration_ms,
        entry.ingestion_time.to_json_value(),
    )


class SQLWriter:
    """Buffers log entries and inserts them in batches through a database client."""

    def __init__(
        self,
        client: "Client",
        batch_size: int = 100,
        flush_interval: float = 5.0,
    ) -> None:
        """
        Initialize SQLWriter.

        Args:
            client: Connected MySQLClient or SQLiteClient
            batch_size: Buffer size that triggers a flush
            flush_interval: Seconds between background flushes
        """
        self.client = client
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self.buffer: list[LogEntry] = []
        self._lock = asyncio.Lock()
        self._flush_task: asyncio.Task[None] | None = None
        self._closed = False

    async def connect(self) -> None:
        """Create the logs table and start the background flush."""
        try:
            with self.client.cursor() as cursor:
                cursor.execute(CREATE_TABLE)
            self.client.commit()
        except Exception as e:
            print(f"[LOGGER ERROR] Failed to create logs table: {e}", file=sys.stderr)
            raise

        self._flush_task = asyncio.create_task(self._background_flush())

    async def write(self, entry: LogEntry) -> None:
        if self._closed:
            return

        async with self._lock:
            self.buffer.append(entry)
            if len(self.buffer) >= self.batch_size:
                await self._flush_locked()

    async def write_batch(self, entries: Sequence[LogEntry]) -> None:
        if self._closed:
            return

        async with self._lock:
            self.buffer.extend(entries)
            if len(self.buffer) >= self.batch_size:
                await self._flush_locked()

    async def flush(self) -> None:
        """Write the buffer to the database now."""
        async with self._lock:
            await self._flush_locked()

    async def _flush_locked(self) -> None:
        """Must be called with the lock held."""
        if not self.buffer:
            return

        placeholders = ", ".join([self.client.placeholder] * len(COLUMNS))
        query = f"INSERT INTO logs ({', '.join(COLUMNS)}) VALUES ({placeholders})"

        try:
            with self.client.cursor() as cursor:
                cursor.executemany(query, [entry_row(entry) for entry in self.buffer])
            self.client.commit()
        except Exception as e:
            print(f"[LOGGER ERROR] Failed to insert logs: {e}", file=sys.stderr)
            with contextlib.suppress(Exception):
                self.client.rollback()
            self._fallback_to_stderr()

        self.buffer.clear()

    def _fallback_to_stderr(self) -> None:
        """Dump the buffer as JSON lines when the database is unavailable."""
        for entry in self.buffer:
            data: dict[str, Any] = {
                "timestamp": entry.timestamp,
                "level": entry.level.value,
                "category": entry.category.value if entry.category else None,
                "message": entry.message,
                "service_name": entry.service_name,
                "environment": entry.environment,
            }
            if entry.error_message:
                data["error"] = entry.error_message
            if entry.context:
                data["context"] = entry.context

            print(dumps(data, cls=LogEncoder), file=sys.stderr)

    async def _background_flush(self) -> None:
        while not self._closed:
            try:
                await asyncio.sleep(self.flush_interval)
                await self.flush()
            except asyncio.CancelledError:
                break
            except Exception as e:
                print(f"[LOGGER ERROR] Background flush failed: {e}", file=sys.stderr)

    async def close(self) -> None:
        """Stop the background flush and write what is left."""
        # writes scheduled with loop.create_task run before the writer stops
        await asyncio.sleep(0)
        self._closed = True

        if self._flush_task:
            self._flush_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._flush_task

        await self.flush()


@asynccontextmanager
async def create_sql_writer(
    client: "Client",
    batch_size: int = 100,
    flush_interval: float = 5.0,
) -> AsyncIterator[SQLWriter]:
    """Connected SQLWriter that is flushed and closed on exit."""
    writer = SQLWriter(client, batch_size, flush_interval)
    await writer.connect()
    try:
        yield writer
    finally:
        await writer.close()
