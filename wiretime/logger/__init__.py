"""Logger module for wiretime."""

from wiretime.logger.logger import Logger, get_logger, init_logger
from wiretime.logger.sql_writer import SQLWriter, create_sql_writer
from wiretime.logger.types import Category, Field, Level, LogEntry

__all__ = [
    "Logger",
    "get_logger",
    "init_logger",
    "SQLWriter",
    "create_sql_writer",
    "Category",
    "Level",
    "LogEntry",
    "Field",
]
