"""
wiretime command line.

    wiretime normalize 2018-11-18T09:04:23-08:00 2018-12-14T20:36:58.789Z
    wiretime now
    wiretime config

With LOG_TO_DATABASE=true, log entries go to the logs table of the
configured database instead of stderr.
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from wiretime.config.settings import Settings
from wiretime.database import new_client
from wiretime.domain.errors import MalformedInput
from wiretime.domain.timestamp import encode, now, parse
from wiretime.logger.logger import Logger, init_logger
from wiretime.logger.sql_writer import SQLWriter, create_sql_writer
from wiretime.logger.types import Category, category, param


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wiretime",
        description="Canonical JSON timestamps",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    normalize = commands.add_parser(
        "normalize",
        help="Print canonical JSON and display form of each date time",
    )
    normalize.add_argument("values", nargs="+", metavar="DATETIME")

    commands.add_parser("now", help="Print the current instant in canonical JSON form")
    commands.add_parser("config", help="Print database config with the password masked")
    return parser


def _init_logger(settings: Settings, writer: SQLWriter | None = None) -> Logger:
    return init_logger(
        service_name=settings.service_name,
        environment=settings.environment,
        writer=writer,
        min_level=settings.log_level,
    ).with_category(Category.CLI)


def execute(args: argparse.Namespace, settings: Settings, logger: Logger) -> int:
    """Run one parsed command and return the exit status."""
    if args.command == "now":
        print(encode(now()))
        return 0

    if args.command == "config":
        logger.debug(
            "Loaded settings",
            category(Category.CONFIG),
            param("settings", settings.to_dict()),
        )
        print(settings.database.to_json())
        return 0

    status = 0
    for value in args.values:
        try:
            parsed = parse(value)
        except MalformedInput as e:
            logger.error(
                "Malformed date time",
                e,
                category(Category.CODEC),
                param("text", e.text),
                param("tried", e.errors),
            )
            status = 1
            continue
        print(f"{encode(parsed)}\t{parsed.to_display_string()}")
    return status


async def execute_with_log_store(args: argparse.Namespace, settings: Settings) -> int:
    """Run one command with log entries stored in the configured database."""
    client = new_client(settings.database)
    await client.connect()
    try:
        async with create_sql_writer(client) as writer:
            return execute(args, settings, _init_logger(settings, writer))
    finally:
        await client.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the exit status."""
    args = build_parser().parse_args(argv)

    settings = Settings()
    if settings.log_to_database:
        return asyncio.run(execute_with_log_store(args, settings))
    return execute(args, settings, _init_logger(settings))


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
