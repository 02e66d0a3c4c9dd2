"""
Accepted textual time layouts.

Decoding walks DECODE_CHAIN in order and keeps the first layout that parses.
Encoding always produces the canonical layout:

    2018-11-18T17:04:23Z

Display form (logs, debugging):

    2018-11-18 17:04:23 +0000 UTC
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Python keeps microseconds, anything finer is truncated
_MAX_FRACTION_DIGITS = 6


@dataclass(frozen=True)
class TimeFormat:
    """One accepted layout: a full-match pattern and a builder for its groups."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], datetime]

    def parse(self, text: str) -> datetime:
        """
        Parse text with this layout.

        Raises:
            ValueError: text does not match or holds out-of-range fields
        """
        match = self.pattern.fullmatch(text)
        if match is None:
            raise ValueError(f"does not match {self.name} layout")
        return self.build(match)


def _parse_offset(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return timezone.utc

    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"utc offset {raw} out of range")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _build(match: re.Match[str]) -> datetime:
    fraction = match.group("fraction") or ""
    microsecond = int(fraction[:_MAX_FRACTION_DIGITS].ljust(_MAX_FRACTION_DIGITS, "0"))
    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        microsecond,
        tzinfo=_parse_offset(match.group("offset")),
    )


_DATE_TIME = (
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt](?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
)

RFC3339 = TimeFormat(
    name="rfc3339",
    pattern=re.compile(_DATE_TIME + r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"),
    build=_build,
)

# Numeric offset without the Z shorthand, colon optional (-08:00 or -0800).
# Emitted by strftime("%Y-%m-%dT%H:%M:%S%z") style producers.
ISO8601_NUMERIC_OFFSET = TimeFormat(
    name="iso8601-numeric-offset",
    pattern=re.compile(_DATE_TIME + r"(?P<offset>[+-][0-9]{2}:?[0-9]{2})"),
    build=_build,
)

DECODE_CHAIN: Sequence[TimeFormat] = (RFC3339, ISO8601_NUMERIC_OFFSET)


def format_canonical(value: datetime) -> str:
    """Render a UTC datetime as YYYY-MM-DDTHH:MM:SSZ."""
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}Z"
    )


def format_display(value: datetime) -> str:
    """Render a UTC datetime as YYYY-MM-DD HH:MM:SS +0000 UTC."""
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d} +0000 UTC"
    )
