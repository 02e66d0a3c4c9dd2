"""Timestamp value type and JSON codec."""

from wiretime.domain.errors import MalformedInput, WiretimeError
from wiretime.domain.jsonutil import TimestampEncoder, decode_field, dumps
from wiretime.domain.timestamp import (
    Timestamp,
    decode,
    difference,
    encode,
    equal,
    is_zero,
    lift,
    now,
    parse,
    zero,
)

__all__ = [
    "Timestamp",
    "MalformedInput",
    "WiretimeError",
    "TimestampEncoder",
    "decode",
    "decode_field",
    "difference",
    "dumps",
    "encode",
    "equal",
    "is_zero",
    "lift",
    "now",
    "parse",
    "zero",
]
