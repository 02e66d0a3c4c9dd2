"""Deterministic JSON timestamps shared across languages."""

from wiretime.domain import (
    MalformedInput,
    Timestamp,
    TimestampEncoder,
    WiretimeError,
    decode,
    decode_field,
    difference,
    dumps,
    encode,
    equal,
    is_zero,
    lift,
    now,
    parse,
    zero,
)

__version__ = "0.1.0"

__all__ = [
    "MalformedInput",
    "Timestamp",
    "TimestampEncoder",
    "WiretimeError",
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
