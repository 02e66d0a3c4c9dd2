"""Helpers for Timestamp fields inside larger JSON documents."""

import json
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from wiretime.domain.errors import MalformedInput
from wiretime.domain.timestamp import Timestamp, parse


class TimestampEncoder(json.JSONEncoder):
    """JSONEncoder that writes Timestamp in canonical form and timedelta as seconds."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Timestamp):
            return o.to_json_value()
        if isinstance(o, timedelta):
            return o.total_seconds()
        return super().default(o)


def dumps(obj: Any, **kwargs: Any) -> str:
    """json.dumps with TimestampEncoder."""
    kwargs.setdefault("cls", TimestampEncoder)
    return json.dumps(obj, **kwargs)


def decode_field(document: Mapping[str, Any], key: str) -> Timestamp:
    """
    Read a Timestamp field from an already parsed JSON object.

    Absent or null fields give the zero value. A present field must hold an
    accepted date time string.

    Raises:
        MalformedInput: field is empty, not a string, or not a date time
    """
    value = document.get(key)
    if value is None:
        return Timestamp()
    if not isinstance(value, str):
        raise MalformedInput(f"field {key!r} must be a date time string", repr(value))
    return parse(value)
