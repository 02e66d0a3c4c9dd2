"""Timestamp value type with a deterministic JSON codec."""

import functools
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from wiretime.domain.errors import MalformedInput
from wiretime.domain.formats import DECODE_CHAIN, format_canonical, format_display

UNSET_DISPLAY = "<unset>"


def _as_utc(value: datetime) -> datetime:
    # naive values follow the utcnow() convention
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@functools.total_ordering
@dataclass(frozen=True, eq=False, repr=False)
class Timestamp:
    """
    Immutable point in time, or no point in time at all.

    Timestamp() is the zero value: it holds no instant and is_zero() is true.
    Every other Timestamp wraps a datetime, kept as supplied; UTC
    normalization happens when the value is encoded or displayed.

    JSON form is "YYYY-MM-DDTHH:MM:SSZ". The zero value encodes as null.
    """

    instant: datetime | None = None

    def __post_init__(self) -> None:
        if self.instant is not None and not isinstance(self.instant, datetime):
            raise TypeError(
                f"Timestamp wraps datetime, got {type(self.instant).__name__}"
            )
        # an offset can push the instant past datetime.min/max once moved to UTC
        if self.instant is not None:
            try:
                _as_utc(self.instant)
            except OverflowError as e:
                raise ValueError("date time out of range") from e

    def is_zero(self) -> bool:
        """True if no instant was ever assigned."""
        return self.instant is None

    def utc(self) -> datetime:
        """
        Return the instant normalized to UTC.

        Raises:
            ValueError: Timestamp is the zero value
        """
        if self.instant is None:
            raise ValueError("zero Timestamp has no instant")
        return _as_utc(self.instant)

    def equal(self, other: "Timestamp") -> bool:
        """Exact instant equality; the zero value only equals itself."""
        if self.instant is None or other.instant is None:
            return self.instant is None and other.instant is None
        return _as_utc(self.instant) == _as_utc(other.instant)

    def sub(self, other: "Timestamp") -> timedelta:
        """Signed duration self - other."""
        return self.utc() - other.utc()

    def to_json(self) -> str:
        """Encode as JSON text."""
        return json.dumps(self.to_json_value())

    def to_json_value(self) -> str | None:
        """Canonical string for embedding into JSON documents, None when zero."""
        if self.instant is None:
            return None
        return format_canonical(self.utc())

    @classmethod
    def from_json(cls, data: str | bytes) -> "Timestamp":
        """Decode JSON text. See decode()."""
        return decode(data)

    def to_display_string(self) -> str:
        """Human-readable form, e.g. 2018-12-14 20:36:58 +0000 UTC."""
        if self.instant is None:
            return UNSET_DISPLAY
        return format_display(self.utc())

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        if self.instant is None:
            return f"Timestamp({UNSET_DISPLAY})"
        return f"Timestamp({self.to_json_value()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self.equal(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        # zero value sorts before every instant
        if other.instant is None:
            return False
        if self.instant is None:
            return True
        return self.utc() < other.utc()

    def __hash__(self) -> int:
        if self.instant is None:
            return hash(None)
        return hash(self.utc())


def now() -> Timestamp:
    """Current wall-clock instant in UTC."""
    return Timestamp(datetime.now(timezone.utc))


def lift(instant: datetime) -> Timestamp:
    """
    Wrap an existing datetime as-is.

    Raises:
        ValueError: the instant falls outside datetime's range once moved to UTC
    """
    return Timestamp(instant)


def zero() -> Timestamp:
    """The zero value."""
    return Timestamp()


def is_zero(value: Timestamp) -> bool:
    return value.is_zero()


def equal(a: Timestamp, b: Timestamp) -> bool:
    return a.equal(b)


def difference(a: Timestamp, b: Timestamp) -> timedelta:
    """
    Signed duration a - b.

    Raises:
        ValueError: either side is the zero value
    """
    return a.sub(b)


def encode(value: Timestamp) -> str:
    """
    Encode a Timestamp as JSON text.

    Returns '"YYYY-MM-DDTHH:MM:SSZ"' for an instant (normalized to UTC,
    fractional seconds dropped) and 'null' for the zero value.
    """
    return value.to_json()


def parse(text: str) -> Timestamp:
    """
    Parse an unquoted date time string.

    Formats are tried in DECODE_CHAIN order; the first match wins and the
    parsed offset is kept on the instant.

    Raises:
        MalformedInput: text is empty, matches no accepted format, or names
            an instant outside the UTC range
    """
    if text == "":
        raise MalformedInput("empty date time", text)

    errors: list[tuple[str, str]] = []
    for fmt in DECODE_CHAIN:
        try:
            return Timestamp(fmt.parse(text))
        except ValueError as e:
            errors.append((fmt.name, str(e)))

    raise MalformedInput("unrecognized date time", text, errors)


def decode(data: str | bytes) -> Timestamp:
    """
    Decode JSON text holding a date time string.

    JSON null decodes to the zero value; an empty string is an error.

    Raises:
        MalformedInput: invalid JSON, not a string, or see parse()
    """
    raw = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    try:
        value = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInput("invalid json date time", raw) from e

    if value is None:
        return Timestamp()
    if not isinstance(value, str):
        raise MalformedInput("date time must be a json string", raw)
    return parse(value)
