from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from wiretime import MalformedInput, Timestamp, decode, encode, lift, now, parse, zero


def test_json_round_trip_at_seconds_precision() -> None:
    t1 = now()

    bs = encode(t1)
    t2 = decode(bs)

    assert t2 == lift(t1.utc().replace(microsecond=0))
    assert Timestamp.from_json(t1.to_json()) == t2


@pytest.mark.parametrize(
    "instant",
    [
        datetime(1970, 1, 1, tzinfo=timezone.utc),
        datetime(999, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        datetime(2018, 11, 18, 9, 4, 23, tzinfo=timezone(timedelta(hours=-8))),
        datetime(2038, 1, 19, 3, 14, 8, tzinfo=timezone(timedelta(hours=5, minutes=30))),
    ],
)
def test_round_trip_keeps_the_instant(instant: datetime) -> None:
    assert decode(encode(lift(instant))) == lift(instant)


def test_encode_normalizes_to_utc() -> None:
    pst = datetime(2018, 11, 18, 9, 4, 23, tzinfo=timezone(timedelta(hours=-8)))
    assert encode(lift(pst)) == '"2018-11-18T17:04:23Z"'


def test_encode_drops_fractional_seconds() -> None:
    t1 = lift(datetime(2018, 12, 14, 20, 36, 58, 999999, tzinfo=timezone.utc))
    assert encode(t1) == '"2018-12-14T20:36:58Z"'


def test_encode_pads_early_years() -> None:
    assert encode(lift(datetime(999, 1, 1, tzinfo=timezone.utc))) == '"0999-01-01T00:00:00Z"'


def test_zero_encodes_as_null_and_back() -> None:
    assert encode(zero()) == "null"
    assert decode("null").is_zero()
    assert decode(b"null") == zero()


def test_decode_utc_z() -> None:
    t3 = decode('"2018-11-27T00:54:53Z"')
    assert not t3.is_zero()
    assert t3.utc() == datetime(2018, 11, 27, 0, 54, 53, tzinfo=timezone.utc)


def test_decode_empty_string_fails() -> None:
    with pytest.raises(MalformedInput) as excinfo:
        decode('""')

    assert "empty date time" in str(excinfo.value)
    assert excinfo.value.text == ""


def test_decode_rfc3339_with_offset() -> None:
    text = datetime.now(timezone(timedelta(hours=2))).replace(microsecond=0).isoformat()
    t1 = decode(json.dumps(text))
    assert not t1.is_zero()


def test_decode_javascript_iso_string() -> None:
    # (new Date).toISOString() in Chrome and Firefox
    document = json.loads('{"time": "2018-12-14T20:36:58.789Z"}')
    t1 = parse(document["time"])

    assert t1.to_display_string() == "2018-12-14 20:36:58 +0000 UTC"
    assert t1.utc().microsecond == 789000


def test_decode_numeric_offset() -> None:
    t1 = decode('"2018-11-18T09:04:23-08:00"')

    assert t1 == decode('"2018-11-18T17:04:23Z"')
    assert t1.instant is not None
    assert t1.instant.utcoffset() == timedelta(hours=-8)
    assert encode(t1) == '"2018-11-18T17:04:23Z"'


def test_decode_numeric_offset_without_colon() -> None:
    t1 = decode('"2018-11-18T09:04:23-0800"')
    assert t1 == lift(datetime(2018, 11, 18, 17, 4, 23, tzinfo=timezone.utc))


def test_decode_truncates_nanoseconds() -> None:
    t1 = decode('"2018-12-14T20:36:58.123456789Z"')
    assert t1.utc().microsecond == 123456


def test_decode_accepts_lowercase_separators() -> None:
    assert decode('"2018-11-27t00:54:53z"') == decode('"2018-11-27T00:54:53Z"')


def test_decode_bytes() -> None:
    assert decode(b'"2018-11-27T00:54:53Z"') == decode('"2018-11-27T00:54:53Z"')


@pytest.mark.parametrize(
    "text",
    [
        "not-a-date",
        "2018-11-27",
        "2018-11-27 00:54:53Z",
        "2018-11-27T00:54:53",
        "2018-13-27T00:54:53Z",
        "2018-12-31T23:59:60Z",
        "2018-11-27T00:54:53+24:00",
        " 2018-11-27T00:54:53Z",
        "2018-11-27T00:54:53Z\n",
        "٢٠١٨-11-27T00:54:53Z",
        "2018-11-27T00:54:53.٥Z",
    ],
)
def test_decode_rejects_malformed_text(text: str) -> None:
    with pytest.raises(MalformedInput) as excinfo:
        decode(json.dumps(text))

    assert excinfo.value.text == text
    assert repr(text) in str(excinfo.value)


def test_malformed_input_lists_every_format_tried() -> None:
    with pytest.raises(MalformedInput) as excinfo:
        decode('"not-a-date"')

    names = [name for name, _ in excinfo.value.errors]
    assert names == ["rfc3339", "iso8601-numeric-offset"]
    assert "rfc3339" in str(excinfo.value)


def test_malformed_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse("yesterday")


@pytest.mark.parametrize("data", ["123", "{}", "[]", "true"])
def test_decode_rejects_non_string_json(data: str) -> None:
    with pytest.raises(MalformedInput):
        decode(data)


@pytest.mark.parametrize("data", ["", "2018-11-27T00:54:53Z", '"unterminated', b"\xc3\x28"])
def test_decode_rejects_invalid_json(data: str | bytes) -> None:
    with pytest.raises(MalformedInput):
        decode(data)


@pytest.mark.parametrize(
    "text", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00", "9999-12-31T23:59:59-0100"]
)
def test_decode_rejects_instants_outside_the_utc_range(text: str) -> None:
    with pytest.raises(MalformedInput) as excinfo:
        decode(json.dumps(text))

    assert excinfo.value.text == text
    assert any("out of range" in msg for _, msg in excinfo.value.errors)
