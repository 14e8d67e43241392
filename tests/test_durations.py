from datetime import timedelta

import pytest

from strum.parsers.durations import parse_duration


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", timedelta(0)),
        ("-0", timedelta(0)),
        ("5s", timedelta(seconds=5)),
        ("+5s", timedelta(seconds=5)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("-1.5h", timedelta(hours=-1.5)),
        ("300ms", timedelta(milliseconds=300)),
        ("2us", timedelta(microseconds=2)),
        ("2µs", timedelta(microseconds=2)),
        ("2μs", timedelta(microseconds=2)),
        ("4000ns", timedelta(microseconds=4)),
        (".5s", timedelta(milliseconds=500)),
        ("1.s", timedelta(seconds=1)),
        ("1m0.25s", timedelta(minutes=1, milliseconds=250)),
        ("1h1h", timedelta(hours=2)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_rounds_to_microseconds():
    assert parse_duration("1ns") == timedelta(0)
    assert parse_duration("1001ns") == timedelta(microseconds=1)


@pytest.mark.parametrize("text", ["", "-", ".", ".s", "not-a-duration-string", "s", "-.s", "--1s"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration(text)


def test_parse_duration_missing_unit():
    with pytest.raises(ValueError, match='missing unit in duration "1"'):
        parse_duration("1")
    with pytest.raises(ValueError, match="missing unit"):
        parse_duration("1h30")


def test_parse_duration_unknown_unit():
    with pytest.raises(ValueError, match='unknown unit "d" in duration "3d"'):
        parse_duration("3d")


def test_parse_duration_limits_to_signed_64_bit_nanoseconds():
    assert parse_duration("9223372036854775807ns") == timedelta(microseconds=9223372036854776)
    assert parse_duration("-9223372036854775808ns") == timedelta(microseconds=-9223372036854776)
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration("9223372036854775808ns")
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration("2562048h")
