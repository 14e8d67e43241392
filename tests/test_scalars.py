import math
import struct

import pytest

from strum.parsers.scalars import parse_bool, parse_float, parse_int, parse_uint


def f32(value):
    return struct.unpack("<f", struct.pack("<f", value))[0]


@pytest.mark.parametrize(
    "text, expected",
    [("true", True), ("false", False), ("trUe", True), ("FALSE", False)],
)
def test_parse_bool_accepts_true_and_false_in_any_case(text, expected):
    assert parse_bool(text) is expected


@pytest.mark.parametrize("text", ["yes", "1", "t", "", "truee"])
def test_parse_bool_rejects_everything_else(text):
    with pytest.raises(ValueError, match="invalid syntax"):
        parse_bool(text)


def test_parse_bool_error_names_the_string():
    with pytest.raises(ValueError, match='parsing "yes"'):
        parse_bool("yes")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", 0),
        ("42", 42),
        ("-42", -42),
        ("+7", 7),
        ("0xa", 10),
        ("-0xE", -14),
        ("0XFF", 255),
        ("0o17", 15),
        ("017", 15),
        ("00", 0),
        ("0b101", 5),
        ("1_000_000", 1_000_000),
        ("0x_ff", 255),
        ("0_7", 7),
    ],
)
def test_parse_int_literal_grammar(text, expected):
    assert parse_int(text) == expected


@pytest.mark.parametrize("text", ["", "-", "08", "0x", "1_", "_1", "1__0", "1.0", "abc", " 1", "1e3", "0b2"])
def test_parse_int_rejects_malformed_literals(text):
    with pytest.raises(ValueError, match="invalid syntax"):
        parse_int(text)


@pytest.mark.parametrize(
    "bits, low, high",
    [(8, -128, 127), (16, -32768, 32767), (32, -(2**31), 2**31 - 1), (64, -(2**63), 2**63 - 1)],
)
def test_parse_int_range_is_checked_per_width(bits, low, high):
    assert parse_int(str(low), bits) == low
    assert parse_int(str(high), bits) == high

    with pytest.raises(ValueError, match="value out of range"):
        parse_int(str(high + 1), bits)
    with pytest.raises(ValueError, match="value out of range"):
        parse_int(str(low - 1), bits)


def test_parse_int_accepts_separated_extremes():
    assert parse_int("9_223_372_036_854_775_807") == 2**63 - 1
    assert parse_int("-9_223_372_036_854_775_808") == -(2**63)
    with pytest.raises(ValueError, match="out of range"):
        parse_int("9_223_372_036_854_775_808")


def test_parse_uint_range():
    assert parse_uint("255", 8) == 255
    assert parse_uint("18_446_744_073_709_551_615") == 2**64 - 1
    with pytest.raises(ValueError, match="value out of range"):
        parse_uint("256", 8)
    with pytest.raises(ValueError, match="value out of range"):
        parse_uint("18_446_744_073_709_551_616")


@pytest.mark.parametrize("text", ["-1", "-0", "+1", "-0xa"])
def test_parse_uint_rejects_signs_as_syntax_errors(text):
    with pytest.raises(ValueError, match="invalid syntax"):
        parse_uint(text, 8)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", 0.0),
        ("1.5", 1.5),
        ("-2.25", -2.25),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("1_000.5", 1000.5),
        ("0x1p-2", 0.25),
        ("-0x1.8p1", -3.0),
        ("1e-400", 0.0),
    ],
)
def test_parse_float_literal_grammar(text, expected):
    assert parse_float(text) == expected


@pytest.mark.parametrize("text", ["Inf", "+inf", "Infinity", "-INF"])
def test_parse_float_infinities(text):
    value = parse_float(text)
    assert math.isinf(value)
    assert (value < 0) == text.startswith("-")


def test_parse_float_nan():
    assert math.isnan(parse_float("NaN"))


@pytest.mark.parametrize("text", ["", "3.41+e38", "1e", "1__0.0", "_1.0", "0x1.8", "1.0f", " 1.0", "-nan"])
def test_parse_float_rejects_malformed_literals(text):
    with pytest.raises(ValueError, match="invalid syntax"):
        parse_float(text)


def test_parse_float_out_of_range_for_each_precision():
    with pytest.raises(ValueError, match="value out of range"):
        parse_float("3.41e310")
    with pytest.raises(ValueError, match="value out of range"):
        parse_float("3.41e38", 32)
    assert parse_float("3.41e38") == 3.41e38


def test_parse_float32_rounds_to_single_precision():
    assert parse_float("1.2", 32) == f32(1.2)
    assert parse_float("1.2", 32) != 1.2
    assert parse_float("3.40282346638528859811704183484516925440e+38", 32) == f32(3.4028234663852886e38)
    assert parse_float("1.401298464324817070923729583289916131280e-45", 32) == struct.unpack(
        "<f", b"\x01\x00\x00\x00"
    )[0]


def test_parse_float64_extremes():
    assert parse_float("1.79769313486231570814527423731704356798070e+308") == 1.7976931348623157e308
    assert parse_float("4.9406564584124654417656879286822137236505980e-324") == 5e-324
