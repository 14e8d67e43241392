"""String to scalar conversions for booleans, integers and floats.

The numeric grammars follow the integer and floating point literal
syntax of C-family languages: base prefixes (``0x``, ``0o``, ``0b`` and a
legacy leading ``0`` for octal), underscores between digits, hexadecimal
floats with a binary exponent, and the ``inf``/``nan`` spellings.

Every parser raises ``ValueError`` with a message of the form
``parsing "<text>": <problem>``; callers attach the destination name.
"""

from __future__ import annotations

import math
import re
import struct

_INT_LITERAL = re.compile(
    r"""
    (?P<sign>[+-])?
    (?:
        0[xX](?P<hex>_?[0-9a-fA-F]+(?:_[0-9a-fA-F]+)*)
      | 0[oO](?P<oct>_?[0-7]+(?:_[0-7]+)*)
      | 0[bB](?P<bin>_?[01]+(?:_[01]+)*)
      | 0(?P<legacy>_?[0-7]+(?:_[0-7]+)*)
      | (?P<dec>[1-9][0-9]*(?:_[0-9]+)*|0)
    )
    """,
    re.VERBOSE,
)

_BASES = (("hex", 16), ("oct", 8), ("bin", 2), ("legacy", 8), ("dec", 10))

_DIGITS = r"[0-9](?:_?[0-9])*"
_HEX_DIGITS = r"[0-9a-fA-F](?:_?[0-9a-fA-F])*"

_DECIMAL_FLOAT = re.compile(
    rf"[+-]?(?:{_DIGITS}(?:\.(?:{_DIGITS})?)?|\.{_DIGITS})(?:[eE][+-]?{_DIGITS})?"
)
_HEX_FLOAT = re.compile(
    rf"[+-]?0[xX](?:{_HEX_DIGITS}(?:\.(?:{_HEX_DIGITS})?)?|\.{_HEX_DIGITS})[pP][+-]?{_DIGITS}"
)
_SPECIAL_FLOAT = re.compile(r"[+-]?inf(?:inity)?|nan", re.IGNORECASE)


def syntax_error(text: str) -> ValueError:
    return ValueError(f"parsing {_quote(text)}: invalid syntax")


def range_error(text: str) -> ValueError:
    return ValueError(f"parsing {_quote(text)}: value out of range")


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise syntax_error(text)


def _int_literal(text: str) -> tuple[str, int]:
    match = _INT_LITERAL.fullmatch(text)
    if match is None:
        raise syntax_error(text)
    for group, base in _BASES:
        digits = match.group(group)
        if digits is not None:
            return match.group("sign") or "", int(digits.replace("_", ""), base)
    raise syntax_error(text)


def parse_int(text: str, bits: int = 64) -> int:
    """Parse a signed integer literal that must fit in ``bits`` two's complement bits."""
    sign, magnitude = _int_literal(text)
    value = -magnitude if sign == "-" else magnitude
    if not -(1 << (bits - 1)) <= value <= (1 << (bits - 1)) - 1:
        raise range_error(text)
    return value


def parse_uint(text: str, bits: int = 64) -> int:
    """Parse an unsigned integer literal; any sign character is a syntax error."""
    sign, value = _int_literal(text)
    if sign:
        raise syntax_error(text)
    if value > (1 << bits) - 1:
        raise range_error(text)
    return value


def parse_float(text: str, bits: int = 64) -> float:
    """Parse a float literal, rounding to single precision when ``bits`` is 32."""
    if _SPECIAL_FLOAT.fullmatch(text):
        return float(text)

    if _HEX_FLOAT.fullmatch(text):
        try:
            value = float.fromhex(text.replace("_", ""))
        except OverflowError as exc:
            raise range_error(text) from exc
    elif _DECIMAL_FLOAT.fullmatch(text):
        value = float(text.replace("_", ""))
        if math.isinf(value):
            raise range_error(text)
    else:
        raise syntax_error(text)

    if bits == 32:
        return round_float32(value, text)
    return value


def round_float32(value: float, text: str = "") -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError as exc:
        raise range_error(text or repr(value)) from exc
