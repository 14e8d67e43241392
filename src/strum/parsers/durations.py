"""Duration strings such as ``1h30m``, ``-1.5s`` or ``300ms``.

A duration is an optional sign followed by one or more terms, each a
decimal number with a unit suffix. The bare string ``0`` needs no unit.
"""

from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction
from typing import Dict

NANOSECONDS: Dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # Greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 60 * 60 * 1_000_000_000,
}

_MAX_NANOSECONDS = (1 << 63) - 1

_TERM = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")


def _quote(text: str) -> str:
    return '"' + text.replace('"', '\\"') + '"'


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta, rounded to whole microseconds."""
    body = text
    negative = False
    if body[:1] in ("-", "+"):
        negative = body[0] == "-"
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if body == "":
        raise ValueError(f"invalid duration {_quote(text)}")

    total = Fraction(0)
    pos = 0
    while pos < len(body):
        match = _TERM.match(body, pos)
        whole, frac, unit = match.group("whole"), match.group("frac"), match.group("unit")
        if not whole and not frac:
            raise ValueError(f"invalid duration {_quote(text)}")
        if not unit:
            raise ValueError(f"missing unit in duration {_quote(text)}")
        try:
            scale = NANOSECONDS[unit]
        except KeyError:
            raise ValueError(f"unknown unit {_quote(unit)} in duration {_quote(text)}") from None

        amount = Fraction(int(whole or "0"))
        if frac:
            amount += Fraction(int(frac), 10 ** len(frac))
        total += amount * scale
        pos = match.end()

    limit = _MAX_NANOSECONDS + 1 if negative else _MAX_NANOSECONDS
    if total > limit:
        raise ValueError(f"invalid duration {_quote(text)}")
    if negative:
        total = -total

    return timedelta(microseconds=round(total / 1000))
