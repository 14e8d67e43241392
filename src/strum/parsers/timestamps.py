from __future__ import annotations

from datetime import datetime

import pytz
from dateutil import parser as dateutil_parser

# The zero timestamp; also supplies missing components ("2021" -> 2021-01-01).
ZERO_TIME = datetime(1, 1, 1, tzinfo=pytz.utc)
_FILL = datetime(1, 1, 1)


class DefaultDateParser:
    """Heuristic timestamp parser accepting most human and machine date formats.

    Ambiguous day/month orderings are read month first unless ``dayfirst``
    is set. Timestamps without a zone are placed in ``default_timezone``.
    Errors from dateutil (``ValueError``/``OverflowError``) propagate with
    their original message.
    """

    def __init__(self, *, dayfirst: bool = False, default_timezone: str = "UTC"):
        self.dayfirst = dayfirst
        self.timezone = pytz.timezone(default_timezone)

    def __call__(self, text: str) -> datetime:
        parsed = dateutil_parser.parse(text, dayfirst=self.dayfirst, default=_FILL)
        if parsed.tzinfo is None:
            parsed = self.timezone.localize(parsed)
        return parsed

    def __repr__(self) -> str:
        return f"DefaultDateParser(dayfirst={self.dayfirst}, default_timezone={self.timezone.zone!r})"
