from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Protocol, Sequence, Union, runtime_checkable

# A tokenizer breaks one line of input into positional string tokens.
Tokenizer = Callable[[str], Sequence[str]]

# A date parser turns one token into a timestamp, raising on failure.
DateParser = Callable[[str], datetime]

# Anything that yields lines: text streams, binary streams, lists of strings.
LineSource = Iterable[Union[str, bytes]]


@runtime_checkable
class TextUnmarshaler(Protocol):
    """Types that know how to parse themselves from a single token.

    The decoder creates a zero instance with ``cls()`` and calls
    ``unmarshal_text`` on it; the method mutates the instance in place and
    raises on malformed input.

    This protocol is a typing aid only. Classification looks for a
    callable ``unmarshal_text`` attribute, so classes do not need to
    inherit from it.
    """

    def unmarshal_text(self, text: str) -> None: ...
