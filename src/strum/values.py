"""
Value decoding: turning a line, or a single token, into a destination.

``ValueDecoder`` switches on the destination's shape. At line level a
shape either takes the whole line (strings), exactly one token (scalars),
or all tokens of the line (aggregates and sequences). Indirection
allocates a ``Ptr`` cell when needed and recurses with the same rules.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

from strum.core.contracts import DateParser, Tokenizer
from strum.core.exceptions import (
    ArityError,
    InvalidArgumentError,
    ParseError,
    StrumException,
    TokenizationError,
    UnsupportedTypeError,
)
from strum.core.logger import get_logger
from strum.parsers.durations import parse_duration
from strum.parsers.scalars import parse_bool, parse_float, parse_int, parse_uint
from strum.shapes import Ptr, Ref, Shape, ShapeKind, build_aggregate, classify, zero_value

logger = get_logger(__name__)

_PLAIN_BASES = (bool, str, int, float)
_KIND_BASES = frozenset({ShapeKind.BOOL, ShapeKind.STRING, ShapeKind.INT, ShapeKind.UINT, ShapeKind.FLOAT})

_SCALAR_PARSERS: Dict[ShapeKind, Callable[[str, Shape], Any]] = {
    ShapeKind.DURATION: lambda token, shape: parse_duration(token),
    ShapeKind.BOOL: lambda token, shape: parse_bool(token),
    ShapeKind.STRING: lambda token, shape: token,
    ShapeKind.INT: lambda token, shape: parse_int(token, shape.bits),
    ShapeKind.UINT: lambda token, shape: parse_uint(token, shape.bits),
    ShapeKind.FLOAT: lambda token, shape: parse_float(token, shape.bits),
}


class ValueDecoder:
    def __init__(self, tokenizer: Tokenizer, date_parser: DateParser):
        self.tokenizer = tokenizer
        self.date_parser = date_parser

    def tokenize(self, line: str) -> Tuple[str, ...]:
        try:
            tokens = self.tokenizer(line)
        except StrumException:
            raise
        except Exception as exc:
            raise TokenizationError(f"tokenizer failed: {exc}", line=line) from exc
        tokens = tuple(tokens)
        logger.debug(f"tokenized line into {len(tokens)} tokens")
        return tokens

    def decode_line(self, location: Any, shape: Shape, line: str) -> None:
        """Decode one line of input into ``location.value``."""
        kind = shape.kind

        if kind is ShapeKind.STRING:
            # A bare string takes the whole line, untokenized.
            self.decode_token(location, shape, line, shape.name)
        elif shape.takes_token:
            tokens = self.tokenize(line)
            if len(tokens) != 1:
                raise ArityError.single_token(shape.name, len(tokens))
            self.decode_token(location, shape, tokens[0], shape.name)
        elif kind is ShapeKind.AGGREGATE:
            self._decode_aggregate(location, shape, self.tokenize(line))
        elif kind is ShapeKind.SEQUENCE:
            self._decode_sequence(location, shape, self.tokenize(line))
        elif kind is ShapeKind.INDIRECT:
            self.decode_line(_cell(location, shape), classify(shape.element), line)
        else:
            raise UnsupportedTypeError(shape.name)

    def decode_token(self, location: Any, shape: Shape, token: str, name: str) -> None:
        """Decode a single token into ``location.value``; ``name`` labels errors."""
        kind = shape.kind

        if kind is ShapeKind.INDIRECT:
            self.decode_token(_cell(location, shape), classify(shape.element), token, name)
            return

        if kind is ShapeKind.TEXT:
            target = location.value if isinstance(location.value, shape.base) else shape.base()
            try:
                target.unmarshal_text(token)
            except Exception as exc:
                raise ParseError(name, str(exc)) from exc
            location.value = target
            return

        if kind is ShapeKind.TIMESTAMP:
            try:
                location.value = self.date_parser(token)
            except Exception as exc:
                raise ParseError(name, str(exc)) from exc
            return

        parser = _SCALAR_PARSERS.get(kind)
        if parser is None:
            raise UnsupportedTypeError(shape.name)
        try:
            location.value = _construct(shape, parser(token, shape))
        except (ValueError, OverflowError) as exc:
            raise ParseError(name, str(exc)) from exc

    def _decode_aggregate(self, location: Any, shape: Shape, tokens: Tuple[str, ...]) -> None:
        """Reset ``location.value`` to a zero record, then fill members from tokens in order.

        The reset is written before any member is decoded, so a field that
        fails to parse leaves the zero record in place, never the previous
        line's values.
        """
        members = shape.members
        if len(tokens) > len(members):
            raise ArityError.too_many(shape.name, len(members), len(tokens))

        location.value = build_aggregate(shape, {m.name: m.zero() for m in members if m.init})
        values = {member.name: member.zero() for member in members}
        for member, token in zip(members, tokens):
            slot = Ref(member.type, values[member.name])
            self.decode_token(slot, classify(member.type), token, f"{shape.name}.{member.name}")
            values[member.name] = slot.value

        location.value = build_aggregate(shape, values)

    def _decode_sequence(self, location: Any, shape: Shape, tokens: Tuple[str, ...]) -> None:
        if location.value is None:
            location.value = []
        elif not isinstance(location.value, list):
            raise InvalidArgumentError(
                f"cannot append to {type(location.value).__name__} held by {shape.name} destination"
            )

        element = classify(shape.element)
        decoded: List[Any] = []
        for token in tokens:
            slot = Ref(shape.element, zero_value(shape.element))
            self.decode_token(slot, element, token, element.name)
            decoded.append(slot.value)

        location.value.extend(decoded)


def _cell(location: Any, shape: Shape) -> Ptr:
    """Return the Ptr held by ``location``, allocating a zero-valued one when unset."""
    if location.value is None:
        location.value = Ptr(zero_value(shape.element))
    return location.value


def _construct(shape: Shape, value: Any) -> Any:
    # Subclasses of the plain scalar types, IntEnum included, are built
    # from the parsed base value.
    if shape.kind in _KIND_BASES and shape.base not in _PLAIN_BASES:
        return shape.base(value)
    return value
