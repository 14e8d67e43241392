"""
Line sessions over an input source.

A ``Decoder`` owns the input iterator, the active tokenizer and date
parser, and the count of lines read. Every decode call consumes exactly
one line, except ``decode_all``, which consumes lines until the input ends.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Pattern, Type, TypeVar, Union

from strum.core.contracts import DateParser, LineSource, Tokenizer
from strum.core.exceptions import EndOfInput, InputError, InvalidArgumentError
from strum.core.logger import get_logger, push_source, reset_source
from strum.models.decoder_config import DecoderConfig
from strum.parsers.timestamps import DefaultDateParser
from strum.shapes import Ref, Shape, ShapeKind, classify, validate_line_shape
from strum.tokenizers.builtin import split_on, token_regexp
from strum.tokenizers.registry import build_tokenizer
from strum.values import ValueDecoder

logger = get_logger(__name__)

T = TypeVar("T")

ConfigLike = Union[DecoderConfig, Dict[str, Any], None]


class Decoder:
    """
    Decodes line-oriented text into typed destinations, one line per call.

    Each call to ``decode`` reads the next line and converts it according
    to the declared type of the destination:

    - ``str``: the whole line
    - scalars (bool, int widths, float widths, timedelta, datetime, and
      text-decodable classes): exactly one token
    - dataclasses and pydantic models: one token per field, in order
    - ``list[T]``: every token of the line, appended
    - ``Ptr[T]``: allocated if unset, then decoded as ``T``

    Example:
        >>> d = Decoder.from_text("John 42\\nJane 23\\n")
        >>> people = Ref(list[Person])
        >>> d.decode_all(people)
        >>> people.value
        [Person(name='John', age=42), Person(name='Jane', age=23)]
    """

    def __init__(self, source: LineSource, config: ConfigLike = None, *, name: Optional[str] = None):
        """
        Initialize the decoder.

        Args:
            source: Iterable of lines (text stream, binary stream, list of str).
            config: DecoderConfig or a dict validated into one.
            name: Label for log records; defaults to the stream's ``name``.
        """
        if source is None or isinstance(source, (str, bytes, bytearray)):
            raise InvalidArgumentError(
                "source must be an iterable of lines; use Decoder.from_text or Decoder.from_bytes for in-memory data"
            )

        self.config = DecoderConfig.from_value(config)
        self.name = name or str(getattr(source, "name", "<input>"))
        self.line_number = 0

        self._lines = iter(source)
        self._tokenizer: Tokenizer = build_tokenizer(self.config)
        self._date_parser: DateParser = DefaultDateParser(
            dayfirst=self.config.dayfirst,
            default_timezone=self.config.default_timezone,
        )

    @classmethod
    def from_config(cls, source: LineSource, config: ConfigLike) -> "Decoder":
        return cls(source, config)

    @classmethod
    def from_text(cls, text: str, config: ConfigLike = None) -> "Decoder":
        return cls(io.StringIO(text), config, name="<text>")

    @classmethod
    def from_bytes(cls, data: bytes, config: ConfigLike = None) -> "Decoder":
        return cls(io.BytesIO(bytes(data)), config, name="<bytes>")

    # --- configuration -------------------------------------------------

    def with_tokenizer(self, tokenizer: Tokenizer) -> "Decoder":
        """Replace the active tokenizer with a custom function."""
        self._tokenizer = tokenizer
        return self

    def with_split_on(self, separator: str) -> "Decoder":
        """Tokenize by splitting on a literal separator string."""
        return self.with_tokenizer(split_on(separator))

    def with_token_regexp(self, pattern: Union[str, Pattern[str]]) -> "Decoder":
        """Tokenize with the capture groups of a pattern that matches a whole line."""
        return self.with_tokenizer(token_regexp(pattern))

    def with_date_parser(self, parser: DateParser) -> "Decoder":
        """Replace the timestamp parser used for ``datetime`` destinations."""
        self._date_parser = parser
        return self

    # --- reading -------------------------------------------------------

    def _readline(self) -> str:
        try:
            raw = next(self._lines)
        except StopIteration:
            raise EndOfInput() from None

        self.line_number += 1
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = raw.decode(self.config.encoding)
            except UnicodeDecodeError as exc:
                raise InputError(f"line {self.line_number} is not valid {self.config.encoding}: {exc}") from exc
        line = raw[:-1] if raw.endswith("\n") else raw
        if line.endswith("\r"):
            line = line[:-1]

        limit = self.config.max_line_length
        if limit is not None and len(line) > limit:
            raise InputError(f"line {self.line_number} is {len(line)} characters long, over the limit of {limit}")

        logger.debug(f"read line {self.line_number} ({len(line)} chars)")
        return line

    @contextmanager
    def _source_context(self) -> Iterator[None]:
        token = push_source(self.name)
        try:
            yield
        finally:
            reset_source(token)

    def _values(self) -> ValueDecoder:
        return ValueDecoder(self._tokenizer, self._date_parser)

    def tokens(self) -> list[str]:
        """Read the next line and return its tokens (for testing and diagnostics)."""
        with self._source_context():
            values = self._values()
            return list(values.tokenize(self._readline()))

    # --- decoding ------------------------------------------------------

    def _entry_shape(self, ref: Any, operation: str) -> Shape:
        if not isinstance(ref, Ref):
            raise InvalidArgumentError(
                f"argument to {operation} must be a Ref, not {type(ref).__name__}"
            )
        return classify(ref.type)

    def _decode_line(self, ref: Ref, shape: Shape) -> None:
        validate_line_shape(shape)
        line = self._readline()
        self._values().decode_line(ref, shape, line)

    def decode(self, ref: Ref) -> None:
        """
        Read the next line and decode it into ``ref``.

        Raises:
            EndOfInput: If there are no more lines.
            InvalidArgumentError: If ``ref`` is not a Ref.
            StrumException: For any tokenizing, arity or parse failure.
        """
        shape = self._entry_shape(ref, "decode")
        with self._source_context():
            self._decode_line(ref, shape)

    def decode_as(self, type_: Type[T]) -> T:
        """Decode the next line into a fresh destination of ``type_`` and return its value."""
        ref = Ref(type_)
        self.decode(ref)
        return ref.value

    def iter_decode(self, type_: Type[T]) -> Iterator[T]:
        """Yield one decoded value per remaining line."""
        while True:
            try:
                yield self.decode_as(type_)
            except EndOfInput:
                return

    def decode_all(self, ref: Ref) -> None:
        """
        Decode every remaining line, appending one element per line to ``ref.value``.

        ``ref`` must be declared as ``list[T]``; an unset value becomes ``[]``.
        Elements decoded before a failure stay in the list.
        """
        shape = self._entry_shape(ref, "decode_all")
        if shape.kind is not ShapeKind.SEQUENCE:
            raise InvalidArgumentError(f"argument to decode_all must be a Ref to a list, not {shape.name}")
        if ref.value is None:
            ref.value = []
        elif not isinstance(ref.value, list):
            raise InvalidArgumentError(
                f"argument to decode_all must hold a list, not {type(ref.value).__name__}"
            )

        element_shape = classify(shape.element)
        count = 0
        with self._source_context():
            while True:
                slot = Ref(shape.element)
                try:
                    self._decode_line(slot, element_shape)
                except EndOfInput:
                    logger.debug(f"decoded {count} {element_shape.name} values from {self.line_number} lines")
                    return
                ref.value.append(slot.value)
                count += 1


def unmarshal(data: bytes, ref: Ref, config: ConfigLike = None) -> None:
    """Decode every line of a byte buffer into the list held by ``ref``."""
    Decoder.from_bytes(data, config).decode_all(ref)
