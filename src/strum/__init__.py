"""strum.

String unmarshaling for line-oriented text: converts lines (such as from
STDIN) into strings, booleans, integers and floats of any width,
durations, timestamps, dataclass/pydantic records, and lists.

Public API for callers decoding text streams.
"""

from strum.core.exceptions import (
    ArityError,
    EndOfInput,
    InaccessibleMemberError,
    InputError,
    InvalidArgumentError,
    ParseError,
    StrumException,
    TokenizationError,
    TokenizerRegistryError,
    UnsupportedTypeError,
)
from strum.decoder import Decoder, unmarshal
from strum.models.decoder_config import DecoderConfig
from strum.shapes import (
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Ptr,
    Ref,
    TextUnmarshaler,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)

__version__ = "0.1.0"

__all__ = [
    "ArityError",
    "Decoder",
    "DecoderConfig",
    "EndOfInput",
    "Float32",
    "Float64",
    "InaccessibleMemberError",
    "InputError",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidArgumentError",
    "ParseError",
    "Ptr",
    "Ref",
    "StrumException",
    "TextUnmarshaler",
    "TokenizationError",
    "TokenizerRegistryError",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "UnsupportedTypeError",
    "unmarshal",
]
