from __future__ import annotations

import re
from typing import Any, Dict, Optional, Union

import pytz
from pydantic import BaseModel, PositiveInt, field_validator, model_validator


class DecoderConfig(BaseModel):
    """Settings for a Decoder: how lines are tokenized and how timestamps are read.

    The tokenizer name is looked up in the TokenizerRegistry, so strategies
    registered by callers are valid here too.
    """

    tokenizer: str = "whitespace"

    # Used by the "split" strategy; an empty string splits into characters.
    separator: Optional[str] = None
    # Used by the "regexp" strategy; must match a whole line.
    pattern: Optional[str] = None

    # Tie-break for ambiguous dates such as 01/02/2021.
    dayfirst: bool = False
    # Applied to timestamps that carry no zone of their own.
    default_timezone: str = "UTC"

    encoding: str = "utf-8"
    max_line_length: Optional[PositiveInt] = None

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"pattern does not compile: {exc}") from exc
        return value

    @field_validator("default_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
        return value

    @model_validator(mode="after")
    def _validate_strategy_requirements(self) -> "DecoderConfig":
        if self.tokenizer == "split" and self.separator is None:
            raise ValueError("separator is required when tokenizer is 'split'")
        if self.tokenizer == "regexp" and self.pattern is None:
            raise ValueError("pattern is required when tokenizer is 'regexp'")
        return self

    @classmethod
    def from_value(cls, value: Union["DecoderConfig", Dict[str, Any], None]) -> "DecoderConfig":
        if value is None:
            return cls()
        if isinstance(value, DecoderConfig):
            return value
        return cls.model_validate(value)
