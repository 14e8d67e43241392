"""Built-in tokenizing strategies.

Each strategy is exposed two ways: a plain constructor used by the
Decoder's ``with_*`` helpers, and a registry factory that builds the same
tokenizer from a DecoderConfig.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Union

from strum.core.contracts import Tokenizer
from strum.core.exceptions import TokenizationError
from strum.models.decoder_config import DecoderConfig
from strum.tokenizers.registry import register_tokenizer


def split_whitespace(line: str) -> List[str]:
    return line.split()


def split_on(separator: str) -> Tokenizer:
    """Split on a literal separator, keeping empty tokens between adjacent separators."""

    def tokenize(line: str) -> List[str]:
        if separator == "":
            return list(line)
        return line.split(separator)

    return tokenize


def token_regexp(pattern: Union[str, Pattern[str]]) -> Tokenizer:
    """Extract tokens from the capture groups of a pattern matching the whole line."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def tokenize(line: str) -> List[str]:
        if compiled.groups == 0:
            raise TokenizationError(f"regexp {compiled.pattern!r} has no subexpressions")
        match = compiled.fullmatch(line)
        if match is None:
            raise TokenizationError("regexp failed to match line", line=line)
        # Drop the full match and return only submatches.
        return [group if group is not None else "" for group in match.groups()]

    return tokenize


@register_tokenizer("whitespace")
def _whitespace_factory(config: DecoderConfig) -> Tokenizer:
    return split_whitespace


@register_tokenizer("split")
def _split_factory(config: DecoderConfig) -> Tokenizer:
    return split_on(config.separator or "")


@register_tokenizer("regexp")
def _regexp_factory(config: DecoderConfig) -> Tokenizer:
    return token_regexp(config.pattern or "")
