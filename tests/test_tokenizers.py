import re

import pytest

from strum.core.exceptions import TokenizationError
from strum.tokenizers.builtin import split_on, split_whitespace, token_regexp


def test_split_whitespace_collapses_runs_and_drops_empties():
    assert split_whitespace("  John\tDoe   2021-01-01 ") == ["John", "Doe", "2021-01-01"]
    assert split_whitespace("") == []
    assert split_whitespace("   ") == []


def test_split_on_keeps_empty_tokens():
    tokenize = split_on(",")
    assert tokenize("a,,b") == ["a", "", "b"]
    assert tokenize(",") == ["", ""]
    assert tokenize("") == [""]


def test_split_on_multi_character_separator():
    assert split_on("||")("John Doe||2021-01-01") == ["John Doe", "2021-01-01"]


def test_split_on_empty_separator_splits_characters():
    assert split_on("")("abc") == ["a", "b", "c"]


def test_token_regexp_returns_capture_groups():
    tokenize = token_regexp(r"^(\S+)\s+(\d+)x(\d+)")
    assert tokenize("John 23x42") == ["John", "23", "42"]


def test_token_regexp_accepts_compiled_patterns():
    tokenize = token_regexp(re.compile(r"(\w+)=(\w+)"))
    assert tokenize("key=value") == ["key", "value"]


def test_token_regexp_must_match_entire_line():
    tokenize = token_regexp(r"(\d+)")
    with pytest.raises(TokenizationError, match="regexp failed to match line"):
        tokenize("12 apples")


def test_token_regexp_unmatched_optional_group_is_empty():
    tokenize = token_regexp(r"(\w+)(?:-(\w+))?")
    assert tokenize("alpha") == ["alpha", ""]
    assert tokenize("alpha-beta") == ["alpha", "beta"]


def test_token_regexp_without_groups_fails_for_any_line():
    tokenize = token_regexp(r"\w+")
    with pytest.raises(TokenizationError, match="no subexpressions"):
        tokenize("abc")
    with pytest.raises(TokenizationError, match="no subexpressions"):
        tokenize("!!!")


def test_tokenization_error_keeps_line():
    with pytest.raises(TokenizationError) as exc:
        token_regexp(r"(\d+)")("nope")
    assert exc.value.line == "nope"
