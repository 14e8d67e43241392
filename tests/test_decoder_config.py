import pytest
from pydantic import ValidationError

from strum.models.decoder_config import DecoderConfig


def test_defaults():
    cfg = DecoderConfig()

    assert cfg.tokenizer == "whitespace"
    assert cfg.separator is None
    assert cfg.pattern is None
    assert cfg.dayfirst is False
    assert cfg.default_timezone == "UTC"
    assert cfg.encoding == "utf-8"
    assert cfg.max_line_length is None


def test_split_requires_separator():
    with pytest.raises(ValidationError) as exc:
        DecoderConfig(tokenizer="split")

    assert "separator is required" in str(exc.value)


def test_split_accepts_empty_separator():
    assert DecoderConfig(tokenizer="split", separator="").separator == ""


def test_regexp_requires_pattern():
    with pytest.raises(ValidationError) as exc:
        DecoderConfig(tokenizer="regexp")

    assert "pattern is required" in str(exc.value)


def test_pattern_must_compile():
    with pytest.raises(ValidationError) as exc:
        DecoderConfig(tokenizer="regexp", pattern="(unclosed")

    assert "pattern does not compile" in str(exc.value)


def test_unknown_time_zone_is_rejected():
    with pytest.raises(ValidationError) as exc:
        DecoderConfig(default_timezone="Mars/Olympus_Mons")

    assert "unknown time zone" in str(exc.value)


def test_max_line_length_must_be_positive():
    with pytest.raises(ValidationError):
        DecoderConfig(max_line_length=0)


def test_from_value():
    cfg = DecoderConfig(dayfirst=True)

    assert DecoderConfig.from_value(None) == DecoderConfig()
    assert DecoderConfig.from_value(cfg) is cfg
    assert DecoderConfig.from_value({"tokenizer": "split", "separator": ","}).separator == ","
