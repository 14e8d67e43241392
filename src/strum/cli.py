"""
Command-line interface for strum.

Reads line-oriented text from a file or STDIN and prints either the tokens
of each line or a JSON record per line decoded with the requested field
types. It is a thin caller of the public Decoder API.
"""

import argparse
import dataclasses
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

import yaml

from strum.core.exceptions import EndOfInput, StrumException
from strum.core.logger import configure_root_logger, get_logger
from strum.decoder import Decoder
from strum.models.decoder_config import DecoderConfig
from strum.shapes import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)

logger = get_logger(__name__)

FIELD_TYPES: Dict[str, Any] = {
    "str": str,
    "bool": bool,
    "int": int,
    "int8": Int8,
    "int16": Int16,
    "int32": Int32,
    "int64": Int64,
    "uint": Uint,
    "uint8": Uint8,
    "uint16": Uint16,
    "uint32": Uint32,
    "uint64": Uint64,
    "float": float,
    "float32": Float32,
    "float64": Float64,
    "duration": timedelta,
    "timestamp": datetime,
}


def load_config(config_path: str) -> Dict[str, Any]:
    """Load a DecoderConfig mapping from a JSON or YAML file."""
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r") as f:
        if config_file.suffix == ".json":
            config = json.load(f)
        elif config_file.suffix in (".yaml", ".yml"):
            config = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_file.suffix}. "
                "Use .json or .yaml"
            )
    logger.info(f"Loaded config from {config_path}")
    return config or {}


def build_config(
    config_path: Optional[str] = None,
    *,
    split_on: Optional[str] = None,
    regexp: Optional[str] = None,
) -> DecoderConfig:
    """Merge a config file with command-line tokenizer overrides."""
    config: Dict[str, Any] = load_config(config_path) if config_path else {}
    if split_on is not None:
        config.update({"tokenizer": "split", "separator": split_on})
    if regexp is not None:
        config.update({"tokenizer": "regexp", "pattern": regexp})
    return DecoderConfig.model_validate(config)


def build_record_type(spec: str) -> type:
    """
    Build a dataclass from a field spec such as ``name:str,age:int,active:bool``.

    Unnamed entries (``str,int``) get positional names ``f0``, ``f1``, ...
    """
    fields = []
    for index, entry in enumerate(part.strip() for part in spec.split(",")):
        field_name, _, type_key = entry.rpartition(":")
        field_name = field_name or f"f{index}"
        try:
            fields.append((field_name, FIELD_TYPES[type_key]))
        except KeyError:
            raise ValueError(
                f"Unknown field type {type_key!r}; choose from {', '.join(FIELD_TYPES)}"
            ) from None
    return dataclasses.make_dataclass("Record", fields)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def main(
    command: str,
    *,
    stream: TextIO,
    types: Optional[str] = None,
    config: Optional[DecoderConfig] = None,
) -> List[Any]:
    """
    Run a command over a text stream and return its per-line results.

    Args:
        command: "tokens" or "decode"
        stream: Input text stream
        types: Field spec for "decode" (see build_record_type)
        config: Decoder settings

    Returns:
        Token lists for "tokens"; dicts of field values for "decode"

    Raises:
        ValueError: If the command or field spec is invalid
        StrumException: If a line fails to tokenize or decode
    """
    decoder = Decoder(stream, config)
    results: List[Any] = []

    if command == "tokens":
        while True:
            try:
                results.append(decoder.tokens())
            except EndOfInput:
                break
    elif command == "decode":
        if not types:
            raise ValueError("decode requires a field spec, e.g. --types name:str,age:int")
        record_type = build_record_type(types)
        for record in decoder.iter_decode(record_type):
            results.append(dataclasses.asdict(record))
    else:
        raise ValueError(f"Unknown command: {command!r}")

    logger.info(f"Processed {decoder.line_number} lines from {decoder.name}")
    return results


def cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Command-line interface for strum.

    Supports subcommands:
    - tokens: Print the tokens of each line as a JSON list
    - decode: Print each line decoded into typed fields as a JSON object

    Usage:
        strum tokens --split-on , data.csv
        strum decode --types name:str,age:int,active:bool people.txt
    """
    parser = argparse.ArgumentParser(
        prog="strum",
        description="Decode line-oriented text into typed values"
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "input",
        nargs="?",
        help="Input file (defaults to STDIN)"
    )
    common.add_argument(
        "--config", "-c",
        help="Path to decoder configuration file (JSON or YAML)"
    )
    tokenizer_group = common.add_mutually_exclusive_group()
    tokenizer_group.add_argument(
        "--split-on",
        help="Split fields on a literal separator instead of whitespace"
    )
    tokenizer_group.add_argument(
        "--regexp",
        help="Extract fields from the capture groups of a whole-line pattern"
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Command to execute"
    )
    subparsers.add_parser(
        "tokens",
        parents=[common],
        help="Show how each line is tokenized"
    )
    decode_parser = subparsers.add_parser(
        "decode",
        parents=[common],
        help="Decode each line into typed fields"
    )
    decode_parser.add_argument(
        "--types", "-t",
        required=True,
        help="Comma-separated field types, optionally named: name:str,age:int"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    configure_root_logger("DEBUG" if args.verbose else "WARNING")

    try:
        config = build_config(args.config, split_on=args.split_on, regexp=args.regexp)
        if args.input:
            with open(args.input, "r") as f:
                results = main(args.command, stream=f, types=getattr(args, "types", None), config=config)
        else:
            results = main(args.command, stream=sys.stdin, types=getattr(args, "types", None), config=config)
    except (StrumException, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)

    for result in results:
        print(json.dumps(result, default=_json_default))
    sys.exit(0)


if __name__ == "__main__":
    cli()
