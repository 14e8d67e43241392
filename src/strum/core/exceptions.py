"""
Custom exception classes for strum.

Provides structured error handling with domain-specific exceptions
for each stage of line decoding: reading, tokenizing, dispatching on
the destination shape, and parsing individual tokens.
"""

from typing import Optional


class StrumException(Exception):
    """Base exception class for all strum decoding failures."""

    pass


class TokenizationError(StrumException):
    """
    Raised when a line cannot be broken into tokens.

    This occurs when:
    - A regexp tokenizer does not match the line
    - A regexp tokenizer has no capture groups (a misconfiguration,
      reported the same way)
    - A custom tokenizer raises

    Example:
        >>> raise TokenizationError("regexp failed to match line", line="John")
    """

    def __init__(self, reason: str, line: Optional[str] = None):
        self.reason = reason
        self.line = line
        message = reason
        if line is not None:
            message += f" {line!r}"
        super().__init__(message)


class ArityError(StrumException):
    """Raised when a line yields the wrong number of tokens for its destination."""

    def __init__(self, message: str, target: str, found: int):
        self.target = target
        self.found = found
        super().__init__(message)

    @classmethod
    def single_token(cls, target: str, found: int) -> "ArityError":
        return cls(f"decoding {target}: expected 1 token, but found {found}", target, found)

    @classmethod
    def too_many(cls, target: str, slots: int, found: int) -> "ArityError":
        return cls(
            f"too many tokens for struct {target}: expected at most {slots}, found {found}",
            target,
            found,
        )


class ParseError(StrumException, ValueError):
    """
    Raised when a token cannot be converted to its destination type.

    The message always names the destination (a type name, or
    ``Type.field`` for aggregate members) followed by the reason.

    Example:
        >>> raise ParseError("bool", 'parsing "yes": invalid syntax')
        # error decoding to bool: parsing "yes": invalid syntax
    """

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"error decoding to {target}: {reason}")


class UnsupportedTypeError(StrumException, TypeError):
    """Raised when no decoding rule applies to a destination type."""

    def __init__(self, type_name: str, message: Optional[str] = None):
        self.type_name = type_name
        super().__init__(message or f"unsupported type {type_name}")


class InaccessibleMemberError(UnsupportedTypeError):
    """Raised when an aggregate declares a member that cannot be assigned by name."""

    def __init__(self, type_name: str, member: str):
        self.member = member
        super().__init__(type_name, f"cannot decode to inaccessible member {type_name}.{member}")


class InvalidArgumentError(StrumException, TypeError):
    """Raised when an entry point receives something other than a usable destination."""

    pass


class InputError(StrumException, OSError):
    """Raised when the input source yields a line the decoder refuses to read."""

    pass


class TokenizerRegistryError(StrumException, RuntimeError):
    """Raised for unknown or duplicate tokenizer registrations."""

    pass


class EndOfInput(EOFError):
    """
    Sentinel raised when the input has no more lines.

    Not a StrumException: callers branch on it to end their decode
    loops, and ``decode_all`` consumes it as normal termination.
    """

    def __init__(self, message: str = "end of input"):
        super().__init__(message)
