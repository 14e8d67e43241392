import logging
import sys
import contextvars
from typing import Optional

# Context variable to carry the name of the input being decoded
_SOURCE: contextvars.ContextVar[str] = contextvars.ContextVar("source", default="-")


class _SourceFilter(logging.Filter):
    """Logging filter that injects the current input source name into the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.source = _SOURCE.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | source=%(source)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_root_logger(level: str = "INFO") -> None:
    """
    Configure the root logger and the strum-specific logger.

    Root logger stays at WARNING so that third-party parsers stay quiet.
    Only the strum namespace is set to the requested level.

    Args:
        level: Log level for strum logs (DEBUG, INFO, WARNING, ERROR).

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    Library code never calls this; it is meant for the CLI and scripts.
    """
    root = logging.getLogger()
    strum_logger = logging.getLogger("strum")

    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and any(isinstance(f, _SourceFilter) for f in h.filters):
            # Already configured; just update strum logger level
            strum_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_SourceFilter())
    handler.setLevel(logging.DEBUG)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    strum_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = "strum") -> logging.Logger:
    """
    Get a module-specific logger.

    Handlers are left to the application; attach one with
    ``configure_root_logger`` when running from the command line.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, _SourceFilter) for f in logger.filters):
        logger.addFilter(_SourceFilter())
    return logger


def push_source(name: Optional[str]) -> Optional[contextvars.Token]:
    """Set the current input source name in context and return a token for later reset."""
    if not name:
        return None
    return _SOURCE.set(name)


def reset_source(token: Optional[contextvars.Token]) -> None:
    """Reset the source context using the provided token (if any)."""
    if token is None:
        return
    _SOURCE.reset(token)


def current_source() -> str:
    return _SOURCE.get()
