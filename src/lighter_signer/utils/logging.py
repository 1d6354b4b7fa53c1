"""
Structured logging for the Lighter signer.

Thin layer over the standard ``logging`` module. Every logger lives under
the ``lighter_signer`` namespace so applications can tune the SDK's
verbosity independently; structured context is passed through ``extra=``
and rendered as ``key=value`` pairs by the default formatter.

Example:
    >>> from lighter_signer.utils.logging import get_logger, configure_logging
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Transaction signed", extra={"tx_type": 14, "nonce": 7})
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional, Union

ROOT_LOGGER_NAME = "lighter_signer"

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

# Context keys whose values must never reach a log sink.
_REDACTED_KEYS = frozenset({"private_key", "eth_private_key", "sig", "signature"})


class KeyValueFormatter(logging.Formatter):
    """Formatter that appends ``extra`` context as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return base
        pairs = " ".join(
            f"{key}={'<redacted>' if key in _REDACTED_KEYS else repr(value)}"
            for key, value in sorted(context.items())
        )
        return f"{base} | {pairs}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the SDK namespace.

    Args:
        name: Module name (usually ``__name__``). Names outside the
            ``lighter_signer`` namespace are nested under it.

    Returns:
        Standard library logger
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream: Any = None,
) -> logging.Logger:
    """
    Attach a stream handler to the SDK root logger.

    Calling this more than once replaces the previously installed handler
    rather than stacking duplicates.

    Args:
        level: Logging level (name or number)
        fmt: Format string for the message prefix
        stream: Output stream (defaults to stderr)

    Returns:
        The SDK root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_lighter_signer_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(KeyValueFormatter(fmt))
    handler._lighter_signer_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    root.disabled = False
    return root


def set_level(level: Union[int, str]) -> None:
    """Set the SDK log level."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def disable_logging() -> None:
    """Silence all SDK logging."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    # child loggers inherit the level; `disabled` alone only mutes the root
    root.setLevel(logging.CRITICAL + 1)
    root.disabled = True


def enable_debug() -> None:
    """Enable debug logging (installs a handler if none is configured)."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        configure_logging(level=logging.DEBUG)
    else:
        root.setLevel(logging.DEBUG)
        root.disabled = False


class LogContext(logging.LoggerAdapter):
    """
    Logger adapter that merges fixed context into every call.

    Example:
        >>> log = LogContext(get_logger(__name__), {"account_index": 42})
        >>> log.info("Nonce resolved", extra={"nonce": 7})
    """

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(logger, dict(context or {}))

    def process(self, msg: Any, kwargs: Any) -> Any:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **context: Any) -> "LogContext":
        """Return a new adapter with additional context."""
        merged = dict(self.extra or {})
        merged.update(context)
        return LogContext(self.logger, merged)


# Library default: no output unless the application configures logging.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    "ROOT_LOGGER_NAME",
    "KeyValueFormatter",
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    "LogContext",
]
