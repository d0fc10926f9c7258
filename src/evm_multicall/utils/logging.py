"""
Structured logging for the multicall SDK.

Every module obtains its logger through ``get_logger(__name__)``; context
is passed with ``extra={...}`` and rendered after the message by the
package formatter. The SDK installs no handler unless
``configure_logging`` or ``enable_debug`` is called.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "evm_multicall"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS
        }
        if not context:
            return base
        rendered = " ".join(f"{k}={v!r}" for k, v in sorted(context.items()))
        return f"{base} | {rendered}"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the SDK namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    handler: Optional[logging.Handler] = None,
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s",
) -> logging.Logger:
    """
    Attach a single handler to the SDK root logger.

    Calling it again replaces the handler installed previously.

    Args:
        level: Log level name or number
        handler: Handler to install (defaults to a stderr StreamHandler)
        fmt: Format string for ContextFormatter

    Returns:
        The SDK root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        if getattr(existing, "_evm_multicall", False):
            root.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(ContextFormatter(fmt))
    handler._evm_multicall = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    set_level(level)
    return root


def set_level(level: Union[int, str]) -> None:
    """Set the SDK root logger level."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def enable_debug() -> logging.Logger:
    """Shortcut for ``configure_logging(logging.DEBUG)``."""
    return configure_logging(logging.DEBUG)


def disable_logging() -> None:
    """Silence every SDK logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)
