"""Package-wide logging setup for numpart.

Every module obtains its logger through :func:`get_logger`, so all records
flow through one ``numpart`` root logger with a single stdout handler.
The level can be preset through the ``NUMPART_LOG_LEVEL`` environment variable
(e.g. ``DEBUG``) and changed at runtime with :func:`set_global_log_level`.
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "numpart"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "NUMPART_LOG_LEVEL"

_ROOT_LOGGER_CONFIGURED = False


def _level_from_env(default: int) -> int:
    raw = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    # getLevelName returns "Level X" strings for unknown names
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single numpart handler to the root ``numpart`` logger.

    Later calls are no-ops until :func:`reset_logging` runs.

    Args:
        level: Logging level. Defaults to ``NUMPART_LOG_LEVEL`` or INFO.
        format_string: Record format; defaults to timestamp, name, level, message.
        handler: Handler to install; defaults to a stdout StreamHandler.
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level if level is not None else _level_from_env(logging.INFO))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # pytest's caplog hooks the stdlib root logger
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of ``numpart`` for the given module name.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        Logger that inherits level and handler from the numpart root.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the numpart root logger and its handlers."""
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Switch every numpart logger to DEBUG."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return every numpart logger to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the numpart handler so the next call reconfigures (used in tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
