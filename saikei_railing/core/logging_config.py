# ==============================================================================
# Saikei Railing - Guardrail Detailing Tools
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Logging Configuration Module
=============================

Centralized logging setup for the railing layout engine.

Usage:
    from saikei_railing.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Layout completed")
    logger.debug("Corner %d: next side butts previous", index)
    logger.warning("Host query failed, using path Z")

Log Levels:
    DEBUG    - Geometry decisions (butt/cap choice, fallbacks, host misses)
    INFO     - Run summaries (sides, posts, rails)
    WARNING  - Something unexpected but recoverable
    ERROR    - A placement could not be computed
"""

import logging
import sys
from typing import Optional, TextIO, Union

# Every engine logger hangs under this name
LOGGER_PREFIX = "railing"
PACKAGE_NAME = "saikei_railing"

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s:%(lineno)d - %(message)s"

_initialized = False


def _resolve_level(level: Union[int, str]) -> int:
    """Numeric level from an int or a level name such as "debug"."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    level: Union[int, str] = logging.INFO,
    detailed: bool = False,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach a single stream handler to the railing logger.

    Calling again replaces the handler, so a host application can point the
    layout output at its own console.

    Args:
        level: Level number or name
        detailed: Include timestamps and line numbers
        stream: Output stream (sys.stdout when omitted)

    Returns:
        The "railing" logger
    """
    global _initialized

    level = _resolve_level(level)
    railing_logger = logging.getLogger(LOGGER_PREFIX)

    if _initialized:
        railing_logger.handlers.clear()

    railing_logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT if detailed else DEFAULT_FORMAT))
    railing_logger.addHandler(handler)

    # host application keeps its own handlers
    railing_logger.propagate = False

    _initialized = True
    return railing_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for an engine module.

    "saikei_railing.core.layout.seats" becomes "railing.core.layout.seats";
    names outside the package are nested under "railing".
    """
    if not _initialized:
        setup_logging()

    if name == PACKAGE_NAME or name.startswith(PACKAGE_NAME + "."):
        name = LOGGER_PREFIX + name[len(PACKAGE_NAME):]
    elif name != LOGGER_PREFIX and not name.startswith(LOGGER_PREFIX + "."):
        name = f"{LOGGER_PREFIX}.{name}"

    return logging.getLogger(name)


def set_log_level(level: Union[int, str]) -> int:
    """Change the level of the railing logger and its handlers.

    Args:
        level: Level number or name

    Returns:
        The numeric level applied

    Raises:
        ValueError: If a level name is not recognised
    """
    level = _resolve_level(level)
    railing_logger = logging.getLogger(LOGGER_PREFIX)
    railing_logger.setLevel(level)
    for handler in railing_logger.handlers:
        handler.setLevel(level)
    return level


def enable_debug() -> None:
    """Show corner decisions and host fallbacks."""
    set_log_level(logging.DEBUG)


def disable_debug() -> None:
    set_log_level(logging.INFO)


__all__ = [
    "setup_logging",
    "get_logger",
    "set_log_level",
    "enable_debug",
    "disable_debug",
    "LOGGER_PREFIX",
    "PACKAGE_NAME",
]
