"""Shared utilities for Club League."""

# Club League
# Copyright (C) 2025  Club League developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Create (or fetch) a module logger with the project's default handler.

    Args:
        name: Logger name, normally ``__name__`` of the calling module
        level: Level applied the first time the logger is configured

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return logger


def set_log_level(level: int) -> None:
    """Apply a log level to every Club League logger created so far."""
    logging.getLogger().setLevel(level)
    for name, existing in logging.Logger.manager.loggerDict.items():
        if name.startswith("clubleague") and isinstance(existing, logging.Logger):
            existing.setLevel(level)


__all__ = ["setup_logger", "set_log_level", "LOG_FORMAT"]
