# Copyright 2025 Ant Group Co., Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Logging configuration for opdispatch.

Dispatch tables report overwritten registrations through the ``opdispatch``
logger hierarchy. When opdispatch is used as a library, logging is disabled
by default (NullHandler) and applications opt in.

Example usage:
    >>> import opdispatch
    >>> # Enable logging with INFO level
    >>> opdispatch.setup_logging(level="INFO")
    >>> # Enable DEBUG to also see every registration and removal
    >>> opdispatch.setup_logging(level="DEBUG", filename="dispatch.log")
"""

import logging
import os
import sys
from typing import Any, Literal

# Root logger for all opdispatch components
OPDISPATCH_LOGGER_NAME = "opdispatch"

# Environment variable consulted when setup_logging() gets no explicit level
LOG_LEVEL_ENV = "OPDISPATCH_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _resolve_level(level: str | None) -> int:
    name = level or os.environ.get(LOG_LEVEL_ENV, "INFO")
    resolved = logging.getLevelName(name.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {name!r}")
    return resolved


def setup_logging(
    level: LogLevel | None = None,
    format: str | None = None,
    date_format: str | None = None,
    filename: str | None = None,
    stream: Any = None,
    force: bool = False,
    propagate: bool = False,
) -> None:
    """
    Configure logging for opdispatch.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). When None,
               the OPDISPATCH_LOG_LEVEL environment variable is used, falling
               back to INFO.
        format: Custom log format string. If None, uses default format.
        date_format: Custom date format string. If None, uses default format.
        filename: If provided, log to this file in addition to stream output.
        stream: Stream to log to. Default is sys.stderr. Set to False to
                disable stream output (only use file or propagation).
        force: If True, remove existing handlers before adding new ones.
        propagate: If True, let records reach the application's loggers
                   instead of managing opdispatch handlers independently.
    """
    logger = logging.getLogger(OPDISPATCH_LOGGER_NAME)

    log_level = _resolve_level(level)
    logger.setLevel(log_level)

    # A lone NullHandler only gets in the way once records propagate
    if propagate and not force:
        if len(logger.handlers) == 1 and isinstance(
            logger.handlers[0], logging.NullHandler
        ):
            force = True

    if force:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

    logger.propagate = propagate

    if propagate and not filename and stream is None:
        return

    formatter = logging.Formatter(
        format or DEFAULT_FORMAT, datefmt=date_format or DEFAULT_DATE_FORMAT
    )

    if stream is not False:
        if stream is None:
            stream = sys.stderr
        stream_handler = logging.StreamHandler(stream)
        stream_handler.setLevel(log_level)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def disable_logging() -> None:
    """Remove all opdispatch handlers and suppress output with a NullHandler."""
    logger = logging.getLogger(OPDISPATCH_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for an opdispatch module.

    The logger name is prefixed with 'opdispatch' unless it already lives
    under that hierarchy.

    Example:
        >>> logger = get_logger(__name__)  # 'opdispatch.dispatch_table'
    """
    if name != OPDISPATCH_LOGGER_NAME and not name.startswith(
        OPDISPATCH_LOGGER_NAME + "."
    ):
        name = f"{OPDISPATCH_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


# Library mode until an application calls setup_logging()
_root_logger = logging.getLogger(OPDISPATCH_LOGGER_NAME)
if not _root_logger.handlers:
    _root_logger.addHandler(logging.NullHandler())
    _root_logger.propagate = False
