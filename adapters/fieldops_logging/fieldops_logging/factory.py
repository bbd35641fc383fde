# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Logger construction and the process-wide default logger."""

import os

from .logger import Logger
from .silent_logger import SilentLogger
from .stdout_logger import StdoutLogger

LOGGER_TYPES = {
    "stdout": StdoutLogger,
    "silent": SilentLogger,
}

_default_logger: Logger | None = None
_logger_registry: dict[str, Logger] = {}


def create_logger(
    logger_type: str | None = None,
    level: str | None = None,
    name: str | None = None,
) -> Logger:
    """Build a logger.

    Unset arguments come from LOG_TYPE, LOG_LEVEL and LOG_NAME, and default
    to a stdout logger named "fieldops" at INFO.

    Example:
        >>> logger = create_logger(logger_type="stdout", level="DEBUG", name="messaging")
        >>> logger.info("Service started", version="0.1.0")

    Raises:
        ValueError: unknown logger_type or level
    """
    logger_type = (logger_type or os.getenv("LOG_TYPE") or "stdout").lower()
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    name = name or os.getenv("LOG_NAME") or "fieldops"

    logger_cls = LOGGER_TYPES.get(logger_type)
    if logger_cls is None:
        raise ValueError(f"Unknown logger_type: {logger_type}. Must be one of: {', '.join(LOGGER_TYPES)}")
    return logger_cls(level=level, name=name)


def set_default_logger(logger: Logger) -> None:
    """Install the logger every later ``get_logger()`` call returns."""
    global _default_logger, _logger_registry
    _default_logger = logger
    _logger_registry = {}


def get_logger(name: str | None = None) -> Logger:
    """The default logger, or a per-name stdout logger when none is installed."""
    if _default_logger is not None:
        return _default_logger
    key = name or ""
    if key not in _logger_registry:
        _logger_registry[key] = create_logger(logger_type="stdout", name=name)
    return _logger_registry[key]
