# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""JSON-lines logger writing to stdout."""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from .logger import Logger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class StdoutLogger(Logger):
    """Writes one JSON object per record to stdout.

    Records are also forwarded to the stdlib logger of the same name, so
    handlers and pytest's ``caplog`` see them.
    """

    def __init__(self, level: str = "INFO", name: str | None = None):
        """Create a stdout logger.

        Raises:
            ValueError: If ``level`` is not one of LEVELS
        """
        self.level = level.upper()
        if self.level not in LEVELS:
            raise ValueError(f"Invalid log level: {level}. Must be one of {', '.join(LEVELS)}")
        self.name = name or "fieldops"
        self._threshold = LEVELS[self.level]
        self._stdlib = logging.getLogger(self.name)

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        levelno = LEVELS[level]
        if levelno < self._threshold:
            return

        exc_info = kwargs.pop("exc_info", None)
        record = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": level,
            "logger": self.name,
            "message": message,
        }
        if kwargs:
            record["extra"] = kwargs
        if exc_info:
            record["exception"] = traceback.format_exc()

        sys.stdout.write(json.dumps(record, default=str) + "\n")
        sys.stdout.flush()

        self._stdlib.log(levelno, message, exc_info=exc_info, extra={"extra": kwargs} if kwargs else None)
