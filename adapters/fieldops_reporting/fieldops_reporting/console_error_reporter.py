# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Error reporter backed by stdlib logging."""

import logging
from typing import Any, Dict, Optional

from .error_reporter import ErrorReporter

logger = logging.getLogger(__name__)


def _describe(context: Optional[Dict[str, Any]]) -> str:
    if not context:
        return ""
    pairs = ", ".join(f"{key}={context[key]}" for key in sorted(context))
    return f" [{pairs}]"


class ConsoleErrorReporter(ErrorReporter):
    """Logs reports; exceptions keep their traceback via ``exc_info``."""

    def __init__(self, logger_name: Optional[str] = None):
        self.logger = logging.getLogger(logger_name) if logger_name else logger

    def report(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        self.logger.error(
            "%s: %s%s", type(error).__name__, error, _describe(context),
            exc_info=(type(error), error, error.__traceback__),
        )

    def capture_message(
        self,
        message: str,
        level: str = "error",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        levelno = logging.getLevelName(level.upper())
        if not isinstance(levelno, int):
            levelno = logging.ERROR
        self.logger.log(levelno, "%s%s", message, _describe(context))
