# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Factory for error reporters."""

import os
from typing import Optional

from .console_error_reporter import ConsoleErrorReporter
from .error_reporter import ErrorReporter
from .silent_error_reporter import SilentErrorReporter


def create_error_reporter(reporter_type: Optional[str] = None, **kwargs) -> ErrorReporter:
    """Create an error reporter.

    Args:
        reporter_type: "console" or "silent". Defaults to ERROR_REPORTER_TYPE env or "console".
        **kwargs: Passed to the reporter (``logger_name`` for console)

    Raises:
        ValueError: If reporter_type is unknown
    """
    reporter_type = (reporter_type or os.getenv("ERROR_REPORTER_TYPE") or "console").lower()

    if reporter_type == "console":
        return ConsoleErrorReporter(logger_name=kwargs.get("logger_name"))
    if reporter_type == "silent":
        return SilentErrorReporter()
    raise ValueError(f"Unknown reporter_type: {reporter_type}. Must be one of: console, silent")
