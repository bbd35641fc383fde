# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps error reporting adapter."""

__version__ = "0.1.0"

from .console_error_reporter import ConsoleErrorReporter
from .error_reporter import ErrorReporter
from .factory import create_error_reporter
from .silent_error_reporter import SilentErrorReporter

__all__ = [
    "__version__",
    "ErrorReporter",
    "ConsoleErrorReporter",
    "SilentErrorReporter",
    "create_error_reporter",
]
