# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps Logging Adapter.

Structured, configurable logging shared by FieldOps services.

Example:
    >>> from fieldops_logging import create_logger
    >>> logger = create_logger(logger_type="stdout", level="INFO", name="messaging")
    >>> logger.info("Service started", service="messaging", version="0.1.0")
    >>>
    >>> # Silent logger for tests
    >>> test_logger = create_logger(logger_type="silent")
    >>> test_logger.info("Test message")
"""

__version__ = "0.1.0"

from .factory import create_logger, get_logger, set_default_logger
from .logger import Logger
from .silent_logger import SilentLogger
from .stdout_logger import StdoutLogger
from .uvicorn_config import create_uvicorn_log_config

__all__ = [
    "__version__",
    "Logger",
    "StdoutLogger",
    "SilentLogger",
    "create_logger",
    "create_uvicorn_log_config",
    "get_logger",
    "set_default_logger",
]
