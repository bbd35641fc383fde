# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Abstract logger interface.

Keyword arguments passed to any level method are structured fields of the
record, not format arguments.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Structured logger. Implementations provide :meth:`log`."""

    @abstractmethod
    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """Emit one record at ``level`` (DEBUG, INFO, WARNING or ERROR)."""
        pass

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the active exception attached."""
        kwargs.setdefault("exc_info", True)
        self.log("ERROR", message, **kwargs)
