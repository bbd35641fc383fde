# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Error reporter that keeps reports in memory for tests."""

from typing import Any, Dict, List, Optional

from .error_reporter import ErrorReporter


class SilentErrorReporter(ErrorReporter):
    """Stores reports instead of emitting them."""

    def __init__(self):
        self.reported_errors: List[Dict[str, Any]] = []
        self.captured_messages: List[Dict[str, Any]] = []

    def report(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        self.reported_errors.append({"error": error, "context": context or {}})

    def capture_message(
        self,
        message: str,
        level: str = "error",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.captured_messages.append({"message": message, "level": level, "context": context or {}})

    def has_errors(self) -> bool:
        return bool(self.reported_errors)

    def get_errors(self, error_type: Optional[type] = None) -> List[Dict[str, Any]]:
        """Return reported errors, optionally only those of ``error_type``."""
        if error_type is None:
            return list(self.reported_errors)
        return [r for r in self.reported_errors if isinstance(r["error"], error_type)]

    def clear(self) -> None:
        self.reported_errors.clear()
        self.captured_messages.clear()
