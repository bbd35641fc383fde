# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""In-memory logger for tests. Records every level."""

from typing import Any

from .logger import Logger


class SilentLogger(Logger):

    def __init__(self, level: str = "INFO", name: str | None = None):
        self.level = level.upper()
        self.name = name or "fieldops"
        self.logs: list[dict[str, Any]] = []

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        entry: dict[str, Any] = {"level": level, "message": message}
        if kwargs:
            entry["extra"] = kwargs
        self.logs.append(entry)

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        return [entry for entry in self.logs if level is None or entry["level"] == level]

    def has_log(self, message: str, level: str | None = None) -> bool:
        """True if a record (optionally at ``level``) contains ``message``."""
        return any(message in entry["message"] for entry in self.get_logs(level))

    def clear_logs(self) -> None:
        self.logs.clear()
