# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Error reporter contract."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ErrorReporter(ABC):
    """Sink for failures a service handles but still wants surfaced.

    ``context`` carries identifiers such as ``operation`` and ``user_id``;
    reporters must not raise.
    """

    @abstractmethod
    def report(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """Record an exception together with its context."""

    @abstractmethod
    def capture_message(
        self,
        message: str,
        level: str = "error",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a condition that has no exception attached.

        ``level`` is one of debug, info, warning, error or critical.
        """
