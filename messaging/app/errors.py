# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Domain errors raised by the messaging core."""

from typing import Any, Dict, Iterable, Optional


class MessagingError(Exception):
    """Base class for messaging errors."""

    code = "messaging_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details()}


class ValidationError(MessagingError):
    """Malformed input. ``field`` names the offending input."""

    code = "validation_error"

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class ForbiddenError(MessagingError):
    """The actor may not perform the operation or address the named identities."""

    code = "forbidden"

    def __init__(self, reason: str, offending_ids: Optional[Iterable[str]] = None):
        self.offending_ids = sorted(offending_ids or [])
        message = reason
        if self.offending_ids:
            message = f"{reason}: {', '.join(self.offending_ids)}"
        super().__init__(message)
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"reason": self.reason}
        if self.offending_ids:
            details["offending_ids"] = list(self.offending_ids)
        return details


class NotFoundError(MessagingError):
    """Nothing visible to the caller matches. Absence and invisibility are not distinguished."""

    code = "not_found"


class StoreError(MessagingError):
    """The document store failed. Safe to retry."""

    code = "store_error"
