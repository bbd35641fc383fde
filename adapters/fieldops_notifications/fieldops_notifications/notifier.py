# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Notifier interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class NotificationError(Exception):
    """Raised when a notification cannot be delivered."""
    pass


class Notifier(ABC):
    """Delivers a notification of some kind to a single user."""

    @abstractmethod
    def notify(self, recipient_id: str, kind: str, payload: Dict[str, Any]) -> None:
        """Deliver a notification.

        Args:
            recipient_id: User the notification is addressed to
            kind: Notification kind, e.g. "message.received"
            payload: JSON-serializable notification body

        Raises:
            NotificationError: If delivery fails
        """
        pass
