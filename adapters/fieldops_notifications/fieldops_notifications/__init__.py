# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps notification adapter."""

__version__ = "0.1.0"

from .factory import create_notifier
from .notifier import NotificationError, Notifier
from .recording_notifier import RecordingNotifier
from .silent_notifier import SilentNotifier
from .webhook_notifier import WebhookNotifier

__all__ = [
    "__version__",
    "Notifier",
    "NotificationError",
    "RecordingNotifier",
    "SilentNotifier",
    "WebhookNotifier",
    "create_notifier",
]
