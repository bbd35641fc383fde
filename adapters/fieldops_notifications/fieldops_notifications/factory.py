# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Factory for notifiers."""

import os
from typing import Optional

from .notifier import Notifier
from .silent_notifier import SilentNotifier
from .webhook_notifier import WebhookNotifier


def create_notifier(notifier_type: Optional[str] = None, **kwargs) -> Notifier:
    """Create a notifier.

    Args:
        notifier_type: "silent" or "webhook". Defaults to NOTIFY_TYPE env or "silent".
        **kwargs: ``webhook_url`` and ``timeout_seconds`` for the webhook driver

    Raises:
        ValueError: If the type is unknown or the webhook URL is missing
    """
    notifier_type = (notifier_type or os.getenv("NOTIFY_TYPE") or "silent").lower()

    if notifier_type == "silent":
        return SilentNotifier()
    if notifier_type == "webhook":
        return WebhookNotifier(
            webhook_url=kwargs.get("webhook_url") or os.getenv("NOTIFY_WEBHOOK_URL", ""),
            timeout_seconds=kwargs.get("timeout_seconds", 10),
        )
    raise ValueError(f"Unknown notifier_type: {notifier_type}. Must be one of: silent, webhook")
