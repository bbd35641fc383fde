# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Webhook notifier that POSTs notifications as JSON."""

import logging
from typing import Any, Dict, Optional

import requests

from .notifier import NotificationError, Notifier

logger = logging.getLogger(__name__)


class WebhookNotifier(Notifier):
    """POSTs ``{recipient_id, kind, payload}`` to a configured URL."""

    def __init__(self, webhook_url: str, timeout_seconds: float = 10, session: Optional[requests.Session] = None):
        if not webhook_url:
            raise ValueError("webhook_url is required for the webhook notifier")
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._post = session.post if session is not None else requests.post

    def notify(self, recipient_id: str, kind: str, payload: Dict[str, Any]) -> None:
        body = {"recipient_id": recipient_id, "kind": kind, "payload": payload}
        try:
            response = self._post(self.webhook_url, json=body, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"Webhook delivery to {self.webhook_url} failed: {e}") from e

        logger.debug("Webhook notification %s sent to %s", kind, recipient_id)
