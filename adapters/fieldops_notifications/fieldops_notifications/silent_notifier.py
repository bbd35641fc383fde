# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Notifier that drops every notification."""

import logging
import threading
from typing import Any, Dict

from .notifier import Notifier

logger = logging.getLogger(__name__)


class SilentNotifier(Notifier):
    """Default driver when no delivery channel is configured.

    Keeps a running count only, so memory stays flat however many messages
    a long-running service sends.
    """

    def __init__(self):
        self.dropped = 0
        self._lock = threading.Lock()

    def notify(self, recipient_id: str, kind: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.dropped += 1
        logger.debug("SilentNotifier: dropped %s for %s", kind, recipient_id)
