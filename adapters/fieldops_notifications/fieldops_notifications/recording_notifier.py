# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""In-memory notifier for tests."""

import threading
from typing import Any, Dict, List

from .notifier import Notifier


class RecordingNotifier(Notifier):
    """Keeps every notification in ``sent``. Not selectable through the factory."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def notify(self, recipient_id: str, kind: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.sent.append({"recipient_id": recipient_id, "kind": kind, "payload": dict(payload)})

    def sent_to(self, recipient_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [n for n in self.sent if n["recipient_id"] == recipient_id]

    def clear(self) -> None:
        with self._lock:
            self.sent.clear()
