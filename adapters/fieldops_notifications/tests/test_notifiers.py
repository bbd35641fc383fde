# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Tests for notifiers."""

from unittest.mock import Mock, patch

import pytest
import requests

from fieldops_notifications import (
    NotificationError,
    RecordingNotifier,
    SilentNotifier,
    WebhookNotifier,
    create_notifier,
)


class TestFactory:

    def test_default_is_silent(self, monkeypatch):
        monkeypatch.delenv("NOTIFY_TYPE", raising=False)
        assert isinstance(create_notifier(), SilentNotifier)

    def test_webhook(self):
        notifier = create_notifier("webhook", webhook_url="http://hooks.local/n", timeout_seconds=3)

        assert isinstance(notifier, WebhookNotifier)
        assert notifier.timeout_seconds == 3

    def test_webhook_requires_url(self, monkeypatch):
        monkeypatch.delenv("NOTIFY_WEBHOOK_URL", raising=False)
        with pytest.raises(ValueError, match="webhook_url"):
            create_notifier("webhook")

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown notifier_type"):
            create_notifier("sms")


class TestWebhookNotifier:

    @patch("fieldops_notifications.webhook_notifier.requests.post")
    def test_posts_json(self, mock_post):
        mock_post.return_value = Mock(raise_for_status=Mock())
        notifier = WebhookNotifier("http://hooks.local/n", timeout_seconds=5)

        notifier.notify("u2", "message.received", {"message_id": "m1"})

        mock_post.assert_called_once_with(
            "http://hooks.local/n",
            json={"recipient_id": "u2", "kind": "message.received", "payload": {"message_id": "m1"}},
            timeout=5,
        )

    @patch("fieldops_notifications.webhook_notifier.requests.post")
    def test_http_error_wrapped(self, mock_post):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("502 Bad Gateway")
        mock_post.return_value = response

        with pytest.raises(NotificationError, match="502"):
            WebhookNotifier("http://hooks.local/n").notify("u2", "message.received", {})

    @patch("fieldops_notifications.webhook_notifier.requests.post")
    def test_connection_error_wrapped(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NotificationError):
            WebhookNotifier("http://hooks.local/n").notify("u2", "message.received", {})


def test_silent_notifier_keeps_nothing():
    notifier = SilentNotifier()

    for i in range(500):
        notifier.notify(f"u{i}", "message.received", {"message_id": "m1", "preview": "x" * 100})

    assert notifier.dropped == 500
    assert not hasattr(notifier, "sent")
    assert vars(notifier).keys() == {"dropped", "_lock"}


def test_recording_notifier_records():
    notifier = RecordingNotifier()

    notifier.notify("u2", "message.received", {"message_id": "m1"})
    notifier.notify("u3", "message.received", {"message_id": "m1"})

    assert [n["recipient_id"] for n in notifier.sent] == ["u2", "u3"]
    assert notifier.sent_to("u3")[0]["payload"] == {"message_id": "m1"}

    notifier.clear()
    assert notifier.sent == []
