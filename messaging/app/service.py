# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Main messaging service implementation."""

import logging
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from fieldops_directory import IdentityDirectory, ProjectAssignmentDirectory, UserRecord
from fieldops_metrics import MetricsCollector
from fieldops_notifications import Notifier
from fieldops_reporting import ErrorReporter
from fieldops_storage import DocumentStore

from .conversations import ConversationAggregator
from .errors import MessagingError, ValidationError
from .message_store import MESSAGE_ID_PATTERN, MessageStore
from .models import Message
from .policy import RecipientPolicyEngine

logger = logging.getLogger(__name__)

MESSAGE_RECEIVED = "message.received"


class MessagingService:
    """Messaging operations for authenticated callers."""

    def __init__(
        self,
        document_store: DocumentStore,
        identity_directory: IdentityDirectory,
        project_directory: ProjectAssignmentDirectory,
        notifier: Optional[Notifier] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        error_reporter: Optional[ErrorReporter] = None,
        default_page_size: int = 20,
        max_page_size: int = 100,
        message_scan_limit: Optional[int] = None,
        message_preview_length: int = 200,
        notify_max_workers: int = 4,
        notification_executor: Optional[Executor] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize messaging service.

        Args:
            document_store: Document store holding the messages collection
            identity_directory: User and role lookup
            project_directory: Project assignment lookup
            notifier: Notification dispatch (optional)
            metrics_collector: Metrics collector (optional)
            error_reporter: Error reporter (optional)
            default_page_size: Inbox page size when none is requested
            max_page_size: Largest inbox page size accepted
            message_scan_limit: Newest messages read per direction by a
                visibility query; None reads all of them
            message_preview_length: Body characters included in notifications
            notify_max_workers: Threads used for notification dispatch
            notification_executor: Executor for notifications (overrides notify_max_workers)
            clock: Current UTC time source (optional, for tests)
        """
        self.identity_directory = identity_directory
        self.notifier = notifier
        self.metrics_collector = metrics_collector
        self.error_reporter = error_reporter
        self.message_preview_length = message_preview_length

        self.message_store = MessageStore(document_store, scan_limit=message_scan_limit, clock=clock)
        self.policy = RecipientPolicyEngine(identity_directory, project_directory)
        self.aggregator = ConversationAggregator(
            self.message_store, default_page_size=default_page_size, max_page_size=max_page_size
        )
        self._executor = notification_executor or ThreadPoolExecutor(
            max_workers=notify_max_workers, thread_name_prefix="notify"
        )

        # Stats
        self._stats_lock = threading.Lock()
        self.messages_sent = 0
        self.sends_rejected = 0
        self.notifications_sent = 0
        self.notifications_failed = 0
        self.threads_deleted = 0
        self.last_inbox_time = 0.0

    def _increment(self, name: str, tags: Optional[Dict[str, str]] = None, value: float = 1.0):
        if self.metrics_collector:
            self.metrics_collector.increment(name, value, tags=tags)

    def _users(self, user_ids: Iterable[str]) -> Dict[str, UserRecord]:
        return self.identity_directory.get_users(sorted(set(user_ids)))

    def send(
        self,
        actor_id: str,
        actor_role: str,
        recipient_ids: List[str],
        subject: str,
        body: str,
        thread_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send a message and notify its recipients.

        Every check runs before the write. Notification happens in the
        background and never affects the result.

        Returns:
            The stored message with participant display data

        Raises:
            ValidationError: Malformed input
            ForbiddenError: Role or recipients not permitted
            StoreError: Storage failure
        """
        try:
            self._check_send_input(recipient_ids, subject, body, thread_id)
            recipients = self.policy.validate(actor_id, actor_role, recipient_ids)
            message = self.message_store.append(actor_id, recipients, subject, body, thread_id=thread_id)
        except MessagingError as e:
            with self._stats_lock:
                self.sends_rejected += 1
            self._increment("messaging_send_rejected_total", tags={"reason": e.code})
            raise

        with self._stats_lock:
            self.messages_sent += 1
        self._increment("messaging_messages_sent_total")

        self._dispatch_notifications(message)
        return message.to_dict(self._users(message.participants))

    @staticmethod
    def _check_send_input(recipient_ids, subject, body, thread_id) -> None:
        if not isinstance(subject, str) or not subject.strip():
            raise ValidationError("subject", "must not be empty")
        if not isinstance(body, str) or not body.strip():
            raise ValidationError("body", "must not be empty")
        if not isinstance(recipient_ids, list) or not recipient_ids:
            raise ValidationError("recipients", "at least one recipient is required")
        if not all(isinstance(r, str) and r.strip() for r in recipient_ids):
            raise ValidationError("recipients", "recipient ids must be non-empty strings")
        if thread_id is not None and (not isinstance(thread_id, str) or not MESSAGE_ID_PATTERN.match(thread_id)):
            raise ValidationError("thread_id", "malformed message identifier")

    def _dispatch_notifications(self, message: Message) -> None:
        if self.notifier is None:
            return

        payload = {
            "message_id": message.message_id,
            "thread_id": message.thread_id or message.message_id,
            "sender_id": message.sender_id,
            "subject": message.subject,
            "preview": message.body[:self.message_preview_length],
        }
        for recipient_id in message.recipient_ids:
            try:
                self._executor.submit(self._notify_one, recipient_id, payload)
            except RuntimeError as e:
                # Executor already shut down
                self._record_notification_failure(recipient_id, message.message_id, e, reported=False)
                if self.error_reporter:
                    self.error_reporter.capture_message(
                        "notification pool is shut down",
                        level="warning",
                        context={"recipient_id": recipient_id, "message_id": message.message_id},
                    )

    def _notify_one(self, recipient_id: str, payload: Dict[str, Any]) -> None:
        try:
            self.notifier.notify(recipient_id, MESSAGE_RECEIVED, payload)
        except Exception as e:
            # Notifications are best-effort
            self._record_notification_failure(recipient_id, payload["message_id"], e)
            return

        with self._stats_lock:
            self.notifications_sent += 1
        self._increment("messaging_notifications_total", tags={"status": "success"})

    def _record_notification_failure(
        self, recipient_id: str, message_id: str, error: Exception, reported: bool = True
    ) -> None:
        logger.warning("Failed to notify %s about message %s: %s", recipient_id, message_id, error)
        with self._stats_lock:
            self.notifications_failed += 1
        self._increment("messaging_notifications_total", tags={"status": "failed"})
        if reported and self.error_reporter:
            self.error_reporter.report(
                error, context={"operation": "notify", "recipient_id": recipient_id, "message_id": message_id}
            )

    def list_inbox(self, user_id: str, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        """Paginated conversation summaries for ``user_id``."""
        start_time = time.time()
        result = self.aggregator.list_conversations(user_id, page, limit)

        user_ids = {p for item in result.items for p in item.participants}
        data = result.to_dict(self._users(user_ids))

        self.last_inbox_time = time.time() - start_time
        if self.metrics_collector:
            self.metrics_collector.observe("messaging_inbox_latency_seconds", self.last_inbox_time)
        return data

    def get_thread(self, user_id: str, thread_key: str) -> Dict[str, Any]:
        """Messages of one thread, oldest first. Marks the caller's entries read."""
        messages = self.aggregator.get_thread(user_id, thread_key)
        users = self._users(p for m in messages for p in m.participants)
        return {"messages": [m.to_dict(users) for m in messages]}

    def mark_thread_read(self, user_id: str, thread_key: str) -> int:
        updated = self.aggregator.mark_thread_read(user_id, thread_key)
        self._increment("messaging_threads_read_total")
        return updated

    def get_unread_count(self, user_id: str) -> int:
        return self.aggregator.unread_count(user_id)

    def delete_thread(self, thread_key: str, actor_id: str, actor_role: str) -> int:
        hidden = self.aggregator.delete_conversation(thread_key, actor_id, actor_role)
        with self._stats_lock:
            self.threads_deleted += 1
        self._increment("messaging_threads_deleted_total")
        logger.info("Conversation %s deleted for %s", thread_key, actor_id)
        return hidden

    def list_allowed_recipients(self, actor_id: str, actor_role: str) -> List[Dict[str, Any]]:
        return [u.display() for u in self.policy.allowed_recipients(actor_id, actor_role)]

    def purge_messages(self, message_ids: List[str]) -> int:
        """Administrative hard delete. Not exposed over HTTP."""
        return self.message_store.purge(message_ids)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the notification pool, waiting for queued notifications by default."""
        self._executor.shutdown(wait=wait)

    def get_stats(self) -> Dict[str, Any]:
        """Get service statistics.

        Returns:
            Dictionary of statistics
        """
        with self._stats_lock:
            return {
                "messages_sent": self.messages_sent,
                "sends_rejected": self.sends_rejected,
                "notifications_sent": self.notifications_sent,
                "notifications_failed": self.notifications_failed,
                "threads_deleted": self.threads_deleted,
                "last_inbox_time_seconds": self.last_inbox_time,
            }
