# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Append-only message log with targeted per-user state updates."""

import logging
import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional

from fieldops_storage import DocumentStore, DocumentStoreError

from .errors import StoreError, ValidationError
from .models import DeletionMarker, Message, RecipientState
from .threads import select_thread

logger = logging.getLogger(__name__)

MESSAGES_COLLECTION = "messages"
MESSAGE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def new_message_id(created: datetime) -> str:
    """32 hex chars: 14 of microseconds since the epoch, then 18 random.

    Ids sort in creation order; ids minted in the same microsecond order
    randomly among themselves.
    """
    micros = (created - _EPOCH) // timedelta(microseconds=1)
    return f"{micros:014x}{uuid.uuid4().hex[:18]}"


def _timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


@contextmanager
def _store_errors(operation: str):
    try:
        yield
    except DocumentStoreError as e:
        logger.error("Document store failure during %s: %s", operation, e)
        raise StoreError(f"Message store unavailable during {operation}") from e


class MessageStore:
    """Message persistence over a DocumentStore.

    Stored records are never rewritten whole. Read flags and soft-delete
    markers change through single-element array operations, which keeps
    concurrent updates by different users independent and repeated updates
    by the same user idempotent.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        scan_limit: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the message store.

        Args:
            document_store: Backing document store (already connected)
            scan_limit: Newest messages read per direction by a visibility
                query; None reads all of them
            clock: Returns the current UTC time; injectable for tests
        """
        self.document_store = document_store
        self.scan_limit = scan_limit
        self.clock = clock or _utc_now

    def _now(self) -> str:
        return _timestamp(self.clock())

    def get(self, message_id: str) -> Optional[Message]:
        with _store_errors("get"):
            doc = self.document_store.get_document(MESSAGES_COLLECTION, message_id)
        return Message.from_document(doc) if doc else None

    def resolve_reply_target(self, thread_id: str, user_id: str) -> str:
        """Resolve a reply reference to the root id the reply is stored under.

        Raises:
            ValidationError: If ``thread_id`` is malformed or does not name a
                message visible to ``user_id``
        """
        if not isinstance(thread_id, str) or not MESSAGE_ID_PATTERN.match(thread_id):
            raise ValidationError("thread_id", "malformed message identifier")

        target = self.get(thread_id)
        if target is None or not target.is_visible_to(user_id):
            raise ValidationError("thread_id", "does not refer to a message accessible to the sender")
        return target.thread_id or target.message_id

    def append(
        self,
        sender_id: str,
        recipient_ids: Iterable[str],
        subject: str,
        body: str,
        thread_id: Optional[str] = None,
    ) -> Message:
        """Store a new message.

        Recipients are deduplicated and the sender is removed. A reply to a
        reply is stored under the thread root.

        Raises:
            ValidationError: On empty subject, body or recipient list, or an
                inaccessible ``thread_id``
            StoreError: If the write fails
        """
        subject = (subject or "").strip()
        body = (body or "").strip()
        if not subject:
            raise ValidationError("subject", "must not be empty")
        if not body:
            raise ValidationError("body", "must not be empty")

        recipients = list(dict.fromkeys(r for r in recipient_ids if r and r != sender_id))
        if not recipients:
            raise ValidationError("recipients", "at least one recipient other than the sender is required")

        root_id = self.resolve_reply_target(thread_id, sender_id) if thread_id is not None else None

        created = self.clock().astimezone(timezone.utc)
        message = Message(
            message_id=new_message_id(created),
            sender_id=sender_id,
            recipients=[RecipientState(r) for r in recipients],
            subject=subject,
            body=body,
            created_at=_timestamp(created),
            thread_id=root_id,
        )
        with _store_errors("append"):
            self.document_store.insert_document(MESSAGES_COLLECTION, message.to_document())

        logger.info("Stored message %s from %s to %d recipient(s)", message.message_id, sender_id, len(recipients))
        return message

    def find_visible(self, user_id: str, thread_key: Optional[str] = None) -> List[Message]:
        """Messages ``user_id`` sent or received and has not deleted.

        Each direction is read newest first. With a ``scan_limit`` only the
        newest ``scan_limit`` messages per direction are considered, and a
        warning is logged when that cap is reached.

        Args:
            user_id: Viewing user
            thread_key: If given, only that thread (a thread key or any member message id)
        """
        base = {"is_deleted": False}
        newest_first = [("created_at", -1), ("_id", -1)]
        with _store_errors("find_visible"):
            sent = self.document_store.query_documents(
                MESSAGES_COLLECTION, dict(base, sender_id=user_id), limit=self.scan_limit, sort=newest_first
            )
            received = self.document_store.query_documents(
                MESSAGES_COLLECTION, dict(base, recipient_ids=user_id), limit=self.scan_limit, sort=newest_first
            )

        if self.scan_limit is not None and self.scan_limit in (len(sent), len(received)):
            logger.warning(
                "Visibility scan for %s reached the limit of %d messages; older messages are omitted",
                user_id, self.scan_limit,
            )

        merged = {}
        for doc in sent + received:
            merged.setdefault(str(doc["_id"]), doc)

        messages = [Message.from_document(doc) for doc in merged.values()]
        messages = [m for m in messages if m.is_visible_to(user_id)]

        if thread_key is not None:
            messages = select_thread(messages, thread_key)
        return messages

    def mark_read(self, message_ids: Iterable[str], user_id: str) -> int:
        """Mark ``user_id``'s unread entries read. Returns how many entries changed."""
        read_at = self._now()
        updated = 0
        with _store_errors("mark_read"):
            for message_id in message_ids:
                if self.document_store.update_array_element(
                    MESSAGES_COLLECTION,
                    message_id,
                    "recipients",
                    match={"recipient_id": user_id, "is_read": False},
                    patch={"is_read": True, "read_at": read_at},
                ):
                    updated += 1
        return updated

    def soft_delete(self, thread_key: str, user_id: str) -> int:
        """Hide every message of a thread from ``user_id`` only.

        Returns:
            Number of messages newly hidden
        """
        messages = self.find_visible(user_id, thread_key)
        return self.hide_messages([m.message_id for m in messages], user_id)

    def hide_messages(self, message_ids: Iterable[str], user_id: str) -> int:
        marker = DeletionMarker(user_id, self._now()).to_dict()
        hidden = 0
        with _store_errors("soft_delete"):
            for message_id in message_ids:
                if self.document_store.add_to_array_if_absent(
                    MESSAGES_COLLECTION, message_id, "deleted_by", marker, key="user_id"
                ):
                    hidden += 1
        logger.info("Soft-deleted %d message(s) for %s", hidden, user_id)
        return hidden

    def purge(self, message_ids: Iterable[str]) -> int:
        """Administrative delete: hide messages from everyone. Returns how many were purged."""
        purged = 0
        with _store_errors("purge"):
            for message_id in message_ids:
                doc = self.document_store.get_document(MESSAGES_COLLECTION, message_id)
                if doc is None or doc.get("is_deleted"):
                    continue
                self.document_store.update_document(MESSAGES_COLLECTION, message_id, {"is_deleted": True})
                purged += 1
        logger.warning("Purged %d message(s)", purged)
        return purged
