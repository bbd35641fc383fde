# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Message records and the derived conversation views."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fieldops_directory import UserRecord


@dataclass
class RecipientState:
    """Read state of one recipient on one message.

    ``is_read`` only ever moves from False to True; ``read_at`` is set on that move.
    """
    recipient_id: str
    is_read: bool = False
    read_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"recipient_id": self.recipient_id, "is_read": self.is_read, "read_at": self.read_at}


@dataclass
class DeletionMarker:
    user_id: str
    deleted_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "deleted_at": self.deleted_at}


@dataclass
class Message:
    """A stored message.

    Attributes:
        message_id: 32-char hex identifier, never reused
        sender_id: Author identity
        recipients: One entry per distinct recipient, never including the sender
        subject: Trimmed, non-empty
        body: Trimmed, non-empty
        thread_id: Root message id for replies, None for a thread root
        created_at: ISO-8601 UTC timestamp
        deleted_by: Per-user soft-delete markers
        is_deleted: Administrative purge flag, hides the message from everyone
    """
    message_id: str
    sender_id: str
    recipients: List[RecipientState]
    subject: str
    body: str
    created_at: str
    thread_id: Optional[str] = None
    deleted_by: List[DeletionMarker] = field(default_factory=list)
    is_deleted: bool = False

    @property
    def recipient_ids(self) -> List[str]:
        return [r.recipient_id for r in self.recipients]

    @property
    def participants(self) -> List[str]:
        """Sorted, deduplicated sender and recipient ids."""
        return sorted({self.sender_id, *self.recipient_ids})

    @property
    def is_root(self) -> bool:
        return self.thread_id is None

    def recipient_state(self, user_id: str) -> Optional[RecipientState]:
        for state in self.recipients:
            if state.recipient_id == user_id:
                return state
        return None

    def is_unread_for(self, user_id: str) -> bool:
        state = self.recipient_state(user_id)
        return state is not None and not state.is_read

    def is_deleted_for(self, user_id: str) -> bool:
        return any(marker.user_id == user_id for marker in self.deleted_by)

    def is_visible_to(self, user_id: str) -> bool:
        if self.is_deleted or self.is_deleted_for(user_id):
            return False
        return user_id == self.sender_id or user_id in self.recipient_ids

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.message_id,
            "sender_id": self.sender_id,
            # Flat copy of recipient ids so both stores can filter on membership
            "recipient_ids": self.recipient_ids,
            "recipients": [r.to_dict() for r in self.recipients],
            "subject": self.subject,
            "body": self.body,
            "thread_id": self.thread_id,
            "created_at": self.created_at,
            "deleted_by": [m.to_dict() for m in self.deleted_by],
            "is_deleted": self.is_deleted,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Message":
        return cls(
            message_id=str(doc["_id"]),
            sender_id=doc["sender_id"],
            recipients=[
                RecipientState(r["recipient_id"], bool(r.get("is_read", False)), r.get("read_at"))
                for r in doc.get("recipients", [])
            ],
            subject=doc.get("subject", ""),
            body=doc.get("body", ""),
            created_at=doc["created_at"],
            thread_id=doc.get("thread_id"),
            deleted_by=[DeletionMarker(m["user_id"], m["deleted_at"]) for m in doc.get("deleted_by", [])],
            is_deleted=bool(doc.get("is_deleted", False)),
        )

    def to_dict(self, users: Optional[Dict[str, UserRecord]] = None) -> Dict[str, Any]:
        """Public view, with participant display data when ``users`` is given."""
        users = users or {}

        def display(user_id: str) -> Dict[str, Any]:
            user = users.get(user_id)
            return user.display() if user else {"id": user_id}

        return {
            "id": self.message_id,
            "sender": display(self.sender_id),
            "recipients": [dict(r.to_dict(), user=display(r.recipient_id)) for r in self.recipients],
            "subject": self.subject,
            "body": self.body,
            "thread_id": self.thread_id,
            "created_at": self.created_at,
        }


@dataclass
class ConversationSummary:
    """One derived conversation as seen by one user."""
    thread_key: str
    thread_id: str
    subject: str
    last_message: str
    last_message_at: str
    last_message_id: str
    participants: List[str]
    unread_count: int
    message_count: int
    is_sender: bool

    def to_dict(self, users: Optional[Dict[str, UserRecord]] = None) -> Dict[str, Any]:
        users = users or {}
        return {
            "thread_key": self.thread_key,
            "thread_id": self.thread_id,
            "subject": self.subject,
            "last_message": self.last_message,
            "last_message_at": self.last_message_at,
            "last_message_id": self.last_message_id,
            "participants": [
                users[p].display() if p in users else {"id": p} for p in self.participants
            ],
            "unread_count": self.unread_count,
            "message_count": self.message_count,
            "is_sender": self.is_sender,
        }


@dataclass
class ConversationPage:
    items: List[ConversationSummary]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit)

    def pagination(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "total_pages": self.total_pages}

    def to_dict(self, users: Optional[Dict[str, UserRecord]] = None) -> Dict[str, Any]:
        return {
            "conversations": [item.to_dict(users) for item in self.items],
            "pagination": self.pagination(),
        }
