# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Conversation views derived from the message log."""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from fieldops_directory import SUPER_ADMIN

from .errors import ForbiddenError, NotFoundError, ValidationError
from .message_store import MessageStore
from .models import ConversationPage, ConversationSummary, Message
from .threads import thread_keys

logger = logging.getLogger(__name__)


def _chronological(messages: List[Message]) -> List[Message]:
    return sorted(messages, key=lambda m: (m.created_at, m.message_id))


def summarize_conversations(messages: List[Message], user_id: str) -> List[ConversationSummary]:
    """Group ``messages`` into conversations, newest activity first.

    Ties on the last activity timestamp are broken by the newest message id.
    """
    keys = thread_keys(messages)
    groups: Dict[str, List[Message]] = defaultdict(list)
    for message in messages:
        groups[keys[message.message_id]].append(message)

    summaries = []
    for key, group in groups.items():
        group = _chronological(group)
        latest = group[-1]
        root_id = latest.thread_id or latest.message_id
        root = next((m for m in group if m.message_id == root_id), None)

        participants = set()
        for message in group:
            participants.update(message.participants)
        participants.discard(user_id)

        summaries.append(ConversationSummary(
            thread_key=key,
            thread_id=root_id,
            subject=root.subject if root else latest.subject,
            last_message=latest.body,
            last_message_at=latest.created_at,
            last_message_id=latest.message_id,
            participants=sorted(participants),
            unread_count=sum(1 for m in group if m.is_unread_for(user_id)),
            message_count=len(group),
            is_sender=latest.sender_id == user_id,
        ))

    summaries.sort(key=lambda s: (s.last_message_at, s.last_message_id), reverse=True)
    return summaries


class ConversationAggregator:
    """Builds inbox, thread and unread views for one user at a time."""

    def __init__(self, message_store: MessageStore, default_page_size: int = 20, max_page_size: int = 100):
        self.message_store = message_store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def list_conversations(self, user_id: str, page: int = 1, page_size: Optional[int] = None) -> ConversationPage:
        limit = self.default_page_size if page_size is None else page_size
        if page < 1:
            raise ValidationError("page", "must be at least 1")
        if not 1 <= limit <= self.max_page_size:
            raise ValidationError("limit", f"must be between 1 and {self.max_page_size}")

        summaries = summarize_conversations(self.message_store.find_visible(user_id), user_id)
        start = (page - 1) * limit
        return ConversationPage(items=summaries[start:start + limit], page=page, limit=limit, total=len(summaries))

    def get_thread(self, user_id: str, thread_key: str) -> List[Message]:
        """Return a thread oldest first and mark the caller's entries in it read.

        The returned messages reflect the read state after marking.

        Raises:
            NotFoundError: If no message of the thread is visible to ``user_id``
        """
        messages = _chronological(self.message_store.find_visible(user_id, thread_key))
        if not messages:
            raise NotFoundError("Conversation not found")

        unread = [m.message_id for m in messages if m.is_unread_for(user_id)]
        if not unread:
            return messages

        marked = self.message_store.mark_read(unread, user_id)
        logger.debug("Marked %d message(s) read for %s", marked, user_id)
        refreshed = []
        for message in messages:
            if message.message_id in unread:
                # Stored read_at may have been set by a concurrent request
                message = self.message_store.get(message.message_id) or message
            refreshed.append(message)
        return refreshed

    def mark_thread_read(self, user_id: str, thread_key: str) -> int:
        messages = self.message_store.find_visible(user_id, thread_key)
        if not messages:
            raise NotFoundError("Conversation not found")
        return self.message_store.mark_read(
            [m.message_id for m in messages if m.is_unread_for(user_id)], user_id
        )

    def unread_count(self, user_id: str) -> int:
        return sum(1 for m in self.message_store.find_visible(user_id) if m.is_unread_for(user_id))

    def delete_conversation(self, thread_key: str, user_id: str, actor_role: str) -> int:
        """Soft-delete a conversation for ``user_id``.

        Raises:
            ForbiddenError: Unless ``actor_role`` is super_admin
            NotFoundError: If the thread is not visible to ``user_id``
        """
        if actor_role != SUPER_ADMIN:
            raise ForbiddenError("Only super admins may delete conversations")
        messages = self.message_store.find_visible(user_id, thread_key)
        if not messages:
            raise NotFoundError("Conversation not found")
        return self.message_store.hide_messages([m.message_id for m in messages], user_id)
