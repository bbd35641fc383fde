# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Tests for conversation aggregation."""

import pytest

from app.conversations import ConversationAggregator, summarize_conversations
from app.errors import ForbiddenError, NotFoundError, ValidationError
from fieldops_directory import ADMIN, SUPER_ADMIN


@pytest.fixture
def aggregator(message_store):
    return ConversationAggregator(message_store, default_page_size=2, max_page_size=5)


class TestListConversations:

    def test_groups_and_summaries(self, message_store, aggregator):
        root = message_store.append("admin", ["c"], "Kickoff", "Starting Monday")
        reply = message_store.append("c", ["admin"], "Re: Kickoff", "See you then", thread_id=root.message_id)

        page = aggregator.list_conversations("admin")

        assert page.total == 1
        summary = page.items[0]
        assert summary.thread_key == "p:admin,c"
        assert summary.thread_id == root.message_id
        assert summary.subject == "Kickoff"
        assert summary.last_message == "See you then"
        assert summary.last_message_id == reply.message_id
        assert summary.last_message_at == reply.created_at
        assert summary.participants == ["c"]
        assert summary.unread_count == 1
        assert summary.message_count == 2
        assert summary.is_sender is False

    def test_sorted_by_last_activity(self, message_store, aggregator):
        first = message_store.append("admin", ["c"], "One", "b")
        message_store.append("admin", ["pm"], "Two", "b")
        message_store.append("admin", ["d"], "Three", "b")
        message_store.append("c", ["admin"], "Re: One", "b", thread_id=first.message_id)

        summaries = summarize_conversations(message_store.find_visible("admin"), "admin")

        assert [s.subject for s in summaries] == ["One", "Three", "Two"]

    def test_timestamp_ties_break_on_newest_id(self, document_store, message_store):
        fixed = "2025-03-01T09:00:00.000000+00:00"
        for message_id, recipient in (("a" * 32, "c"), ("b" * 32, "pm")):
            document_store.insert_document("messages", {
                "_id": message_id, "sender_id": "admin", "recipient_ids": [recipient],
                "recipients": [{"recipient_id": recipient, "is_read": False, "read_at": None}],
                "subject": "s", "body": "b", "thread_id": None, "created_at": fixed,
                "deleted_by": [], "is_deleted": False,
            })

        summaries = summarize_conversations(message_store.find_visible("admin"), "admin")

        assert [s.last_message_id for s in summaries] == ["b" * 32, "a" * 32]

    def test_pages_do_not_overlap(self, message_store, aggregator):
        for recipient in ("c", "d", "pm", "pm2", "root"):
            message_store.append("admin", [recipient], f"To {recipient}", "b")

        pages = [aggregator.list_conversations("admin", page=n) for n in (1, 2, 3)]

        keys = [s.thread_key for p in pages for s in p.items]
        assert len(keys) == len(set(keys)) == 5
        assert pages[0].pagination() == {"page": 1, "limit": 2, "total": 5, "total_pages": 3}
        assert len(pages[2].items) == 1
        assert aggregator.list_conversations("admin", page=4).items == []

    @pytest.mark.parametrize("page,limit,field", [(0, 2, "page"), (1, 0, "limit"), (1, 6, "limit")])
    def test_invalid_paging(self, aggregator, page, limit, field):
        with pytest.raises(ValidationError) as exc_info:
            aggregator.list_conversations("admin", page=page, page_size=limit)

        assert exc_info.value.field == field

    def test_empty_inbox(self, aggregator):
        page = aggregator.list_conversations("viewer")

        assert page.items == []
        assert page.total_pages == 0


class TestGetThread:

    def test_oldest_first_and_marks_read(self, message_store, aggregator):
        root = message_store.append("admin", ["c"], "Kickoff", "Starting Monday")
        message_store.append("c", ["admin"], "Re", "Ok", thread_id=root.message_id)
        message_store.append("c", ["admin"], "Re", "Also", thread_id=root.message_id)

        messages = aggregator.get_thread("admin", root.message_id)

        assert [m.body for m in messages] == ["Starting Monday", "Ok", "Also"]
        assert [m.created_at for m in messages] == sorted(m.created_at for m in messages)
        assert all(m.recipient_state("admin").is_read for m in messages[1:])
        assert aggregator.unread_count("admin") == 0
        assert aggregator.unread_count("c") == 1

    def test_invisible_thread_not_found(self, message_store, aggregator):
        root = message_store.append("admin", ["c"], "Private", "b")

        with pytest.raises(NotFoundError):
            aggregator.get_thread("pm", root.message_id)
        with pytest.raises(NotFoundError):
            aggregator.get_thread("admin", "p:nobody,else")


class TestMarkThreadRead:

    def test_returns_updated_count(self, message_store, aggregator):
        root = message_store.append("admin", ["c"], "One", "b")
        message_store.append("admin", ["c"], "Two", "b", thread_id=root.message_id)

        assert aggregator.mark_thread_read("c", "p:admin,c") == 2
        assert aggregator.mark_thread_read("c", "p:admin,c") == 0

    def test_unknown_thread(self, aggregator):
        with pytest.raises(NotFoundError):
            aggregator.mark_thread_read("c", "p:admin,c")


class TestDeleteConversation:

    def test_only_super_admin(self, message_store, aggregator):
        message_store.append("admin", ["c"], "One", "b")

        with pytest.raises(ForbiddenError):
            aggregator.delete_conversation("p:admin,c", "admin", ADMIN)

    def test_role_checked_before_existence(self, aggregator):
        with pytest.raises(ForbiddenError):
            aggregator.delete_conversation("p:nobody", "admin", ADMIN)

    def test_soft_delete_for_caller_only(self, message_store, aggregator):
        message_store.append("root", ["c"], "One", "b")

        assert aggregator.delete_conversation("p:c,root", "root", SUPER_ADMIN) == 1

        assert aggregator.list_conversations("root").total == 0
        assert aggregator.list_conversations("c").total == 1
        with pytest.raises(NotFoundError):
            aggregator.delete_conversation("p:c,root", "root", SUPER_ADMIN)
