# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Tests for thread key derivation."""

from app.models import Message, RecipientState
from app.threads import participant_signature, select_thread, thread_keys


def make(message_id, sender, recipients, thread_id=None, created_at="2025-01-01T00:00:00.000000+00:00"):
    return Message(
        message_id=message_id,
        sender_id=sender,
        recipients=[RecipientState(r) for r in recipients],
        subject="s",
        body="b",
        created_at=created_at,
        thread_id=thread_id,
    )


def test_signature_is_sorted_and_deduplicated():
    assert participant_signature(make("m1", "z", ["a", "m"])) == "p:a,m,z"


def test_roots_with_same_participants_share_a_key():
    keys = thread_keys([make("m1", "a", ["b"]), make("m2", "b", ["a"]), make("m3", "a", ["b", "c"])])

    assert keys["m1"] == keys["m2"] == "p:a,b"
    assert keys["m3"] == "p:a,b,c"


def test_reply_joins_visible_root():
    keys = thread_keys([make("m1", "a", ["b", "c"]), make("m2", "b", ["a"], thread_id="m1")])

    assert keys["m2"] == "p:a,b,c"


def test_reply_without_visible_root_keyed_by_root_id():
    keys = thread_keys([make("m2", "b", ["a"], thread_id="m1")])

    assert keys["m2"] == "m1"


def test_reply_chain_follows_to_root():
    keys = thread_keys([
        make("m1", "a", ["b"]),
        make("m2", "b", ["a"], thread_id="m1"),
        make("m3", "a", ["b"], thread_id="m2"),
    ])

    assert keys["m3"] == "p:a,b"


def test_reference_cycle_terminates():
    keys = thread_keys([make("m1", "a", ["b"], thread_id="m2"), make("m2", "b", ["a"], thread_id="m1")])

    assert set(keys) == {"m1", "m2"}


def test_select_thread_by_key_or_member_id():
    messages = [
        make("m1", "a", ["b"]),
        make("m2", "b", ["a"], thread_id="m1"),
        make("m3", "a", ["c"]),
    ]

    assert {m.message_id for m in select_thread(messages, "p:a,b")} == {"m1", "m2"}
    assert {m.message_id for m in select_thread(messages, "m2")} == {"m1", "m2"}
    assert select_thread(messages, "p:x,y") == []


def test_select_thread_by_missing_root_id():
    messages = [make("m2", "b", ["a"], thread_id="m1"), make("m3", "b", ["a"], thread_id="m1")]

    assert {m.message_id for m in select_thread(messages, "m1")} == {"m2", "m3"}
