# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Thread keys over a visible message set.

A thread root is keyed by its participant signature, so roots with the same
participants form one conversation. A reply joins its root's conversation
when the root is in the set, and is otherwise keyed by the root id. All
functions here are pure.
"""

from typing import Dict, Iterable, List

from .models import Message

SIGNATURE_PREFIX = "p:"


def participant_signature(message: Message) -> str:
    return SIGNATURE_PREFIX + ",".join(message.participants)


def thread_keys(messages: Iterable[Message]) -> Dict[str, str]:
    """Map each message id to its thread key."""
    by_id = {m.message_id: m for m in messages}
    keys: Dict[str, str] = {}

    def key_for(message: Message, seen: frozenset) -> str:
        if message.message_id in keys:
            return keys[message.message_id]
        if message.thread_id is None:
            return participant_signature(message)
        parent = by_id.get(message.thread_id)
        if parent is None or parent.message_id in seen:
            return message.thread_id
        return key_for(parent, seen | {message.message_id})

    for message in by_id.values():
        keys[message.message_id] = key_for(message, frozenset())
    return keys


def select_thread(messages: List[Message], key_or_id: str) -> List[Message]:
    """Return the messages of one thread.

    ``key_or_id`` may be a thread key or the id of any message in the thread,
    including a root id that is not itself in ``messages``.
    """
    keys = thread_keys(messages)
    target = keys.get(key_or_id, key_or_id)
    return [m for m in messages if keys[m.message_id] == target]
