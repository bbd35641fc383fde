# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Process-local document store used by tests and single-node development."""

import copy
import logging
import threading
import uuid
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .document_store import DocumentNotFoundError, DocumentStore, Sort

logger = logging.getLogger(__name__)


def _field_matches(actual: Any, wanted: Any) -> bool:
    # A scalar matches a list field that contains it
    if isinstance(actual, list) and not isinstance(wanted, list):
        return wanted in actual
    return actual == wanted


def _sort_key(value: Any) -> Tuple[bool, Any]:
    # Missing values order before present ones, as in MongoDB
    return (value is not None, value)


def _is_match(doc: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
    return all(_field_matches(doc.get(name), value) for name, value in criteria.items())


class InMemoryDocumentStore(DocumentStore):
    """Dictionaries of deep-copied documents behind one re-entrant lock.

    Every operation holds the lock, which gives the array updates the same
    per-document atomicity MongoDB provides.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def _bucket(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._data.setdefault(collection, {})

    def _scan(self, collection: str, criteria: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        return (doc for doc in self._bucket(collection).values() if _is_match(doc, criteria))

    def insert_document(self, collection: str, doc: Dict[str, Any]) -> str:
        stored = copy.deepcopy(doc)
        stored["_id"] = str(doc.get("_id") or uuid.uuid4().hex)
        with self._lock:
            self._bucket(collection)[stored["_id"]] = stored
        logger.debug("InMemoryDocumentStore: %s += %s", collection, stored["_id"])
        return stored["_id"]

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            found = self._bucket(collection).get(doc_id)
            return copy.deepcopy(found) if found is not None else None

    def query_documents(
        self,
        collection: str,
        filter_dict: Dict[str, Any],
        limit: Optional[int] = 100,
        sort: Sort = None,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            found = list(self._scan(collection, filter_dict))
            # Stable sorts, least significant key first
            for name, direction in reversed(sort or []):
                found.sort(key=lambda doc: _sort_key(doc.get(name)), reverse=direction < 0)
            if limit is not None:
                found = found[:limit]
            return [copy.deepcopy(doc) for doc in found]

    def update_document(
        self, collection: str, doc_id: str, patch: Dict[str, Any]
    ) -> None:
        with self._lock:
            target = self._bucket(collection).get(doc_id)
            if target is None:
                raise DocumentNotFoundError(f"Document {doc_id} not found in collection {collection}")
            target.update(copy.deepcopy(patch))

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self._lock:
            if self._bucket(collection).pop(doc_id, None) is None:
                raise DocumentNotFoundError(f"Document {doc_id} not found in collection {collection}")

    def update_array_element(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        match: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> bool:
        with self._lock:
            target = self._bucket(collection).get(doc_id) or {}
            element = next(
                (e for e in target.get(array_field) or [] if isinstance(e, dict) and _is_match(e, match)),
                None,
            )
            if element is None:
                return False
            element.update(copy.deepcopy(patch))
            return True

    def add_to_array_if_absent(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        element: Dict[str, Any],
        key: str,
    ) -> bool:
        with self._lock:
            target = self._bucket(collection).get(doc_id)
            if target is None:
                return False
            items = target.setdefault(array_field, [])
            if any(isinstance(e, dict) and e.get(key) == element.get(key) for e in items):
                return False
            items.append(copy.deepcopy(element))
            return True
