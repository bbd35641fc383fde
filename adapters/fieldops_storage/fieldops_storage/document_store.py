# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Document store contract shared by the in-memory and MongoDB drivers."""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Sort = Optional[List[Tuple[str, int]]]


class DocumentStoreError(Exception):
    """Raised when a store operation fails."""


class DocumentStoreNotConnectedError(DocumentStoreError):
    """Raised when a store is used before ``connect()``."""


class DocumentStoreConnectionError(DocumentStoreError):
    """Raised when ``connect()`` cannot reach the backend."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when an update or delete targets a missing document."""


class DocumentStore(ABC):
    """Collections of JSON-like documents keyed by ``_id``.

    Filters are equality filters. A filter value matches a list-valued field
    when the list contains it, as in MongoDB. Returned documents are copies;
    mutating them never changes stored state.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the backend. Raises DocumentStoreConnectionError on failure."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release the backend. Safe to call when not connected."""

    @abstractmethod
    def insert_document(self, collection: str, doc: Dict[str, Any]) -> str:
        """Store ``doc`` and return its id. A caller-supplied ``_id`` is kept."""

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document with ``doc_id``, or None."""

    @abstractmethod
    def query_documents(
        self,
        collection: str,
        filter_dict: Dict[str, Any],
        limit: Optional[int] = 100,
        sort: Sort = None,
    ) -> List[Dict[str, Any]]:
        """Return documents whose fields equal ``filter_dict``.

        Args:
            limit: Maximum number of documents, or None for all of them
            sort: ``(field, 1 | -1)`` pairs applied before ``limit``, so a
                capped query keeps the leading documents of that order
        """

    @abstractmethod
    def update_document(
        self, collection: str, doc_id: str, patch: Dict[str, Any]
    ) -> None:
        """Set each top-level field of ``patch``.

        Raises:
            DocumentNotFoundError: no document has ``doc_id``
        """

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: no document has ``doc_id``
        """

    @abstractmethod
    def update_array_element(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        match: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> bool:
        """Set ``patch`` on the first element of ``array_field`` equal to ``match``.

        Finding and changing the element is one atomic step, so of several
        concurrent callers with the same ``match`` at most one modifies it.
        Returns False when nothing matched, including a missing document.
        """

    @abstractmethod
    def add_to_array_if_absent(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        element: Dict[str, Any],
        key: str,
    ) -> bool:
        """Append ``element`` unless an element with the same ``element[key]`` exists.

        Atomic. Returns True only when the element was appended.
        """


def _mongo_settings(overrides: Dict[str, Any]) -> Dict[str, Any]:
    settings = dict(overrides)
    settings.setdefault("host", os.getenv("DOCUMENT_DATABASE_HOST", "localhost"))
    settings.setdefault("port", int(os.getenv("DOCUMENT_DATABASE_PORT", "27017")))
    settings.setdefault("database", os.getenv("DOCUMENT_DATABASE_NAME", "fieldops"))
    for name, env_var in (("username", "DOCUMENT_DATABASE_USER"), ("password", "DOCUMENT_DATABASE_PASSWORD")):
        if settings.get(name) is None and os.getenv(env_var) is not None:
            settings[name] = os.getenv(env_var)
    return settings


def create_document_store(store_type: str | None = None, **kwargs) -> DocumentStore:
    """Build a document store.

    Args:
        store_type: "inmemory" or "mongodb". Defaults to DOCUMENT_STORE_TYPE,
            then "inmemory".
        **kwargs: Driver arguments. Explicit MongoDB settings win over the
            DOCUMENT_DATABASE_* environment variables.

    Raises:
        ValueError: unknown store_type
    """
    store_type = store_type or os.getenv("DOCUMENT_STORE_TYPE", "inmemory")

    if store_type == "inmemory":
        from .inmemory_document_store import InMemoryDocumentStore
        return InMemoryDocumentStore()
    if store_type == "mongodb":
        from .mongo_document_store import MongoDocumentStore
        return MongoDocumentStore(**_mongo_settings(kwargs))
    raise ValueError(f"Unknown store_type: {store_type}")
