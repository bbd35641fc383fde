# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps Storage Adapter.

A shared library for document storage across FieldOps services.
"""

__version__ = "0.1.0"

from .document_store import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentStoreConnectionError,
    DocumentStoreError,
    DocumentStoreNotConnectedError,
    create_document_store,
)
from .inmemory_document_store import InMemoryDocumentStore
from .mongo_document_store import MongoDocumentStore

__all__ = [
    # Version
    "__version__",
    # Document Stores
    "DocumentStore",
    "MongoDocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
    # Exceptions
    "DocumentStoreError",
    "DocumentStoreNotConnectedError",
    "DocumentStoreConnectionError",
    "DocumentNotFoundError",
]
