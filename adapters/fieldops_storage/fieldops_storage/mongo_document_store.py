# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""MongoDB-backed document store."""

import logging
from contextlib import contextmanager
from typing import Any

from .document_store import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentStoreConnectionError,
    DocumentStoreError,
    DocumentStoreNotConnectedError,
    Sort,
)

logger = logging.getLogger(__name__)


def _id_query(doc_id: str) -> dict[str, Any]:
    """Match ``doc_id`` as an ObjectId when it parses as one, else as a string."""
    from bson import ObjectId
    from bson.errors import InvalidId

    try:
        return {"_id": ObjectId(doc_id)}
    except (TypeError, ValueError, InvalidId):
        return {"_id": doc_id}


def _public(doc: dict[str, Any]) -> dict[str, Any]:
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


@contextmanager
def _driver_errors(operation: str, target: str):
    """Re-raise driver failures as DocumentStoreError."""
    try:
        yield
    except DocumentStoreError:
        raise
    except Exception as e:
        logger.error("MongoDocumentStore: %s on %s failed - %s", operation, target, e, exc_info=True)
        raise DocumentStoreError(f"{operation} failed for {target}") from e


class MongoDocumentStore(DocumentStore):
    """Document store on a single MongoDB database.

    Array updates are single ``update_one`` calls, so each is atomic for the
    document it touches.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
        **client_options
    ):
        for name, value in (("host", host), ("port", port), ("database", database)):
            if value is None or value == "":
                raise ValueError(f"MongoDB {name} is required")

        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.database_name = database
        self.client_options = client_options
        self.client = None
        self.database = None

    def connect(self) -> None:
        from pymongo import MongoClient
        from pymongo.errors import PyMongoError

        params: dict[str, Any] = {"host": self.host, "port": self.port}
        if self.username and self.password:
            params.update(username=self.username, password=self.password, authSource="admin")
        params.update(self.client_options)

        try:
            client = MongoClient(**params)
            client.admin.command("ping")
        except PyMongoError as e:
            logger.error("MongoDocumentStore: cannot reach %s:%s - %s", self.host, self.port, e)
            raise DocumentStoreConnectionError(
                f"Failed to connect to MongoDB at {self.host}:{self.port}"
            ) from e

        self.client = client
        self.database = client[self.database_name]
        logger.info("MongoDocumentStore: using %s:%s/%s", self.host, self.port, self.database_name)

    def disconnect(self) -> None:
        if self.client is None:
            return
        self.client.close()
        self.client = None
        self.database = None
        logger.info("MongoDocumentStore: disconnected")

    def _collection(self, collection: str):
        if self.database is None:
            raise DocumentStoreNotConnectedError("Not connected to MongoDB")
        return self.database[collection]

    def insert_document(self, collection: str, doc: dict[str, Any]) -> str:
        coll = self._collection(collection)
        with _driver_errors("insert", collection):
            inserted_id = coll.insert_one(dict(doc)).inserted_id
        return str(inserted_id)

    def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        coll = self._collection(collection)
        with _driver_errors("get", f"{collection}/{doc_id}"):
            doc = coll.find_one(_id_query(doc_id))
        return _public(doc) if doc else None

    def query_documents(
        self,
        collection: str,
        filter_dict: dict[str, Any],
        limit: int | None = 100,
        sort: Sort = None,
    ) -> list[dict[str, Any]]:
        coll = self._collection(collection)
        with _driver_errors("query", collection):
            cursor = coll.find(filter_dict)
            if sort:
                cursor = cursor.sort(sort)
            if limit is not None:
                cursor = cursor.limit(limit)
            docs = [_public(doc) for doc in cursor]
        logger.debug("MongoDocumentStore: %s %s -> %d", collection, filter_dict, len(docs))
        return docs

    def update_document(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        coll = self._collection(collection)
        with _driver_errors("update", f"{collection}/{doc_id}"):
            matched = coll.update_one(_id_query(doc_id), {"$set": patch}).matched_count
        if not matched:
            raise DocumentNotFoundError(f"Document {doc_id} not found in collection {collection}")

    def delete_document(self, collection: str, doc_id: str) -> None:
        coll = self._collection(collection)
        with _driver_errors("delete", f"{collection}/{doc_id}"):
            deleted = coll.delete_one(_id_query(doc_id)).deleted_count
        if not deleted:
            raise DocumentNotFoundError(f"Document {doc_id} not found in collection {collection}")

    def update_array_element(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        match: dict[str, Any],
        patch: dict[str, Any],
    ) -> bool:
        coll = self._collection(collection)
        query = _id_query(doc_id)
        query[array_field] = {"$elemMatch": match}
        changes = {f"{array_field}.$.{name}": value for name, value in patch.items()}
        with _driver_errors("update_array_element", f"{collection}/{doc_id}"):
            modified = coll.update_one(query, {"$set": changes}).modified_count
        return modified > 0

    def add_to_array_if_absent(
        self,
        collection: str,
        doc_id: str,
        array_field: str,
        element: dict[str, Any],
        key: str,
    ) -> bool:
        coll = self._collection(collection)
        query = _id_query(doc_id)
        query[f"{array_field}.{key}"] = {"$ne": element.get(key)}
        with _driver_errors("add_to_array_if_absent", f"{collection}/{doc_id}"):
            modified = coll.update_one(query, {"$push": {array_field: element}}).modified_count
        return modified > 0
