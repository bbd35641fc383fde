# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Directories backed by the ``users`` and ``projects`` document collections."""

import logging
from typing import Dict, List, Optional

from fieldops_storage import DocumentStore

from .directory import IdentityDirectory, ProjectAssignmentDirectory
from .models import UserRecord

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
PROJECTS_COLLECTION = "projects"


class DocumentIdentityDirectory(IdentityDirectory):

    def __init__(self, document_store: DocumentStore, scan_limit: Optional[int] = None):
        self.document_store = document_store
        self.scan_limit = scan_limit

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        doc = self.document_store.get_document(USERS_COLLECTION, user_id)
        return UserRecord.from_document(doc) if doc else None

    def list_active_users_by_role(self, role: str) -> List[UserRecord]:
        docs = self.document_store.query_documents(
            USERS_COLLECTION, {"role": role, "is_active": True}, limit=self.scan_limit
        )
        return [UserRecord.from_document(d) for d in docs]

    def list_active_users(self) -> List[UserRecord]:
        docs = self.document_store.query_documents(
            USERS_COLLECTION, {"is_active": True}, limit=self.scan_limit
        )
        return [UserRecord.from_document(d) for d in docs]


class DocumentProjectDirectory(ProjectAssignmentDirectory):
    """Projects carry a single ``project_manager_id`` and ``contractor_id``.

    Either field may be missing on unassigned projects; those are skipped.
    """

    def __init__(self, document_store: DocumentStore, scan_limit: Optional[int] = None):
        self.document_store = document_store
        self.scan_limit = scan_limit

    def find_projects_managed_by(self, user_id: str) -> List[Dict[str, str]]:
        docs = self.document_store.query_documents(
            PROJECTS_COLLECTION, {"project_manager_id": user_id}, limit=self.scan_limit
        )
        return [{"contractor_id": d["contractor_id"]} for d in docs if d.get("contractor_id")]

    def find_projects_assigned_to(self, contractor_id: str) -> List[Dict[str, str]]:
        docs = self.document_store.query_documents(
            PROJECTS_COLLECTION, {"contractor_id": contractor_id}, limit=self.scan_limit
        )
        return [{"project_manager_id": d["project_manager_id"]} for d in docs if d.get("project_manager_id")]
