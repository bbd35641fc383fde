# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps directory adapter: users, roles and project assignments."""

__version__ = "0.1.0"

from .directory import IdentityDirectory, ProjectAssignmentDirectory
from .document_directory import (
    PROJECTS_COLLECTION,
    USERS_COLLECTION,
    DocumentIdentityDirectory,
    DocumentProjectDirectory,
)
from .models import (
    ADMIN,
    ADMIN_ROLES,
    CONTRACTOR,
    PROJECT_MANAGER,
    ROLES,
    SUPER_ADMIN,
    VIEWER,
    UserRecord,
)

__all__ = [
    "__version__",
    "UserRecord",
    "IdentityDirectory",
    "ProjectAssignmentDirectory",
    "DocumentIdentityDirectory",
    "DocumentProjectDirectory",
    "USERS_COLLECTION",
    "PROJECTS_COLLECTION",
    "SUPER_ADMIN",
    "ADMIN",
    "PROJECT_MANAGER",
    "CONTRACTOR",
    "VIEWER",
    "ROLES",
    "ADMIN_ROLES",
]
