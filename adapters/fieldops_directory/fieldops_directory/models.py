# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""User records and roles."""

from dataclasses import dataclass
from typing import Any, Dict

SUPER_ADMIN = "super_admin"
ADMIN = "admin"
PROJECT_MANAGER = "project_manager"
CONTRACTOR = "contractor"
VIEWER = "viewer"

ROLES = (SUPER_ADMIN, ADMIN, PROJECT_MANAGER, CONTRACTOR, VIEWER)
ADMIN_ROLES = (SUPER_ADMIN, ADMIN)


@dataclass(frozen=True)
class UserRecord:
    """A user as seen by the messaging service."""

    id: str
    role: str
    is_active: bool = True
    full_name: str = ""
    email: str = ""

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(doc["_id"]),
            role=doc.get("role", VIEWER),
            is_active=bool(doc.get("is_active", True)),
            full_name=doc.get("full_name", ""),
            email=doc.get("email", ""),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "role": self.role,
            "is_active": self.is_active,
            "full_name": self.full_name,
            "email": self.email,
        }

    def display(self) -> Dict[str, Any]:
        """Public participant data."""
        return {"id": self.id, "full_name": self.full_name, "email": self.email, "role": self.role}
