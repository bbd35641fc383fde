# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Read-only directory interfaces consumed by messaging."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from .models import UserRecord


class IdentityDirectory(ABC):
    """Lookup of users by id and role."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Return the user or None if unknown. Inactive users are returned."""
        pass

    @abstractmethod
    def list_active_users_by_role(self, role: str) -> List[UserRecord]:
        pass

    @abstractmethod
    def list_active_users(self) -> List[UserRecord]:
        pass

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserRecord]:
        """Return the known users among ``user_ids``, keyed by id."""
        found = {}
        for user_id in user_ids:
            if user_id in found:
                continue
            user = self.get_user(user_id)
            if user is not None:
                found[user_id] = user
        return found


class ProjectAssignmentDirectory(ABC):
    """Project manager and contractor assignments."""

    @abstractmethod
    def find_projects_managed_by(self, user_id: str) -> List[Dict[str, str]]:
        """Return ``[{"contractor_id": ...}]`` for projects managed by ``user_id``."""
        pass

    @abstractmethod
    def find_projects_assigned_to(self, contractor_id: str) -> List[Dict[str, str]]:
        """Return ``[{"project_manager_id": ...}]`` for projects assigned to ``contractor_id``."""
        pass
