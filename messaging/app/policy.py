# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Role-derived recipient policy.

Eligibility is recomputed on every call from the current directory state.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List

from fieldops_directory import (
    ADMIN,
    ADMIN_ROLES,
    CONTRACTOR,
    PROJECT_MANAGER,
    SUPER_ADMIN,
    IdentityDirectory,
    ProjectAssignmentDirectory,
    UserRecord,
)

from .errors import ForbiddenError, ValidationError

logger = logging.getLogger(__name__)

MESSAGING_ROLES = (SUPER_ADMIN, ADMIN, PROJECT_MANAGER, CONTRACTOR)


@dataclass(frozen=True)
class AssignmentSnapshot:
    """Project assignment facts for one actor."""
    managed_contractor_ids: FrozenSet[str] = frozenset()
    project_manager_ids: FrozenSet[str] = frozenset()


def eligible_recipients(
    role: str,
    users: Iterable[UserRecord],
    assignments: AssignmentSnapshot,
) -> Dict[str, UserRecord]:
    """Compute who an actor with ``role`` may address.

    Args:
        role: Actor role
        users: Candidate users; inactive ones are never eligible
        assignments: The actor's project assignments

    Returns:
        Eligible users keyed by id
    """
    active = {u.id: u for u in users if u.is_active}

    if role in ADMIN_ROLES:
        return active

    admins = {uid: u for uid, u in active.items() if u.role in ADMIN_ROLES}
    if role == PROJECT_MANAGER:
        assigned = assignments.managed_contractor_ids
    elif role == CONTRACTOR:
        assigned = assignments.project_manager_ids
    else:
        return {}

    admins.update({uid: u for uid, u in active.items() if uid in assigned})
    return admins


class RecipientPolicyEngine:
    """Applies the recipient policy using the directories."""

    def __init__(self, identity_directory: IdentityDirectory, project_directory: ProjectAssignmentDirectory):
        self.identity_directory = identity_directory
        self.project_directory = project_directory

    def _assignments(self, actor_id: str, role: str) -> AssignmentSnapshot:
        if role == PROJECT_MANAGER:
            projects = self.project_directory.find_projects_managed_by(actor_id)
            return AssignmentSnapshot(managed_contractor_ids=frozenset(p["contractor_id"] for p in projects))
        if role == CONTRACTOR:
            projects = self.project_directory.find_projects_assigned_to(actor_id)
            return AssignmentSnapshot(project_manager_ids=frozenset(p["project_manager_id"] for p in projects))
        return AssignmentSnapshot()

    def _candidates(self, role: str, assignments: AssignmentSnapshot) -> List[UserRecord]:
        if role in ADMIN_ROLES:
            return self.identity_directory.list_active_users()

        candidates = []
        for admin_role in ADMIN_ROLES:
            candidates.extend(self.identity_directory.list_active_users_by_role(admin_role))
        assigned = assignments.managed_contractor_ids | assignments.project_manager_ids
        candidates.extend(self.identity_directory.get_users(sorted(assigned)).values())
        return candidates

    def eligible_for(self, actor_id: str, role: str) -> Dict[str, UserRecord]:
        if role not in MESSAGING_ROLES:
            return {}
        assignments = self._assignments(actor_id, role)
        return eligible_recipients(role, self._candidates(role, assignments), assignments)

    def validate(self, actor_id: str, role: str, proposed_recipient_ids: Iterable[str]) -> List[str]:
        """Validate a proposed recipient list.

        The actor is dropped from the list and duplicates are removed,
        keeping first occurrence order.

        Returns:
            The recipient ids to store

        Raises:
            ForbiddenError: If the role cannot send or any recipient is not eligible
            ValidationError: If no recipient remains
        """
        if role not in MESSAGING_ROLES:
            raise ForbiddenError(f"Role '{role}' is not permitted to send messages")

        recipients = list(dict.fromkeys(r for r in proposed_recipient_ids if r != actor_id))

        eligible = self.eligible_for(actor_id, role)
        offending = [r for r in recipients if r not in eligible]
        if offending:
            logger.info("Rejected recipients %s for %s (%s)", offending, actor_id, role)
            raise ForbiddenError("Not permitted to message these recipients", offending)

        if not recipients:
            raise ValidationError("recipients", "at least one recipient other than the sender is required")
        return recipients

    def allowed_recipients(self, actor_id: str, role: str) -> List[UserRecord]:
        """Eligible users other than the actor, sorted by full name then id."""
        eligible = self.eligible_for(actor_id, role)
        eligible.pop(actor_id, None)
        return sorted(eligible.values(), key=lambda u: (u.full_name.lower(), u.id))
