# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Tests for the recipient policy."""

import pytest

from app.errors import ForbiddenError, ValidationError
from app.policy import AssignmentSnapshot, RecipientPolicyEngine, eligible_recipients
from fieldops_directory import ADMIN, CONTRACTOR, PROJECT_MANAGER, SUPER_ADMIN, VIEWER, UserRecord


@pytest.fixture
def policy(identity_directory, project_directory):
    return RecipientPolicyEngine(identity_directory, project_directory)


class TestEligibleRecipients:
    """The pure eligibility function."""

    def test_admin_reaches_every_active_user(self, users):
        eligible = eligible_recipients(ADMIN, users, AssignmentSnapshot())

        assert set(eligible) == {"root", "admin", "pm", "pm2", "c", "d", "viewer"}

    def test_project_manager_reaches_admins_and_managed_contractors(self, users):
        eligible = eligible_recipients(
            PROJECT_MANAGER, users, AssignmentSnapshot(managed_contractor_ids=frozenset({"c", "gone"}))
        )

        assert set(eligible) == {"root", "admin", "c"}

    def test_contractor_reaches_admins_and_own_managers(self, users):
        eligible = eligible_recipients(
            CONTRACTOR, users, AssignmentSnapshot(project_manager_ids=frozenset({"pm2"}))
        )

        assert set(eligible) == {"root", "admin", "pm2"}

    @pytest.mark.parametrize("role", [VIEWER, "auditor"])
    def test_other_roles_reach_nobody(self, role, users):
        assert eligible_recipients(role, users, AssignmentSnapshot()) == {}

    def test_inactive_admin_is_not_eligible(self):
        users = [UserRecord("old", SUPER_ADMIN, False), UserRecord("new", ADMIN, True)]

        assert set(eligible_recipients(CONTRACTOR, users, AssignmentSnapshot())) == {"new"}


class TestRecipientPolicyEngine:

    def test_eligible_for_uses_project_assignments(self, policy):
        assert set(policy.eligible_for("pm", PROJECT_MANAGER)) == {"root", "admin", "c"}
        assert set(policy.eligible_for("c", CONTRACTOR)) == {"root", "admin", "pm"}
        assert set(policy.eligible_for("d", CONTRACTOR)) == {"root", "admin", "pm2"}

    def test_validate_drops_sender_and_duplicates(self, policy):
        recipients = policy.validate("c", CONTRACTOR, ["pm", "c", "admin", "pm"])

        assert recipients == ["pm", "admin"]

    def test_validate_self_only_is_validation_error(self, policy):
        with pytest.raises(ValidationError) as exc_info:
            policy.validate("c", CONTRACTOR, ["c"])

        assert exc_info.value.field == "recipients"

    def test_validate_names_offending_recipients(self, policy):
        with pytest.raises(ForbiddenError) as exc_info:
            policy.validate("c", CONTRACTOR, ["pm", "pm2", "d"])

        assert exc_info.value.offending_ids == ["d", "pm2"]
        assert exc_info.value.to_dict()["details"]["offending_ids"] == ["d", "pm2"]

    def test_validate_rejects_inactive_recipient(self, policy):
        with pytest.raises(ForbiddenError):
            policy.validate("pm", PROJECT_MANAGER, ["gone"])

    def test_viewer_cannot_send(self, policy):
        with pytest.raises(ForbiddenError, match="not permitted to send"):
            policy.validate("viewer", VIEWER, ["admin"])

    def test_assignment_changes_apply_immediately(self, policy, document_store):
        with pytest.raises(ForbiddenError):
            policy.validate("c", CONTRACTOR, ["pm2"])

        document_store.insert_document("projects", {"_id": "p9", "project_manager_id": "pm2", "contractor_id": "c"})

        assert policy.validate("c", CONTRACTOR, ["pm2"]) == ["pm2"]

    def test_allowed_recipients_sorted_without_actor(self, policy):
        names = [u.full_name for u in policy.allowed_recipients("c", CONTRACTOR)]

        assert names == ["Adam Admin", "Paula Manager", "Rita Root"]

    def test_allowed_recipients_for_admin_excludes_self(self, policy):
        ids = [u.id for u in policy.allowed_recipients("admin", ADMIN)]

        assert "admin" not in ids
        assert "gone" not in ids
        assert len(ids) == 6
