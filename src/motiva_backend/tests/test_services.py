"""
Role, trainer assignment and session bookkeeping.
"""

import pytest

from motiva_backend.api.exceptions import ValidationException
from motiva_backend.interface.collections import MEMBER_ROLES
from motiva_backend.permissions.principal import Role
from motiva_backend.permissions.relationships import RelationshipValidator
from motiva_backend.services import RoleAssignmentService, TrainerAssignmentService
from motiva_backend.settings import settings
from motiva_backend.store.base import StoreError


class TestRoleAssignment:

    def test_assign(self, store):
        service = RoleAssignmentService(store)
        service.assign_role("m1", "trainer")
        assert service.get_role("m1") == Role.TRAINER

    def test_assign_is_idempotent(self, store):
        service = RoleAssignmentService(store)
        first = service.assign_role("m1", "client")
        second = service.assign_role("m1", "client")
        assert first["_id"] == second["_id"]
        assert store.query(MEMBER_ROLES).find().total_count == 1

    def test_single_active_role(self, store):
        service = RoleAssignmentService(store)
        service.assign_role("m1", "client")
        service.assign_role("m1", "admin")

        active = store.query(MEMBER_ROLES).eq("memberId", "m1").eq("status", "active").find()
        assert active.total_count == 1
        assert service.get_role("m1") == Role.ADMIN

    def test_invalid_role(self, store):
        with pytest.raises(ValidationException):
            RoleAssignmentService(store).assign_role("m1", "coach")

    def test_revoke(self, store):
        service = RoleAssignmentService(store)
        service.assign_role("m1", "client")
        assert service.revoke_role("m1") == 1
        assert service.get_role("m1") is None
        assert service.revoke_role("m1") == 0


class TestTrainerAssignment:

    def test_assign(self, store):
        result = TrainerAssignmentService(store).assign_client("c1", "t1")
        assert result.success
        assert result.message == "Successfully assigned to trainer"
        assert RelationshipValidator(store).has_access("t1", "c1")
        assert not RelationshipValidator(store).has_access("t2", "c1")

    def test_idempotent(self, store):
        service = TrainerAssignmentService(store)
        service.assign_client("c1", "t1")
        result = service.assign_client("c1", "t1")
        assert result.success
        assert result.already_existed
        assert store.query("trainerclientassignments").find().total_count == 1

    def test_missing_ids(self, store, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_TRAINER_ID", "")
        result = TrainerAssignmentService(store).assign_client("c1")
        assert not result.success
        assert result.error == "Missing required IDs"

    def test_store_failure(self, store, monkeypatch):
        def broken(*args, **kwargs):
            raise StoreError("down")
        monkeypatch.setattr(store, "insert", broken)

        result = TrainerAssignmentService(store).assign_client("c1", "t1")
        assert not result.success
        assert result.error == "down"

    def test_unassign(self, store):
        service = TrainerAssignmentService(store)
        service.assign_client("c1", "t1")
        assert service.unassign_client("c1", "t1")
        assert not RelationshipValidator(store).has_access("t1", "c1")
        assert not service.unassign_client("c1", "t1")

    def test_trainer_clients(self, store):
        service = TrainerAssignmentService(store)
        service.assign_client("c1", "t1")
        service.assign_client("c2", "t1")
        service.assign_client("c3", "t2")
        assert sorted(service.get_trainer_clients("t1")) == ["c1", "c2"]

    def test_zero_max_page_size(self, store, monkeypatch):
        monkeypatch.setattr(settings, "MAX_PAGE_SIZE", 0)
        service = TrainerAssignmentService(store)
        service.assign_client("c1", "t1")
        service.assign_client("c2", "t1")
        assert sorted(service.get_trainer_clients("t1")) == ["c1", "c2"]

    def test_backfill(self, store):
        roles = RoleAssignmentService(store)
        for member, role in [("c1", "client"), ("c2", "client"), ("c3", "client"), ("t1", "trainer")]:
            roles.assign_role(member, role)

        service = TrainerAssignmentService(store)
        service.assign_client("c1", "t1")

        summary = service.backfill("t1")
        assert summary == {"total": 3, "successful": 2, "skipped": 1, "failed": 0}
        assert sorted(service.get_trainer_clients("t1")) == ["c1", "c2", "c3"]

        assert service.backfill("t1")["skipped"] == 3
