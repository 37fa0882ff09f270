import pytest
from click.testing import CliRunner

from motiva_backend.cli.cli import cli
from motiva_backend.permissions.auth import SessionIdentityResolver
from motiva_backend.permissions.principal import Role
from motiva_backend.permissions.relationships import RelationshipValidator
from motiva_backend.services import RoleAssignmentService


@pytest.fixture
def runner(store, monkeypatch):
    for module in ("roles", "trainers", "sessions"):
        monkeypatch.setattr(f"motiva_backend.cli.{module}.get_store", lambda: store)
    return CliRunner()


class TestRolesCommand:

    def test_assign_and_revoke(self, runner, store):
        result = runner.invoke(cli, ["roles", "assign", "m1", "trainer"])
        assert result.exit_code == 0
        assert RoleAssignmentService(store).get_role("m1") == Role.TRAINER

        result = runner.invoke(cli, ["roles", "revoke", "m1"])
        assert result.exit_code == 0
        assert RoleAssignmentService(store).get_role("m1") is None

    def test_rejects_unknown_role(self, runner):
        result = runner.invoke(cli, ["roles", "assign", "m1", "coach"])
        assert result.exit_code != 0


class TestTrainersCommand:

    def test_assign_and_unassign(self, runner, store):
        assert runner.invoke(cli, ["trainers", "assign", "t1", "c1"]).exit_code == 0
        assert RelationshipValidator(store).has_access("t1", "c1")

        assert runner.invoke(cli, ["trainers", "unassign", "t1", "c1"]).exit_code == 0
        assert not RelationshipValidator(store).has_access("t1", "c1")


class TestSessionsCommand:

    def test_create_prints_token(self, runner, store):
        result = runner.invoke(cli, ["sessions", "create", "m1", "m1@example.com"])
        assert result.exit_code == 0

        token = result.output.strip()
        assert SessionIdentityResolver(store).resolve(token).member_id == "m1"
