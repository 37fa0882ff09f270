"""
Envelope-level access rules, evaluated with a stubbed relationship validator.
"""

import pytest
from unittest.mock import MagicMock

from motiva_backend.interface.envelope import GatewayOperation
from motiva_backend.permissions.core import AccessEvaluator
from motiva_backend.permissions.principal import Principal, Role
from motiva_backend.permissions.relationships import RelationshipValidator

ALL_OPERATIONS = list(GatewayOperation)


def make_evaluator(assigned_pairs=()):
    relationships = MagicMock(spec=RelationshipValidator)
    relationships.has_access.side_effect = lambda trainer_id, client_id: (trainer_id, client_id) in assigned_pairs
    return AccessEvaluator(relationships), relationships


ADMIN = Principal(member_id="a1", role=Role.ADMIN)
CLIENT = Principal(member_id="c1", role=Role.CLIENT)
TRAINER = Principal(member_id="t1", role=Role.TRAINER)
NO_ROLE = Principal(member_id="x1")


class TestAdmin:

    @pytest.mark.parametrize("operation", ALL_OPERATIONS)
    def test_admin_always_authorized(self, operation):
        evaluator, relationships = make_evaluator()
        decision = evaluator.authorize(ADMIN, operation, "programs", client_id="c9", trainer_id="t9")
        assert decision.authorized
        relationships.has_access.assert_not_called()


class TestClient:

    @pytest.mark.parametrize("operation", [GatewayOperation.GET_FOR_CLIENT, GatewayOperation.GET_FOR_TRAINER])
    def test_cross_entity_queries_denied(self, operation):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(CLIENT, operation, "weeklycheckins", client_id="c1")
        assert not decision.authorized
        assert decision.reason == "Clients cannot query other clients or trainers"

    def test_foreign_client_id_denied(self):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(CLIENT, GatewayOperation.CREATE, "weeklycheckins", client_id="c2")
        assert not decision.authorized
        assert decision.reason == "Clients can only access their own data"

    @pytest.mark.parametrize("client_id", [None, "c1"])
    def test_own_scope_authorized(self, client_id):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(CLIENT, GatewayOperation.GET_ALL, "weeklycheckins", client_id=client_id)
        assert decision.authorized


class TestTrainer:

    def test_get_for_trainer_denied(self):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(TRAINER, GatewayOperation.GET_FOR_TRAINER, "programs", trainer_id="t1")
        assert not decision.authorized
        assert decision.reason == "Trainers cannot query other trainers"

    def test_get_for_client_requires_assignment(self):
        evaluator, relationships = make_evaluator(assigned_pairs={("t1", "c1")})

        assert evaluator.authorize(TRAINER, GatewayOperation.GET_FOR_CLIENT, "programs", client_id="c1").authorized

        decision = evaluator.authorize(TRAINER, GatewayOperation.GET_FOR_CLIENT, "programs", client_id="c2")
        assert not decision.authorized
        assert decision.reason == "Trainer does not have access to this client"
        relationships.has_access.assert_called_with("t1", "c2")

    @pytest.mark.parametrize("operation", [GatewayOperation.GET_BY_ID, GatewayOperation.UPDATE, GatewayOperation.CREATE])
    def test_single_item_ops_with_client_id_check_relationship(self, operation):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(TRAINER, operation, "trainerclientnotes", client_id="c1")
        assert not decision.authorized

    def test_without_client_id_authorized(self):
        evaluator, relationships = make_evaluator()
        assert evaluator.authorize(TRAINER, GatewayOperation.GET_ALL, "programs").authorized
        relationships.has_access.assert_not_called()


class TestNoRole:

    @pytest.mark.parametrize("operation", ALL_OPERATIONS)
    def test_denied(self, operation):
        evaluator, _ = make_evaluator()
        decision = evaluator.authorize(NO_ROLE, operation, "programs")
        assert not decision.authorized
        assert decision.reason == "Invalid role"
