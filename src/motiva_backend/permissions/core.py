"""
Envelope-level access control for the protected data gateway.

``AccessEvaluator.authorize`` decides from the actor, the operation and the
ownership ids declared on the envelope. Record-level checks against the
stored record are made afterwards by the collection policies.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from motiva_backend.interface.collections import ProtectedCollection
from motiva_backend.interface.envelope import CROSS_ENTITY_OPERATIONS, GatewayOperation
from motiva_backend.permissions.handlers import policy_registry
from motiva_backend.permissions.handlers_impl import OwnedRecordPolicy, ProgramAssignmentPolicy
from motiva_backend.permissions.principal import Principal, Role
from motiva_backend.permissions.relationships import RelationshipValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    authorized: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "AccessDecision":
        return cls(False, reason)


class AccessEvaluator:
    """Role and relationship rules, evaluated in order of precedence"""

    def __init__(self, relationships: RelationshipValidator):
        self.relationships = relationships

    def authorize(
        self,
        principal: Principal,
        operation: GatewayOperation,
        collection: str,
        client_id: Optional[str] = None,
        trainer_id: Optional[str] = None,
    ) -> AccessDecision:

        if principal.role == Role.ADMIN:
            return AccessDecision.allow()

        if principal.role == Role.CLIENT:
            return self._authorize_client(principal, operation, client_id)

        if principal.role == Role.TRAINER:
            return self._authorize_trainer(principal, operation, client_id)

        return AccessDecision.deny("Invalid role")

    def _authorize_client(self, principal: Principal, operation: GatewayOperation,
                          client_id: Optional[str]) -> AccessDecision:
        if operation in CROSS_ENTITY_OPERATIONS:
            return AccessDecision.deny("Clients cannot query other clients or trainers")

        if client_id and client_id != principal.member_id:
            return AccessDecision.deny("Clients can only access their own data")

        return AccessDecision.allow()

    def _authorize_trainer(self, principal: Principal, operation: GatewayOperation,
                           client_id: Optional[str]) -> AccessDecision:
        if operation == GatewayOperation.GET_FOR_TRAINER:
            return AccessDecision.deny("Trainers cannot query other trainers")

        # getForClient and every single-item operation naming a client
        if client_id and not self.relationships.has_access(principal.member_id, client_id):
            return AccessDecision.deny("Trainer does not have access to this client")

        return AccessDecision.allow()


def initialize_collection_policies():
    """Register the record-level policy of every protected collection"""

    policy_registry.set_default(OwnedRecordPolicy)

    for collection in ProtectedCollection:
        policy_registry.register(collection.value, OwnedRecordPolicy(collection.value))

    # Trainers creating assignments are always stamped as their owner
    policy_registry.register(
        ProtectedCollection.PROGRAM_ASSIGNMENTS.value,
        ProgramAssignmentPolicy(ProtectedCollection.PROGRAM_ASSIGNMENTS.value),
    )


# Initialize policies on module import
initialize_collection_policies()
