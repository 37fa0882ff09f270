import logging
from typing import Any, Dict, List, Tuple

from motiva_backend.api.exceptions import AuthorizationException
from motiva_backend.interface.collections import CLIENT_ID, TRAINER_ID
from motiva_backend.permissions.handlers import CollectionPolicy
from motiva_backend.permissions.principal import Principal
from motiva_backend.permissions.query_builders import OwnershipScopeBuilder

logger = logging.getLogger(__name__)


def has_trainer_owner(record: Dict[str, Any]) -> bool:
    trainer_id = record.get(TRAINER_ID)
    return isinstance(trainer_id, str) and trainer_id.strip() != ""


class OwnedRecordPolicy(CollectionPolicy):
    """Default policy: records belong to their clientId and trainerId.

    Clients read and write records carrying their own ``clientId``. Trainers
    read and write records carrying their own ``trainerId`` and may adopt a
    record that has no trainer yet. Only admins delete.
    """

    def scope_filters(self, principal: Principal) -> List[Tuple[str, Any]]:
        return OwnershipScopeBuilder.filters_for(principal)

    def check_read(self, principal: Principal, record: Dict[str, Any]) -> None:
        if self.check_admin(principal):
            return

        if principal.is_client and not principal.owns_as_client(record):
            raise AuthorizationException("Unauthorized: Client can only access their own data")

        if principal.is_trainer and not principal.owns_as_trainer(record):
            raise AuthorizationException("Unauthorized: Trainer can only access their assigned clients' data")

    def prepare_create(self, principal: Principal, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.check_admin(principal):
            return dict(data)

        if principal.is_client and data.get(CLIENT_ID) and data.get(CLIENT_ID) != principal.member_id:
            raise AuthorizationException("Unauthorized: Clients can only create data for themselves")

        if principal.is_trainer and data.get(TRAINER_ID) and data.get(TRAINER_ID) != principal.member_id:
            raise AuthorizationException("Unauthorized: Trainers can only create data for themselves")

        return dict(data)

    def _check_owner(self, principal: Principal, existing: Dict[str, Any], verb: str) -> None:
        if principal.is_client and not principal.owns_as_client(existing):
            raise AuthorizationException(f"Unauthorized: Clients can only {verb} their own data")

        if principal.is_trainer and has_trainer_owner(existing) and not principal.owns_as_trainer(existing):
            raise AuthorizationException(f"Unauthorized: Trainers can only {verb} their own data")

    def prepare_update(self, principal: Principal, existing: Dict[str, Any],
                       changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        if self.check_admin(principal):
            return changes

        self._check_owner(principal, existing, "update")

        if principal.is_client and CLIENT_ID in changes and changes[CLIENT_ID] != principal.member_id:
            raise AuthorizationException("Unauthorized: Clients cannot reassign their data")

        if principal.is_trainer:
            if changes.get(TRAINER_ID) and changes[TRAINER_ID] != principal.member_id:
                raise AuthorizationException("Unauthorized: Trainers cannot reassign data to another trainer")

            if not has_trainer_owner(existing):
                # adoption: the first trainer to update an unowned record becomes its owner
                logger.info(
                    f"Trainer {principal.member_id} adopting unowned {self.collection} record {existing.get('_id')}"
                )
                changes[TRAINER_ID] = principal.member_id
            elif TRAINER_ID in changes and not changes[TRAINER_ID]:
                raise AuthorizationException("Unauthorized: Trainers cannot release ownership of their data")

        return changes

    def check_delete(self, principal: Principal, existing: Dict[str, Any]) -> None:
        if self.check_admin(principal):
            return

        self._check_owner(principal, existing, "delete")

        raise AuthorizationException("Unauthorized: Only admins can delete protected data")


class ProgramAssignmentPolicy(OwnedRecordPolicy):
    """Program assignments always belong to the trainer who creates them"""

    def prepare_create(self, principal: Principal, data: Dict[str, Any]) -> Dict[str, Any]:
        data = super().prepare_create(principal, data)

        if principal.is_trainer:
            data[TRAINER_ID] = principal.member_id

        return data
