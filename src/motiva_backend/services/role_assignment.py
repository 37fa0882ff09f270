import logging
from typing import Optional

from motiva_backend.api.exceptions import ValidationException
from motiva_backend.interface.collections import MEMBER_ROLES
from motiva_backend.permissions.auth import ACTIVE, RoleResolver
from motiva_backend.permissions.principal import Role
from motiva_backend.store.base import DocumentStore, new_document, touch_document

logger = logging.getLogger(__name__)

INACTIVE = "inactive"


class RoleAssignmentService:
    """Keeps exactly one active role assignment per member"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _active_assignments(self, member_id: str) -> list:
        return (
            self.store.query(MEMBER_ROLES)
            .eq("memberId", member_id)
            .eq("status", ACTIVE)
            .find()
            .items
        )

    def _deactivate(self, assignment: dict) -> None:
        self.store.update(
            MEMBER_ROLES,
            touch_document({**assignment, "status": INACTIVE}),
            expected_version=assignment.get("_version"),
        )

    def assign_role(self, member_id: str, role: str) -> dict:
        """Make ``role`` the single active role of ``member_id``.

        Assigning the role a member already holds returns the existing
        assignment unchanged.
        """
        parsed = Role.parse(role)
        if parsed is None:
            raise ValidationException(f"Invalid role: {role}")

        if not member_id:
            raise ValidationException("Missing memberId")

        current = None
        for assignment in self._active_assignments(member_id):
            if current is None and assignment.get("role") == parsed.value:
                current = assignment
            else:
                self._deactivate(assignment)
                logger.info(f"Deactivated role {assignment.get('role')} of member {member_id}")

        if current is not None:
            return current

        created = self.store.insert(MEMBER_ROLES, new_document({
            "memberId": member_id,
            "role": parsed.value,
            "status": ACTIVE,
        }))
        logger.info(f"Assigned role {parsed.value} to member {member_id}")
        return created

    def revoke_role(self, member_id: str) -> int:
        assignments = self._active_assignments(member_id)
        for assignment in assignments:
            self._deactivate(assignment)

        if assignments:
            logger.info(f"Revoked {len(assignments)} role assignment(s) of member {member_id}")
        return len(assignments)

    def get_role(self, member_id: str) -> Optional[Role]:
        return RoleResolver(self.store).resolve(member_id)
