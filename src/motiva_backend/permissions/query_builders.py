from typing import Any, List, Optional, Tuple

from motiva_backend.interface.collections import CLIENT_ID, TRAINER_ID
from motiva_backend.permissions.principal import Principal, Role
from motiva_backend.store.base import DocumentQuery


class OwnershipScopeBuilder:
    """Builds the implicit ownership filters applied to list queries"""

    SCOPE_FIELDS = {
        Role.CLIENT: CLIENT_ID,
        Role.TRAINER: TRAINER_ID,
    }

    @classmethod
    def scope_field(cls, role: Optional[Role]) -> Optional[str]:
        return cls.SCOPE_FIELDS.get(role)

    @classmethod
    def filters_for(cls, principal: Principal) -> List[Tuple[str, Any]]:
        """Clients see their clientId, trainers their trainerId, admins everything"""
        if principal.is_admin:
            return []

        field_name = cls.scope_field(principal.role)
        if field_name is None:
            # unreachable after the evaluator, but never fall back to "no filter"
            raise ValueError(f"No ownership scope for role {principal.role}")

        return [(field_name, principal.member_id)]

    @classmethod
    def apply(cls, query: DocumentQuery, filters: List[Tuple[str, Any]]) -> DocumentQuery:
        for field_name, value in filters:
            query = query.eq(field_name, value)
        return query

    @classmethod
    def paginate(cls, query: DocumentQuery, limit: int, skip: int) -> DocumentQuery:
        query = query.limit(limit)
        if skip:
            query = query.skip(skip)
        return query
