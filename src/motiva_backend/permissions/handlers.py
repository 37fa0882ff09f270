from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from motiva_backend.permissions.principal import Principal


class CollectionPolicy(ABC):
    """Record-level rules for one protected collection.

    The envelope-level decision is taken by the access evaluator before
    dispatch. A policy is consulted afterwards with the *stored* record, so a
    caller cannot bypass it by declaring misleading ``clientId``/``trainerId``
    values on the envelope.
    """

    def __init__(self, collection: str):
        self.collection = collection

    @abstractmethod
    def scope_filters(self, principal: Principal) -> List[Tuple[str, Any]]:
        """Equality filters confining a list query to the principal's own records"""
        pass

    @abstractmethod
    def check_read(self, principal: Principal, record: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def prepare_create(self, principal: Principal, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and return the payload to insert"""
        pass

    @abstractmethod
    def prepare_update(self, principal: Principal, existing: Dict[str, Any],
                       changes: Dict[str, Any]) -> Dict[str, Any]:
        """Validate against the stored record and return the changes to merge"""
        pass

    @abstractmethod
    def check_delete(self, principal: Principal, existing: Dict[str, Any]) -> None:
        pass

    def check_admin(self, principal: Principal) -> bool:
        return principal.is_admin


class PolicyRegistry:
    """Registry of collection policies with a shared fallback"""

    def __init__(self, default_policy_type: Optional[type] = None):
        self._policies: Dict[str, CollectionPolicy] = {}
        self._default_policy_type = default_policy_type

    def register(self, collection: str, policy: CollectionPolicy):
        self._policies[collection] = policy

    def set_default(self, policy_type: type):
        self._default_policy_type = policy_type

    def get_policy(self, collection: str) -> CollectionPolicy:
        policy = self._policies.get(collection)
        if policy is None:
            if self._default_policy_type is None:
                raise LookupError(f"No policy registered for {collection}")
            policy = self._default_policy_type(collection)
            self._policies[collection] = policy
        return policy

    def registered(self) -> List[str]:
        return sorted(self._policies.keys())


# Global registry instance
policy_registry = PolicyRegistry()
