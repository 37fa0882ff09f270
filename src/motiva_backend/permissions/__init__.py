"""
Access control for the protected data gateway.

Main components:
- principal: Role, Identity and the per-request Principal
- auth: bearer token parsing, identity and role resolution
- relationships: trainer/client assignment checks
- core: envelope-level AccessEvaluator and policy registration
- handlers: CollectionPolicy interface and registry
- handlers_impl: concrete record-level policies
- query_builders: ownership filters for list queries
"""

from .principal import (
    Identity,
    Principal,
    Role,
)

from .auth import (
    IdentityResolver,
    PrincipalBuilder,
    RoleResolver,
    SessionIdentityResolver,
    hash_token,
    parse_bearer_token,
)

from .relationships import RelationshipValidator

from .core import (
    AccessDecision,
    AccessEvaluator,
    initialize_collection_policies,
)

from .handlers import (
    CollectionPolicy,
    PolicyRegistry,
    policy_registry,
)

from .handlers_impl import (
    OwnedRecordPolicy,
    ProgramAssignmentPolicy,
)

from .query_builders import OwnershipScopeBuilder

__all__ = [
    # Principal
    "Identity",
    "Principal",
    "Role",

    # Authentication
    "IdentityResolver",
    "PrincipalBuilder",
    "RoleResolver",
    "SessionIdentityResolver",
    "hash_token",
    "parse_bearer_token",

    # Authorization
    "RelationshipValidator",
    "AccessDecision",
    "AccessEvaluator",
    "initialize_collection_policies",

    # Policies
    "CollectionPolicy",
    "PolicyRegistry",
    "policy_registry",
    "OwnedRecordPolicy",
    "ProgramAssignmentPolicy",
    "OwnershipScopeBuilder",
]
