"""
Identity and role resolution for the protected data gateway.

A request is authenticated with a bearer session token. The token resolves
to an ``Identity`` through the member session collection, and the identity
gets its role from the single active role assignment of the member.
"""

import hashlib
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param

from motiva_backend.interface.collections import MEMBER_ROLES, MEMBER_SESSIONS
from motiva_backend.permissions.principal import Identity, Principal, Role
from motiva_backend.store.base import DocumentStore, StoreError

logger = logging.getLogger(__name__)

ACTIVE = "active"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def parse_bearer_token(request: Request) -> Optional[str]:
    """Extract the session token from ``Authorization: Bearer <token>``.

    Missing or malformed headers yield ``None``; the gateway reports that as
    an authentication failure once the envelope itself has been validated.
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not param:
        logger.debug(f"Ignoring unsupported auth scheme: {scheme}")
        return None

    return param


class IdentityResolver(ABC):

    @abstractmethod
    def resolve(self, credentials: Optional[str]) -> Optional[Identity]:
        """Return the caller identity or ``None`` if unauthenticated"""
        pass


class SessionIdentityResolver(IdentityResolver):
    """Resolves bearer tokens against the member session collection"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def resolve(self, credentials: Optional[str]) -> Optional[Identity]:
        if not credentials:
            return None

        try:
            result = (
                self.store.query(MEMBER_SESSIONS)
                .eq("tokenHash", hash_token(credentials))
                .limit(1)
                .find()
            )
        except StoreError as e:
            logger.error(f"Session lookup failed: {e}")
            return None

        if not result.items:
            return None

        session = result.items[0]
        if session.get("status", ACTIVE) != ACTIVE or _expired(session.get("expiresAt")):
            return None

        member_id = session.get("memberId")
        if not member_id:
            return None

        return Identity(member_id=member_id, email=session.get("email") or "")


def _expired(expires_at: Optional[str]) -> bool:
    if not expires_at:
        return False
    try:
        expiry = datetime.fromisoformat(expires_at)
    except (TypeError, ValueError):
        logger.warning(f"Unparsable session expiry: {expires_at}")
        return True
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry <= datetime.now(timezone.utc)


class RoleResolver:
    """Looks up the active role assignment of a member"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def resolve(self, member_id: str) -> Optional[Role]:
        try:
            result = (
                self.store.query(MEMBER_ROLES)
                .eq("memberId", member_id)
                .eq("status", ACTIVE)
                .limit(2)
                .find()
            )
        except StoreError as e:
            logger.error(f"Role lookup failed for {member_id}: {e}")
            return None

        if not result.items:
            return None

        if result.total_count > 1:
            # assign_role keeps one active assignment per member; refuse to guess
            logger.error(f"Member {member_id} has {result.total_count} active role assignments")
            return None

        role = Role.parse(result.items[0].get("role"))
        if role is None:
            logger.warning(f"Member {member_id} has an unknown role value: {result.items[0].get('role')}")
        return role


class PrincipalBuilder:
    """Builds the per-request Principal from credentials"""

    def __init__(self, identity_resolver: IdentityResolver, role_resolver: RoleResolver):
        self.identity_resolver = identity_resolver
        self.role_resolver = role_resolver

    def build(self, credentials: Optional[str]) -> Optional[Principal]:
        identity = self.identity_resolver.resolve(credentials)
        if identity is None:
            return None

        return Principal(
            member_id=identity.member_id,
            email=identity.email,
            role=self.role_resolver.resolve(identity.member_id),
        )
