import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from motiva_backend.interface.collections import MEMBER_SESSIONS
from motiva_backend.permissions.auth import ACTIVE, hash_token
from motiva_backend.settings import settings
from motiva_backend.store.base import DocumentStore, new_document, touch_document

logger = logging.getLogger(__name__)

REVOKED = "revoked"


class SessionService:
    """Issues and revokes member session tokens.

    Only the sha256 hash of a token is stored; the token itself is returned
    once to the caller.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def create_session(self, member_id: str, email: str, ttl_seconds: Optional[int] = None) -> str:
        token = secrets.token_urlsafe(32)
        ttl = settings.SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)

        self.store.insert(MEMBER_SESSIONS, new_document({
            "tokenHash": hash_token(token),
            "memberId": member_id,
            "email": email,
            "expiresAt": expires_at.isoformat(),
            "status": ACTIVE,
        }))

        logger.info(f"Created session for member {member_id} valid until {expires_at.isoformat()}")
        return token

    def revoke_session(self, token: str) -> bool:
        result = (
            self.store.query(MEMBER_SESSIONS)
            .eq("tokenHash", hash_token(token))
            .limit(1)
            .find()
        )
        if not result.items:
            return False

        session = result.items[0]
        self.store.update(
            MEMBER_SESSIONS,
            touch_document({**session, "status": REVOKED}),
            expected_version=session.get("_version"),
        )
        logger.info(f"Revoked session of member {session.get('memberId')}")
        return True
