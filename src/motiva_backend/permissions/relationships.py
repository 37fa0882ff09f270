import logging

from motiva_backend.interface.collections import CLIENT_ID, TRAINER_ID, ProtectedCollection
from motiva_backend.store.base import DocumentStore, StoreError

logger = logging.getLogger(__name__)

ACTIVE = "active"


class RelationshipValidator:
    """Checks trainer/client assignment records for cross-entity access"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def has_access(self, trainer_id: str, client_id: str) -> bool:
        """True iff an active assignment binds ``trainer_id`` to ``client_id``"""
        if not trainer_id or not client_id:
            return False

        try:
            result = (
                self.store.query(ProtectedCollection.TRAINER_CLIENT_ASSIGNMENTS.value)
                .eq(TRAINER_ID, trainer_id)
                .eq(CLIENT_ID, client_id)
                .eq("status", ACTIVE)
                .limit(1)
                .find()
            )
        except StoreError as e:
            # an unverifiable relationship is treated as absent
            logger.error(f"Trainer-client lookup failed for {trainer_id}/{client_id}: {e}")
            return False

        return len(result.items) > 0
