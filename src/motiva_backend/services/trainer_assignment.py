import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from motiva_backend.interface.base import utc_now_iso
from motiva_backend.interface.collections import MEMBER_ROLES, ProtectedCollection
from motiva_backend.permissions.auth import ACTIVE
from motiva_backend.permissions.principal import Role
from motiva_backend.settings import settings
from motiva_backend.store.base import DocumentStore, StoreError, new_document, touch_document

logger = logging.getLogger(__name__)

ASSIGNMENTS = ProtectedCollection.TRAINER_CLIENT_ASSIGNMENTS.value
INACTIVE = "inactive"
ALREADY_ASSIGNED = "Assignment already exists (idempotent)"


@dataclass
class AssignmentResult:
    success: bool
    client_id: str
    trainer_id: str
    message: str
    error: Optional[str] = None

    @property
    def already_existed(self) -> bool:
        return self.success and self.message == ALREADY_ASSIGNED


class TrainerAssignmentService:
    """Maintains the trainer/client relationship records"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _active_assignment(self, client_id: str, trainer_id: str) -> Optional[dict]:
        result = (
            self.store.query(ASSIGNMENTS)
            .eq("trainerId", trainer_id)
            .eq("clientId", client_id)
            .eq("status", ACTIVE)
            .limit(1)
            .find()
        )
        return result.items[0] if result.items else None

    def assign_client(self, client_id: str, trainer_id: Optional[str] = None) -> AssignmentResult:
        trainer_id = trainer_id or settings.DEFAULT_TRAINER_ID

        if not client_id or not trainer_id:
            return AssignmentResult(False, client_id, trainer_id, "Invalid client or trainer ID", "Missing required IDs")

        try:
            if self._active_assignment(client_id, trainer_id) is not None:
                return AssignmentResult(True, client_id, trainer_id, ALREADY_ASSIGNED)

            self.store.insert(ASSIGNMENTS, new_document({
                "trainerId": trainer_id,
                "clientId": client_id,
                "assignmentDate": utc_now_iso(),
                "status": ACTIVE,
                "notes": "",
            }))

        except StoreError as e:
            logger.error(f"Failed to assign client {client_id} to trainer {trainer_id}: {e}")
            return AssignmentResult(False, client_id, trainer_id, "Failed to assign client to trainer", str(e))

        logger.info(f"Assigned client {client_id} to trainer {trainer_id}")
        return AssignmentResult(True, client_id, trainer_id, "Successfully assigned to trainer")

    def unassign_client(self, client_id: str, trainer_id: str) -> bool:
        assignment = self._active_assignment(client_id, trainer_id)
        if assignment is None:
            return False

        self.store.update(
            ASSIGNMENTS,
            touch_document({**assignment, "status": INACTIVE}),
            expected_version=assignment.get("_version"),
        )
        logger.info(f"Unassigned client {client_id} from trainer {trainer_id}")
        return True

    def get_trainer_clients(self, trainer_id: str) -> List[str]:
        return [
            item["clientId"]
            for item in self._find_all(ASSIGNMENTS, [("trainerId", trainer_id), ("status", ACTIVE)])
            if item.get("clientId")
        ]

    def _find_all(self, collection: str, filters) -> List[dict]:
        items: List[dict] = []
        skip = 0
        page_size = max(settings.MAX_PAGE_SIZE, 1)
        while True:
            query = self.store.query(collection)
            for name, value in filters:
                query = query.eq(name, value)
            result = query.limit(page_size).skip(skip).find()
            items.extend(result.items)
            if not result.has_next:
                return items
            skip += page_size

    def backfill(self, trainer_id: Optional[str] = None) -> Dict[str, int]:
        """Assign every member holding an active client role to ``trainer_id``"""
        trainer_id = trainer_id or settings.DEFAULT_TRAINER_ID

        client_ids = []
        for role in self._find_all(MEMBER_ROLES, [("role", Role.CLIENT.value), ("status", ACTIVE)]):
            member_id = role.get("memberId")
            if member_id and member_id not in client_ids:
                client_ids.append(member_id)

        summary = {"total": len(client_ids), "successful": 0, "skipped": 0, "failed": 0}
        for client_id in client_ids:
            result = self.assign_client(client_id, trainer_id)
            if not result.success:
                summary["failed"] += 1
            elif result.already_existed:
                summary["skipped"] += 1
            else:
                summary["successful"] += 1

        logger.info(f"Backfill for trainer {trainer_id} complete: {summary}")
        return summary
