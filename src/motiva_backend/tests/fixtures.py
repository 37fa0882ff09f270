"""
Test constants and helpers shared by the test modules.
"""

from motiva_backend.services import RoleAssignmentService, SessionService

ADMIN = "admin-1"
CLIENT_1 = "client-1"
CLIENT_2 = "client-2"
TRAINER_1 = "trainer-1"
TRAINER_2 = "trainer-2"


def make_member(store, member_id: str, role: str = None) -> str:
    """Give a member an optional role and return a fresh bearer token."""
    if role is not None:
        RoleAssignmentService(store).assign_role(member_id, role)
    return SessionService(store).create_session(member_id, f"{member_id}@example.com")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
