"""
Service layer for role, trainer and session bookkeeping.
"""

from .role_assignment import RoleAssignmentService
from .sessions import SessionService
from .trainer_assignment import AssignmentResult, TrainerAssignmentService

__all__ = ["RoleAssignmentService", "SessionService", "AssignmentResult", "TrainerAssignmentService"]
