from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from motiva_backend.interface.collections import CLIENT_ID, TRAINER_ID


class Role(str, Enum):
    CLIENT = "client"
    TRAINER = "trainer"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Map a stored role value to a Role, ``None`` when unknown"""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Identity(BaseModel):
    """Caller identity resolved from the transport credential"""
    model_config = ConfigDict(frozen=True)

    member_id: str
    email: str = ""


class Principal(BaseModel):
    """Authenticated member plus the role driving every access decision.

    Built fresh for each request, never cached.
    """
    model_config = ConfigDict(frozen=True)

    member_id: str
    email: str = ""
    role: Optional[Role] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_client(self) -> bool:
        return self.role == Role.CLIENT

    @property
    def is_trainer(self) -> bool:
        return self.role == Role.TRAINER

    def owns_as_client(self, record: Dict[str, Any]) -> bool:
        return record.get(CLIENT_ID) == self.member_id

    def owns_as_trainer(self, record: Dict[str, Any]) -> bool:
        return record.get(TRAINER_ID) == self.member_id
