from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from motiva_backend.interface.base import ListQuery, utc_now_iso

class GatewayOperation(str, Enum):
    GET_ALL = "getAll"
    GET_BY_ID = "getById"
    GET_FOR_CLIENT = "getForClient"
    GET_FOR_TRAINER = "getForTrainer"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

# Bulk queries that reach into another member's scope
CROSS_ENTITY_OPERATIONS = frozenset({GatewayOperation.GET_FOR_CLIENT, GatewayOperation.GET_FOR_TRAINER})

class GatewayOptions(ListQuery):
    expected_version: Optional[int] = Field(None, alias="expectedVersion", ge=1)

class GatewayRequest(BaseModel):
    """Request envelope submitted to the protected data gateway.

    ``operation`` and ``collection`` are kept as raw strings so the dispatcher
    can report missing and unknown values with its own messages.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    operation: Optional[str] = None
    collection: Optional[str] = None
    item_id: Optional[str] = Field(None, alias="itemId")
    client_id: Optional[str] = Field(None, alias="clientId")
    trainer_id: Optional[str] = Field(None, alias="trainerId")
    data: Optional[Dict[str, Any]] = None
    options: Optional[GatewayOptions] = None

    @property
    def list_options(self) -> GatewayOptions:
        return self.options or GatewayOptions()

class GatewayResponse(BaseModel):
    """Response envelope, identical in shape for every outcome"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status_code: int = Field(alias="statusCode")
    data: Any = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=utc_now_iso)

    @classmethod
    def ok(cls, data: Any, status_code: int = 200) -> "GatewayResponse":
        return cls(success=True, status_code=status_code, data=data)

    @classmethod
    def fail(cls, status_code: int, error: str) -> "GatewayResponse":
        return cls(success=False, status_code=status_code, error=error or "Internal server error")

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": self.success,
            "statusCode": self.status_code,
            "timestamp": self.timestamp,
        }
        if self.success:
            body["data"] = self.data
        else:
            body["error"] = self.error
        return body
