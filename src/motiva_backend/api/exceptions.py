from typing import Any, Dict, Optional
from fastapi import HTTPException, status

class GatewayException(HTTPException):
    """Base class for every error the gateway turns into a response envelope"""

    default_detail = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.detail = detail or self.default_detail

    @property
    def message(self) -> str:
        return self.detail if isinstance(self.detail, str) else str(self.detail)

class ValidationException(GatewayException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"

class AuthenticationException(GatewayException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"

class AuthorizationException(GatewayException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"

class NotFoundException(GatewayException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Item not found"

class ConflictException(GatewayException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Item was modified concurrently"

class InternalServerException(GatewayException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
