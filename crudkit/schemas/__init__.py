"""HTTP request/response schemas (pydantic)."""

from crudkit.schemas.health import HealthResponse
from crudkit.schemas.response import ApiResponse
from crudkit.schemas.user import UserCreateRequest, UserDto, UserUpdateRequest

__all__ = [
    "ApiResponse",
    "HealthResponse",
    "UserCreateRequest",
    "UserDto",
    "UserUpdateRequest",
]
