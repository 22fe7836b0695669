"""User API schemas. Wire format is camelCase (isActive, createdAt)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreateRequest(_CamelModel):
    """Request body for creating a user."""

    username: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=256)


class UserUpdateRequest(_CamelModel):
    """Request body for updating a user (partial)."""

    username: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None
    is_active: bool | None = None


class UserDto(_CamelModel):
    """User response (no password)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
