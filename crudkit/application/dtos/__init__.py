"""Application DTOs."""

from crudkit.application.dtos.user import UserCreate, UserResult, UserUpdate

__all__ = ["UserCreate", "UserResult", "UserUpdate"]
