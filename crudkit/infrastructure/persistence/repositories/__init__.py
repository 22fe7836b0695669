"""Persistence repositories. Re-exports for the composition registry."""

from crudkit.infrastructure.persistence.repositories.base import BaseRepository
from crudkit.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
