"""Service interfaces (ports) for the application layer.

Routes depend on these contracts; the registry maps each to its
implementation at startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from crudkit.application.dtos.user import UserCreate, UserResult, UserUpdate
    from crudkit.infrastructure.persistence.models.user import User

T = TypeVar("T")


@runtime_checkable
class IService(Protocol[T]):
    """Generic business-logic contract over one entity type."""

    async def get_by_id(self, entity_id: int) -> T | None:
        """Return entity by ID, or None."""

    async def get_all(self) -> list[T]:
        """Return all entities."""

    async def create(self, entity: T) -> T:
        """Create entity and return the stored form."""

    async def update(self, entity: T) -> None:
        """Persist changes; raise ResourceNotFoundException if missing."""

    async def delete(self, entity_id: int) -> None:
        """Delete entity; idempotent."""

    async def exists(self, entity_id: int) -> bool:
        """Return True if entity exists."""


@runtime_checkable
class IUserService(IService["User"], Protocol):
    """User-specific operations on top of the generic service contract."""

    async def create_user(self, data: UserCreate) -> UserResult:
        """Create user; raise BusinessRuleException if the email is taken."""

    async def get_user(self, user_id: int) -> UserResult | None:
        """Return user DTO by ID, or None."""

    async def list_users(self) -> list[UserResult]:
        """Return all user DTOs."""

    async def get_user_by_email(self, email: str) -> UserResult | None:
        """Return user DTO by email (natural key), or None."""

    async def is_email_unique(self, email: str) -> bool:
        """Return True if no user has this email."""

    async def update_user(self, user_id: int, data: UserUpdate) -> UserResult:
        """Apply a partial update; raise ResourceNotFoundException or BusinessRuleException."""

    async def delete_user(self, user_id: int) -> None:
        """Delete user; idempotent."""


@runtime_checkable
class IPasswordHasher(Protocol):
    """Protocol for password hashing (bcrypt in infrastructure)."""

    def hash(self, password: str) -> str:
        """Return hash of password."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches."""
