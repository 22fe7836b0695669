"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Registration in crudkit.core.registry checks implementations against them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy import Select

    from crudkit.infrastructure.persistence.models.user import User

T = TypeVar("T")


@runtime_checkable
class IRepository(Protocol[T]):
    """Generic data-access contract over one entity type."""

    async def get_by_id(self, entity_id: int) -> T | None:
        """Return entity by ID, or None. Never raises for absence."""

    async def get_all(self) -> list[T]:
        """Return all non-deleted entities."""

    async def add(self, obj: T) -> T:
        """Persist a new entity; fill id and created_at."""

    async def update(self, obj: T) -> T:
        """Persist changes to an existing entity; raise ResourceNotFoundException if missing."""

    async def delete(self, entity_id: int) -> None:
        """Delete entity; idempotent."""

    async def exists(self, entity_id: int) -> bool:
        """Return True if a non-deleted entity with this id exists."""

    async def find(self, *criteria: Any) -> list[T]:
        """Return entities matching every column expression."""

    def query(self) -> Select[tuple[T]]:
        """Return a composable SELECT over non-deleted entities."""

    async def fetch(self, stmt: Select[tuple[T]]) -> list[T]:
        """Execute a statement built from query()."""


@runtime_checkable
class IUserRepository(IRepository["User"], Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_email(self, email: str) -> User | None:
        """Return the non-deleted user with this email, or None."""
