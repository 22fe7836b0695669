"""User application service: create with email uniqueness, natural-key lookup, update, delete."""

from __future__ import annotations

import asyncio
import logging

from crudkit.application.dtos.user import UserCreate, UserResult, UserUpdate
from crudkit.application.interfaces.repositories import IUserRepository
from crudkit.application.interfaces.services import IPasswordHasher
from crudkit.application.services.base_service import BaseService
from crudkit.core.constants import CACHE_PREFIX_USER, MESSAGE_EMAIL_EXISTS
from crudkit.domain.exceptions import BusinessRuleException, ResourceNotFoundException
from crudkit.infrastructure.cache.cache_protocol import CacheProtocol
from crudkit.infrastructure.persistence.models.user import User
from crudkit.infrastructure.security.password import BcryptPasswordHasher
from crudkit.shared.datetime import ensure_utc

logger = logging.getLogger(__name__)


def user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        username=u.username,
        email=u.email,
        is_active=u.is_active,
        created_at=ensure_utc(u.created_at),
        updated_at=ensure_utc(u.updated_at),
    )


class UserService(BaseService[User]):
    """User rules over the generic service.

    Email uniqueness is checked before insert so callers get a business-rule
    error; the unique index on app_user.email still guards concurrent creates.
    """

    cache_namespace = CACHE_PREFIX_USER

    def __init__(
        self,
        repository: IUserRepository,
        cache: CacheProtocol | None = None,
        *,
        password_hasher: IPasswordHasher | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        super().__init__(repository, User, cache, cache_ttl=cache_ttl)
        self._users = repository
        self._password_hasher = password_hasher or BcryptPasswordHasher()

    async def is_email_unique(self, email: str) -> bool:
        return not await self._find(User.email == email)

    async def _ensure_email_unique(self, email: str) -> None:
        if not await self.is_email_unique(email):
            logger.info("Rejected duplicate email")
            raise BusinessRuleException(MESSAGE_EMAIL_EXISTS, details={"field": "email"})

    async def create_user(self, data: UserCreate) -> UserResult:
        """Create user; raise BusinessRuleException if the email is already registered."""
        await self._ensure_email_unique(data.email)
        password_hash = await asyncio.to_thread(self._password_hasher.hash, data.password)
        user = User(
            username=data.username,
            email=data.email,
            password_hash=password_hash,
            is_active=False,
        )
        created = await self.create(user)
        logger.info("Created user %s", created.id)
        return user_to_result(created)

    async def get_user(self, user_id: int) -> UserResult | None:
        user = await self.get_by_id(user_id)
        return user_to_result(user) if user else None

    async def list_users(self) -> list[UserResult]:
        return [user_to_result(u) for u in await self.get_all()]

    async def get_user_by_email(self, email: str) -> UserResult | None:
        user = await self._users.get_by_email(email)
        return user_to_result(user) if user else None

    async def update_user(self, user_id: int, data: UserUpdate) -> UserResult:
        """Apply a partial update. Raises ResourceNotFoundException if user not found."""
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", user_id)
        if data.email is not None and data.email != user.email:
            await self._ensure_email_unique(data.email)
            user.email = data.email
        if data.username is not None:
            user.username = data.username
        if data.is_active is not None:
            user.is_active = data.is_active
        await self.update(user)
        return user_to_result(user)

    async def delete_user(self, user_id: int) -> None:
        await self.delete(user_id)
        logger.info("Deleted user %s", user_id)
