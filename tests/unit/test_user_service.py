"""Tests for UserService business rules (repository mocked)."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from crudkit.application.dtos.user import UserCreate, UserUpdate
from crudkit.application.services.user_service import UserService
from crudkit.core.constants import MESSAGE_EMAIL_EXISTS
from crudkit.domain.exceptions import BusinessRuleException, ResourceNotFoundException
from crudkit.infrastructure.cache.memory_cache import MemoryCache
from crudkit.infrastructure.cache.null_cache import NullCache
from crudkit.infrastructure.persistence.models.user import User
from crudkit.infrastructure.security.password import BcryptPasswordHasher


def _user(user_id: int = 1, email: str = "alice@example.com") -> User:
    return User(
        id=user_id,
        username="alice",
        email=email,
        password_hash="hash",
        is_active=False,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        updated_at=None,
        is_deleted=False,
    )


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repo: AsyncMock) -> UserService:
    return UserService(repo, NullCache(), password_hasher=BcryptPasswordHasher(rounds=4))


async def test_create_user_hashes_password(service: UserService, repo: AsyncMock) -> None:
    repo.find.return_value = []
    repo.add.side_effect = lambda u: _assign_id(u, 10)

    result = await service.create_user(
        UserCreate(username="alice", email="alice@example.com", password="pw123456")
    )

    assert result.id == 10
    assert result.email == "alice@example.com"
    assert result.is_active is False
    stored: User = repo.add.await_args.args[0]
    assert stored.password_hash != "pw123456"
    assert BcryptPasswordHasher(rounds=4).verify("pw123456", stored.password_hash)


def _assign_id(user: User, user_id: int) -> User:
    user.id = user_id
    user.created_at = datetime(2024, 1, 1, tzinfo=UTC)
    return user


async def test_create_user_duplicate_email(service: UserService, repo: AsyncMock) -> None:
    """Duplicate email is a business-rule violation; nothing is written."""
    repo.find.return_value = [_user()]
    with pytest.raises(BusinessRuleException) as exc_info:
        await service.create_user(
            UserCreate(username="bob", email="alice@example.com", password="pw123456")
        )
    assert exc_info.value.message == MESSAGE_EMAIL_EXISTS
    assert exc_info.value.status_code == 400
    repo.add.assert_not_awaited()


async def test_is_email_unique(service: UserService, repo: AsyncMock) -> None:
    repo.find.return_value = []
    assert await service.is_email_unique("new@example.com") is True
    repo.find.return_value = [_user()]
    assert await service.is_email_unique("alice@example.com") is False


async def test_get_user_missing_returns_none(service: UserService, repo: AsyncMock) -> None:
    repo.get_by_id.return_value = None
    assert await service.get_user(99) is None


async def test_get_user_by_email(service: UserService, repo: AsyncMock) -> None:
    repo.get_by_email.return_value = _user(email="a@x.io")
    result = await service.get_user_by_email("a@x.io")
    assert result is not None
    assert result.email == "a@x.io"
    repo.get_by_email.assert_awaited_once_with("a@x.io")


async def test_update_user_missing_raises(service: UserService, repo: AsyncMock) -> None:
    repo.get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.update_user(5, UserUpdate(username="x"))
    repo.update.assert_not_awaited()


async def test_update_user_rejects_taken_email(service: UserService, repo: AsyncMock) -> None:
    repo.get_by_id.return_value = _user(1, "alice@example.com")
    repo.find.return_value = [_user(2, "bob@example.com")]
    with pytest.raises(BusinessRuleException):
        await service.update_user(1, UserUpdate(email="bob@example.com"))
    repo.update.assert_not_awaited()


async def test_update_user_applies_fields(service: UserService, repo: AsyncMock) -> None:
    user = _user()
    repo.get_by_id.return_value = user
    repo.update.side_effect = lambda u: u
    result = await service.update_user(1, UserUpdate(username="alicia", is_active=True))
    assert result.username == "alicia"
    assert result.is_active is True
    repo.find.assert_not_awaited()


async def test_cached_read_skips_repository(repo: AsyncMock) -> None:
    """get_user is served from the cache after the first read."""
    service = UserService(repo, MemoryCache(), password_hasher=BcryptPasswordHasher(rounds=4))
    repo.get_by_id.return_value = _user()
    first = await service.get_user(1)
    second = await service.get_user(1)
    assert first == second
    repo.get_by_id.assert_awaited_once_with(1)


async def test_delete_evicts_cache(repo: AsyncMock) -> None:
    cache = MemoryCache()
    service = UserService(repo, cache, password_hasher=BcryptPasswordHasher(rounds=4))
    repo.get_by_id.return_value = _user()
    await service.get_user(1)
    assert await cache.exists("user:id:1")
    await service.delete_user(1)
    assert await cache.exists("user:id:1") is False
    repo.delete.assert_awaited_once_with(1)


async def test_undecodable_cache_entry_falls_back_to_repository(repo: AsyncMock) -> None:
    cache = MemoryCache()
    await cache.set("user:id:1", {"id": 1})
    service = UserService(repo, cache, password_hasher=BcryptPasswordHasher(rounds=4))
    repo.get_by_id.return_value = _user()
    result = await service.get_user(1)
    assert result is not None
    assert result.username == "alice"
    repo.get_by_id.assert_awaited_once_with(1)
