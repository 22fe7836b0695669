"""Integration tests for UserRepository against in-memory SQLite."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from crudkit.domain.entity import Entity
from crudkit.domain.exceptions import PersistenceException, ResourceNotFoundException
from crudkit.infrastructure.persistence.models.user import User
from crudkit.infrastructure.persistence.repositories.user_repo import UserRepository


class SoftDeleteUserRepository(UserRepository):
    soft_delete = True


def _new_user(email: str = "alice@example.com", username: str = "alice") -> User:
    return User(username=username, email=email, password_hash="hash")


@pytest.fixture
def repo(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session, retry_attempts=1)


async def test_add_assigns_id_and_defaults(repo: UserRepository) -> None:
    user = await repo.add(_new_user())
    assert user.id is not None
    assert user.created_at is not None
    assert user.updated_at is None
    assert user.is_deleted is False
    assert user.is_active is False
    assert isinstance(user, Entity)


async def test_ids_are_unique(repo: UserRepository) -> None:
    first = await repo.add(_new_user("a@example.com"))
    second = await repo.add(_new_user("b@example.com"))
    assert first.id != second.id


async def test_get_by_id_and_missing(repo: UserRepository) -> None:
    user = await repo.add(_new_user())
    found = await repo.get_by_id(user.id)
    assert found is not None
    assert found.email == "alice@example.com"
    assert await repo.get_by_id(9999) is None


async def test_get_all_ordered_by_id(repo: UserRepository) -> None:
    assert await repo.get_all() == []
    a = await repo.add(_new_user("a@example.com"))
    b = await repo.add(_new_user("b@example.com"))
    assert [u.id for u in await repo.get_all()] == [a.id, b.id]


async def test_get_by_email(repo: UserRepository) -> None:
    await repo.add(_new_user("alice@example.com"))
    user = await repo.get_by_email("alice@example.com")
    assert user is not None
    assert user.username == "alice"
    assert await repo.get_by_email("nobody@example.com") is None


async def test_update_attached_entity_sets_updated_at(repo: UserRepository) -> None:
    user = await repo.add(_new_user())
    user.username = "alicia"
    updated = await repo.update(user)
    assert updated.username == "alicia"
    assert updated.updated_at is not None
    reloaded = await repo.get_by_id(user.id)
    assert reloaded is not None
    assert reloaded.username == "alicia"


async def test_update_detached_entity_is_merged(
    repo: UserRepository, session_factory
) -> None:
    user = await repo.add(_new_user())
    detached = User(
        id=user.id,
        username="renamed",
        email=user.email,
        password_hash=user.password_hash,
        is_active=True,
        created_at=user.created_at,
        is_deleted=False,
    )
    async with session_factory() as other_session:
        updated = await UserRepository(other_session).update(detached)
    assert updated.username == "renamed"
    assert updated.is_active is True


async def test_update_missing_id_raises_not_found(repo: UserRepository) -> None:
    ghost = User(id=4242, username="ghost", email="ghost@example.com", password_hash="h")
    with pytest.raises(ResourceNotFoundException):
        await repo.update(ghost)


async def test_update_without_id_raises_value_error(repo: UserRepository) -> None:
    with pytest.raises(ValueError, match="primary key"):
        await repo.update(_new_user())


async def test_delete_is_idempotent(repo: UserRepository) -> None:
    user = await repo.add(_new_user())
    await repo.delete(user.id)
    assert await repo.get_by_id(user.id) is None
    assert await repo.exists(user.id) is False
    await repo.delete(user.id)
    await repo.delete(123456)


async def test_exists(repo: UserRepository) -> None:
    user = await repo.add(_new_user())
    assert await repo.exists(user.id) is True
    assert await repo.exists(user.id + 1) is False


async def test_find_and_query(repo: UserRepository) -> None:
    await repo.add(_new_user("a@example.com", "ann"))
    await repo.add(_new_user("b@example.com", "bob"))
    await repo.add(_new_user("c@example.com", "ann"))

    anns = await repo.find(User.username == "ann")
    assert {u.email for u in anns} == {"a@example.com", "c@example.com"}

    stmt = repo.query().where(User.username == "bob")
    bobs = await repo.fetch(stmt)
    assert [u.email for u in bobs] == ["b@example.com"]


async def test_duplicate_email_is_a_persistence_failure(repo: UserRepository) -> None:
    """The unique index still guards against a create that skipped the service check."""
    await repo.add(_new_user("dup@example.com"))
    with pytest.raises(PersistenceException) as exc_info:
        await repo.add(_new_user("dup@example.com", "other"))
    assert exc_info.value.details == {"operation": "add"}
    assert len(await repo.get_all()) == 1


async def test_soft_delete_hides_row(db_session: AsyncSession) -> None:
    repo = SoftDeleteUserRepository(db_session)
    user = await repo.add(_new_user())
    await repo.delete(user.id)

    assert await repo.get_by_id(user.id) is None
    assert await repo.exists(user.id) is False
    assert await repo.get_all() == []
    assert await repo.get_by_email("alice@example.com") is None
    assert user.is_deleted is True

    with pytest.raises(ResourceNotFoundException):
        await repo.update(
            User(id=user.id, username="x", email="alice@example.com", password_hash="h")
        )


async def test_soft_deleted_email_can_be_registered_again(db_session: AsyncSession) -> None:
    """Email uniqueness only spans rows that are not flagged deleted."""
    repo = SoftDeleteUserRepository(db_session)
    first = await repo.add(_new_user("again@example.com"))
    await repo.delete(first.id)

    second = await repo.add(_new_user("again@example.com", "alice2"))
    assert second.id != first.id
    found = await repo.get_by_email("again@example.com")
    assert found is not None
    assert found.id == second.id


# Transient failures on commit: the operation is retried on the same session
# and the stored row reflects the caller's data.


def _fail_next_commit(monkeypatch: pytest.MonkeyPatch, session: AsyncSession) -> list[int]:
    """Make the next commit on session raise a connectivity error; later ones succeed."""
    real_commit = session.commit
    failures: list[int] = []

    async def flaky_commit() -> None:
        if not failures:
            failures.append(1)
            raise OperationalError("COMMIT", None, Exception("connection reset by peer"))
        await real_commit()

    monkeypatch.setattr(session, "commit", flaky_commit)
    return failures


def _retrying_repo(session: AsyncSession) -> UserRepository:
    return UserRepository(session, retry_attempts=3, retry_max_wait=0)


async def _stored(session_factory: async_sessionmaker[AsyncSession], user_id: int) -> User | None:
    async with session_factory() as session:
        return await session.get(User, user_id)


async def test_add_retries_transient_commit_failure(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    repo = _retrying_repo(db_session)
    failures = _fail_next_commit(monkeypatch, db_session)

    user = await repo.add(_new_user("retry@example.com"))

    assert failures == [1]
    stored = await _stored(session_factory, user.id)
    assert stored is not None
    assert stored.email == "retry@example.com"


async def test_update_attached_retries_transient_commit_failure(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Changes made on a loaded entity survive the rollback between attempts."""
    repo = _retrying_repo(db_session)
    user = await repo.add(_new_user())
    failures = _fail_next_commit(monkeypatch, db_session)

    user.username = "alicia"
    user.is_active = True
    updated = await repo.update(user)

    assert failures == [1]
    assert updated.username == "alicia"
    assert updated.is_active is True
    assert updated.updated_at is not None
    stored = await _stored(session_factory, user.id)
    assert stored is not None
    assert stored.username == "alicia"
    assert stored.is_active is True
    assert stored.password_hash == "hash"


async def test_update_detached_retries_transient_commit_failure(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    user = await _retrying_repo(db_session).add(_new_user())
    detached = User(
        id=user.id,
        username="renamed",
        email=user.email,
        password_hash=user.password_hash,
    )

    async with session_factory() as other_session:
        failures = _fail_next_commit(monkeypatch, other_session)
        updated = await _retrying_repo(other_session).update(detached)

    assert failures == [1]
    assert updated.username == "renamed"
    stored = await _stored(session_factory, user.id)
    assert stored is not None
    assert stored.username == "renamed"
    assert stored.created_at is not None


async def test_delete_retries_transient_commit_failure(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    repo = _retrying_repo(db_session)
    user = await repo.add(_new_user())
    failures = _fail_next_commit(monkeypatch, db_session)

    await repo.delete(user.id)

    assert failures == [1]
    assert await _stored(session_factory, user.id) is None
    assert await repo.exists(user.id) is False


async def test_commit_failures_past_the_bound_surface_as_persistence_error(
    db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo = UserRepository(db_session, retry_attempts=2, retry_max_wait=0)
    user = await repo.add(_new_user())

    async def always_fails() -> None:
        raise OperationalError("COMMIT", None, Exception("server closed the connection"))

    monkeypatch.setattr(db_session, "commit", always_fails)
    user.username = "never-stored"
    with pytest.raises(PersistenceException) as exc_info:
        await repo.update(user)
    assert exc_info.value.details == {"operation": "update"}
    assert isinstance(exc_info.value.__cause__, OperationalError)
