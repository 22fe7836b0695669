"""User repository: BaseRepository over User plus natural-key lookup."""

from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.infrastructure.persistence.models.user import User
from crudkit.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository. Hard delete; email is the natural key."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        retry_attempts: int = 3,
        retry_max_wait: float = 5.0,
    ) -> None:
        super().__init__(
            db, User, retry_attempts=retry_attempts, retry_max_wait=retry_max_wait
        )

    async def get_by_email(self, email: str) -> User | None:
        users = await self.find(User.email == email)
        return users[0] if users else None
