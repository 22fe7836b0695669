"""User ORM model. Table: app_user."""

from sqlalchemy import Boolean, Index, String, false, text
from sqlalchemy.orm import Mapped, mapped_column

from crudkit.infrastructure.persistence.database import Base
from crudkit.infrastructure.persistence.models.mixins import EntityMixin


class User(EntityMixin, Base):
    """User model.

    Email is unique among rows not flagged is_deleted (partial index), so a
    soft-deleted user's email can be registered again.
    """

    __tablename__ = "app_user"
    __cache_exclude__ = frozenset({"password_hash"})

    username: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        Index(
            "uq_app_user_email",
            "email",
            unique=True,
            postgresql_where=text("is_deleted = false"),
            sqlite_where=text("is_deleted = 0"),
        ),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
