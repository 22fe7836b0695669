"""SQLAlchemy mixins giving a model the entity capability set.

Provides: IntegerIdMixin, TimestampMixin, SoftDeleteMixin and the
combined EntityMixin used by every crudkit model.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, false
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from crudkit.shared.datetime import utc_now


class IntegerIdMixin:
    """Autoincrement integer primary key. Assigned by the store, never reused."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """created_at (set at insert) and updated_at (null until the first mutation)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)


class SoftDeleteMixin:
    """is_deleted flag. Reads filter on it regardless of the delete policy."""

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(
            Boolean,
            default=False,
            server_default=false(),
            nullable=False,
            index=True,
        )


class EntityMixin(IntegerIdMixin, TimestampMixin, SoftDeleteMixin):
    """Combined mixin: id + timestamps + soft-delete flag."""
