"""ORM models. Import here so Base.metadata sees every table (Alembic, init_models)."""

from crudkit.infrastructure.persistence.models.mixins import EntityMixin
from crudkit.infrastructure.persistence.models.user import User

__all__ = ["EntityMixin", "User"]
