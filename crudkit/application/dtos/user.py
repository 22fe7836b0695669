"""DTOs for user use cases (no dependency on ORM or HTTP schemas)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserCreate:
    """Input for create_user. password is plain text; only its hash is stored."""

    username: str
    email: str
    password: str


@dataclass(frozen=True)
class UserUpdate:
    """Partial update for update_user; None leaves the field unchanged."""

    username: str | None = None
    email: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_user, create_user, etc.). No password."""

    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime | None
