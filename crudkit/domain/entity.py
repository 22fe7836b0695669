"""Entity capability shared by every persisted record.

Repositories and services are generic over any type exposing this set
(identity, timestamps, soft-delete flag); no base class is required.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Entity(Protocol):
    """A record with durable identity persisted in the store."""

    id: int | None
    created_at: datetime | None
    updated_at: datetime | None
    is_deleted: bool
