"""Base repository: generic CRUD over one entity model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.domain.exceptions import ResourceNotFoundException
from crudkit.infrastructure.persistence.database import Base
from crudkit.infrastructure.persistence.retry import persistence_operation
from crudkit.shared.datetime import utc_now

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, get_all, add, update, delete, exists, find and query.

    ModelType must carry the EntityMixin columns (id, created_at, updated_at,
    is_deleted). Every mutation commits immediately. Reads never return rows
    flagged is_deleted; set soft_delete = True on a subclass to flag rows on
    delete instead of removing them.
    """

    soft_delete: bool = False

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        *,
        retry_attempts: int = 3,
        retry_max_wait: float = 5.0,
    ) -> None:
        self.db = db
        self.model = model
        self.retry_attempts = retry_attempts
        self.retry_max_wait = retry_max_wait

    def query(self) -> Select[tuple[ModelType]]:
        """Return a composable SELECT restricted to non-deleted rows. Run it with fetch()."""
        model: Any = self.model
        return select(self.model).where(model.is_deleted.is_(False))

    @persistence_operation("get_by_id")
    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(self.query().where(model.id == entity_id))
        return result.scalar_one_or_none()

    @persistence_operation("get_all")
    async def get_all(self) -> list[ModelType]:
        """Return all non-deleted records ordered by id."""
        model: Any = self.model
        result = await self.db.execute(self.query().order_by(model.id))
        return list(result.scalars().all())

    @persistence_operation("add")
    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it with its assigned id."""
        entity: Any = obj
        if entity.created_at is None:
            entity.created_at = utc_now()
        if entity.is_deleted is None:
            entity.is_deleted = False
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Update an existing record matched by id.

        The caller's column values are captured once and merged on every
        attempt, so a retried commit replays them even after the rollback
        expired obj. Attached and detached instances take the same path.

        Raises:
            ValueError: If obj has no id.
            ResourceNotFoundException: If no non-deleted row has that id.
        """
        values = _loaded_columns(obj)
        if values.get("id") is None:
            raise ValueError(
                f"Cannot update: primary key 'id' is missing on {self.model.__name__} instance."
            )
        return await self._merge_update(values)

    @persistence_operation("update")
    async def _merge_update(self, values: dict[str, Any]) -> ModelType:
        model: Any = self.model
        entity_id = values["id"]
        result = await self.db.execute(
            select(model.id).where(model.id == entity_id, model.is_deleted.is_(False))
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundException(self.model.__name__, entity_id)
        merged = await self.db.merge(self.model(**{**values, "updated_at": utc_now()}))
        await self.db.commit()
        await self.db.refresh(merged)
        return merged

    @persistence_operation("delete")
    async def delete(self, entity_id: int) -> None:
        """Delete (or flag) the record. Deleting a missing id is a no-op."""
        model: Any = self.model
        result = await self.db.execute(self.query().where(model.id == entity_id))
        row: Any = result.scalar_one_or_none()
        if row is None:
            return
        if self.soft_delete:
            row.is_deleted = True
            row.updated_at = utc_now()
        else:
            await self.db.delete(row)
        await self.db.commit()

    @persistence_operation("exists")
    async def exists(self, entity_id: int) -> bool:
        """Return True if a non-deleted record with this id exists."""
        model: Any = self.model
        stmt = select(model.id).where(model.id == entity_id, model.is_deleted.is_(False))
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    @persistence_operation("find")
    async def find(self, *criteria: Any) -> list[ModelType]:
        """Return non-deleted records matching every column expression (e.g. User.email == x)."""
        model: Any = self.model
        result = await self.db.execute(self.query().where(*criteria).order_by(model.id))
        return list(result.scalars().all())

    @persistence_operation("fetch")
    async def fetch(self, stmt: Select[tuple[ModelType]]) -> list[ModelType]:
        """Execute a statement built from query() and return the entities."""
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


def _loaded_columns(obj: Any) -> dict[str, Any]:
    """Column values present on obj, read from its state without lazy-loading."""
    state = sa_inspect(obj)
    return {
        attr.key: state.dict[attr.key]
        for attr in state.mapper.column_attrs
        if attr.key in state.dict
    }
