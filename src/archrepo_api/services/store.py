"""Entity store: keyed storage for every entity type on an async session.

All services read and write through an `EntityStore` passed to them
explicitly. Multi-step operations run inside `EntityStore.transaction()`,
which commits once at the end or rolls everything back.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from archrepo_api.models import (
    Base,
    Component,
    Organization,
    Project,
    ProjectMember,
    User,
)
from archrepo_api.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Fields that may change after creation; no entity is ever moved between parents.
UPDATABLE_FIELDS: dict[type[Base], frozenset[str]] = {
    Organization: frozenset({"name", "description"}),
    User: frozenset({"email", "name", "role", "organization_id"}),
    Project: frozenset({"name", "description", "status"}),
    Component: frozenset({"name", "description", "metadata_"}),
    ProjectMember: frozenset({"role"}),
}


def _conflict_from_integrity_error(error: IntegrityError) -> ConflictError:
    return ConflictError(
        "integrity",
        f"Rejected by the entity store: {error.orig}",
    )


class EntityStore:
    """Entity store backed by a SQLAlchemy async session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._in_transaction = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["EntityStore"]:
        """Run the enclosed steps as one unit of work.

        Commits when the block exits normally and rolls back fully on any
        exception. A nested call joins the enclosing unit of work.
        """
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise _conflict_from_integrity_error(e) from e
        except BaseException:
            await self.session.rollback()
            raise
        finally:
            self._in_transaction = False

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise _conflict_from_integrity_error(e) from e

    async def insert(self, entity: ModelT) -> ModelT:
        """Persist a new entity and return it with its id assigned."""
        self.session.add(entity)
        await self._flush()
        await self.session.refresh(entity)
        return entity

    async def get(self, model: type[ModelT], entity_id: int) -> ModelT | None:
        return await self.session.get(model, entity_id)

    async def get_by_id(self, model: type[ModelT], entity_id: int) -> ModelT:
        """Get an entity by id, raising NotFoundError when it does not resolve."""
        entity = await self.get(model, entity_id)
        if entity is None:
            raise NotFoundError(model.__name__, entity_id)
        return entity

    async def list_where(
        self,
        model: type[ModelT],
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] | None = None,
        limit: int | None = None,
        for_update: bool = False,
    ) -> list[ModelT]:
        """List matching entities, ordered by id unless `order_by` is given.

        With `for_update` the rows stay locked until the unit of work ends
        (ignored by backends without row locks, such as SQLite).
        """
        stmt = select(model).where(*criteria)
        stmt = stmt.order_by(*(order_by if order_by is not None else [model.id]))
        if limit is not None:
            stmt = stmt.limit(limit)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_field(
        self, model: type[ModelT], field: str, value: Any
    ) -> list[ModelT]:
        """List entities whose `field` equals `value`, ordered by id."""
        return await self.list_where(model, getattr(model, field) == value)

    async def update(
        self, model: type[ModelT], entity_id: int, **fields: Any
    ) -> ModelT:
        """Overwrite whitelisted fields of an entity."""
        allowed = UPDATABLE_FIELDS.get(model, frozenset())
        immutable = sorted(set(fields) - allowed)
        if immutable:
            raise ValidationError(
                "immutable-field",
                f"{model.__name__} fields cannot be updated: {', '.join(immutable)}",
                fields=immutable,
            )

        entity = await self.get_by_id(model, entity_id)
        for name, value in fields.items():
            setattr(entity, name, value)
        await self._flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, model: type[ModelT], entity_id: int) -> None:
        """Delete an entity by id. Deleting an absent id is not an error."""
        await self.delete_where(model, model.id == entity_id)

    async def delete_where(
        self, model: type[ModelT], *criteria: ColumnElement[bool]
    ) -> int:
        """Delete every row matching all criteria, returning the row count."""
        try:
            result = await self.session.execute(delete(model).where(*criteria))
        except IntegrityError as e:
            raise _conflict_from_integrity_error(e) from e
        logger.debug("Deleted %d %s row(s)", result.rowcount, model.__name__)
        return result.rowcount

    async def count(self, model: type[ModelT], *criteria: ColumnElement[bool]) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar() or 0
