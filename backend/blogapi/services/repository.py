"""
Blog API — Generic Persistence Boundary
========================================

What:  Create/read/update/delete for one ORM model, keyed by its `id` column.
How:   Thin async wrappers over SQLAlchemy's select/flush. Writes are flushed
       (so ids and defaults are populated) but not committed; the request's
       session dependency commits once the handler returns.
Who:   Every resource service holds one Repository per model it touches.

"Nothing matched" signals:
    get() / find_one_by() / update()  → None
    delete()                          → False

Errors:
    IntegrityError propagates untouched so services can turn uniqueness
    violations into CONFLICT results. Any other SQLAlchemyError is wrapped in
    DatabaseError (→ 500) after logging.
"""

import logging
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import Base
from blogapi.exceptions import DatabaseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """
    Args:
        model: Mapped class with an integer `id` primary key
    """

    def __init__(self, model: Type[ModelT]):
        self.model = model
        self.name = model.__tablename__

    async def create(self, db: AsyncSession, values: Mapping[str, Any]) -> ModelT:
        instance = self.model(**values)
        db.add(instance)
        await self._flush(db, "create")
        return instance

    async def get(self, db: AsyncSession, record_id: int) -> Optional[ModelT]:
        return await self.find_one_by(db, id=record_id)

    async def find_one_by(self, db: AsyncSession, **filters: Any) -> Optional[ModelT]:
        try:
            result = await db.execute(select(self.model).filter_by(**filters).limit(1))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_one_by")

    async def list(self, db: AsyncSession, **filters: Any) -> List[ModelT]:
        """All rows matching the equality `filters`, oldest id first."""
        try:
            query = select(self.model).filter_by(**filters).order_by(self.model.id)
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "list")

    async def update(
        self, db: AsyncSession, record_id: int, values: Mapping[str, Any]
    ) -> Optional[ModelT]:
        instance = await self.get(db, record_id)
        if instance is None:
            return None
        for column, value in values.items():
            setattr(instance, column, value)
        await self._flush(db, "update")
        return instance

    async def delete(self, db: AsyncSession, record_id: int) -> bool:
        instance = await self.get(db, record_id)
        if instance is None:
            return False
        await db.delete(instance)
        await self._flush(db, "delete")
        return True

    async def _flush(self, db: AsyncSession, operation: str) -> None:
        try:
            await db.flush()
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            raise self._wrap(e, operation)

    def _wrap(self, error: SQLAlchemyError, operation: str) -> DatabaseError:
        logger.error(
            "Database error during %s on %s: %s", operation, self.name, str(error), exc_info=True
        )
        return DatabaseError(
            context={"table": self.name, "operation": operation, "error_type": type(error).__name__},
        )
