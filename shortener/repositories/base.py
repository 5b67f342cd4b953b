"""Base repository implementation for the URL shortener application.

This module provides a generic BaseRepository class that follows the Repository pattern
for database operations, serving as a foundation for more specific repositories.
"""

import logging
from typing import Any, Dict, Generic, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

# Type variable for model types
T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


def conflicting_field(error: IntegrityError, candidates: Iterable[str]) -> Optional[str]:
    """
    Name the unique column an IntegrityError complains about.

    SQLite reports ``UNIQUE constraint failed: table.column`` and PostgreSQL
    reports ``Key (column)=(...) already exists``; both mention the column name.

    Args:
        error: The IntegrityError raised by the driver
        candidates: Column names with a unique constraint

    Returns:
        The first candidate found in the error message, None if none matches
    """
    message = str(getattr(error, "orig", None) or error)
    for name in candidates:
        if name in message:
            return name
    return None


class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository implementing common operations for SQLModel entities.

    Every driver failure is re-raised as RepositoryError so that callers never
    depend on SQLAlchemy exception types; unique constraint violations are
    reported as DuplicateEntityError.

    Type parameters:
        T: The SQLModel type this repository manages
        CreateSchemaType: The Pydantic model type for creation operations
    """

    #: Columns carrying a unique constraint, checked in order on IntegrityError
    unique_fields: tuple = ()

    def __init__(self, model_type: Type[T]):
        """
        Initialize the repository with a specific model type.

        Args:
            model_type: The SQLModel class this repository will work with
        """
        self.model_type = model_type

    async def get_one_by(self, db: AsyncSession, **filters) -> Optional[T]:
        """
        Get the single entity matching all field=value filters.

        Args:
            db: Database session
            **filters: Field=value pairs to filter by

        Returns:
            The entity if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        if not filters:
            raise ValueError("No conditions provided for lookup")
        try:
            conditions = [getattr(self.model_type, field) == value for field, value in filters.items()]
            result = await db.execute(select(self.model_type).where(*conditions))
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model_type.__name__} by {list(filters)}: {e}")
            raise RepositoryError(f"Database error retrieving entity: {e}") from e

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Create a new entity.

        A failed insert is rolled back before the error is raised, so the
        session is usable again and no partial row stays visible.

        Args:
            db: Database session
            data: Entity data (either as a Pydantic model or dictionary)

        Returns:
            The created entity

        Raises:
            DuplicateEntityError: If a unique constraint rejects the row
            RepositoryError: On other database errors
        """
        if isinstance(data, BaseModel):
            data_dict = data.model_dump(exclude_unset=True)
        else:
            data_dict = dict(data)

        try:
            entity = self.model_type(**data_dict)
            db.add(entity)
            await db.flush()
            await db.refresh(entity)
            return entity
        except IntegrityError as e:
            await db.rollback()
            message = str(e).lower()
            if "unique" not in message and "duplicate key" not in message:
                logger.error(f"Integrity error creating {self.model_type.__name__}: {e}")
                raise RepositoryError(f"Database error creating entity: {e}") from e
            field_name = conflicting_field(e, self.unique_fields) or "unknown"
            logger.warning(f"Unique constraint violated creating {self.model_type.__name__}: {field_name}")
            raise DuplicateEntityError(self.model_type, field_name, data_dict.get(field_name)) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model_type.__name__}: {e}")
            await db.rollback()
            raise RepositoryError(f"Database error creating entity: {e}") from e

    async def count(self, db: AsyncSession) -> int:
        """
        Count the total number of entities.

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(func.count()).select_from(self.model_type)
            result = await db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise RepositoryError(f"Database error counting entities: {e}") from e

    async def exists(self, db: AsyncSession, **kwargs) -> bool:
        """
        Check if an entity exists with the given filters.

        Args:
            db: Database session
            **kwargs: Field=value pairs to filter by

        Returns:
            True if entity exists, False otherwise

        Raises:
            RepositoryError: On database errors
        """
        conditions = [getattr(self.model_type, field) == value for field, value in kwargs.items()]
        if not conditions:
            raise ValueError("No conditions provided for exists check")

        try:
            query = select(func.count()).select_from(self.model_type).where(*conditions)
            result = await db.execute(query)
            return result.scalar_one() > 0
        except SQLAlchemyError as e:
            logger.error(f"Error checking existence of {self.model_type.__name__}: {e}")
            raise RepositoryError(f"Database error checking entity existence: {e}") from e

    async def bulk_delete(self, db: AsyncSession, **filters) -> int:
        """
        Delete entities matching filters.

        Args:
            db: Database session
            **filters: Field=value pairs to filter by

        Returns:
            Number of rows deleted

        Raises:
            RepositoryError: On database errors
        """
        conditions = [getattr(self.model_type, field) == value for field, value in filters.items()]
        if not conditions:
            raise ValueError("No conditions provided for bulk delete")

        try:
            stmt = delete(self.model_type).where(*conditions)
            result = await db.execute(stmt)
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model_type.__name__} records: {e}", exc_info=True)
            raise RepositoryError(f"Database error deleting entities: {e}") from e
