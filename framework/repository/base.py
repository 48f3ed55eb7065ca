"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar, Optional, List, Type
from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel, select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.exceptions.errors import NotFoundError
from .unit_of_work import commit_session

T = TypeVar("T", bound=SQLModel)


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def add(self, entity: T) -> T:
        """Stage a new entity for insertion."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Stage changes to an existing entity; NotFoundError if it does not exist."""
        pass

    @abstractmethod
    async def get(self, id: Any) -> Optional[T]:
        """Get entity by ID, None when absent."""
        pass

    @abstractmethod
    async def all(self) -> List[T]:
        """Get every entity."""
        pass

    @abstractmethod
    async def find(self, predicate: ColumnElement[bool]) -> List[T]:
        """Get entities matching a predicate evaluated by the database."""
        pass

    @abstractmethod
    async def save_changes(self) -> None:
        """Commit all staged changes atomically."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository implementation over an AsyncSession; one per entity type."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model

    async def add(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """
        Stage an update for an entity matched by its ID.

        Never upserts: an entity that is neither tracked by the session nor
        stored raises NotFoundError. Returns the instance the session tracks,
        which is ``entity`` itself when it was loaded from this session.
        """
        if entity in self.session:
            return entity
        if await self.session.get(self.model, entity.id) is None:
            raise NotFoundError(self.model.__name__, entity.id)
        return await self.session.merge(entity)

    async def get(self, id: Any) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def all(self) -> List[T]:
        result = await self.session.exec(select(self.model))
        return list(result.all())

    async def find(self, predicate: ColumnElement[bool]) -> List[T]:
        statement = select(self.model).where(predicate)
        result = await self.session.exec(statement)
        return list(result.all())

    async def save_changes(self) -> None:
        await commit_session(self.session)

    async def find_by(self, **filters) -> List[T]:
        """Find entities by equality filters (e.g. name='Widget')."""
        clauses = [getattr(self.model, key) == value for key, value in filters.items()]
        return await self.find(and_(true(), *clauses))

    async def count(self, predicate: Optional[ColumnElement[bool]] = None) -> int:
        """Count entities, optionally matching a predicate."""
        statement = select(func.count()).select_from(self.model)
        if predicate is not None:
            statement = statement.where(predicate)
        result = await self.session.exec(statement)
        return result.one()

    async def delete(self, id: Any) -> bool:
        """Stage deletion of an entity; False if it does not exist."""
        entity = await self.get(id)
        if entity is None:
            return False
        await self.session.delete(entity)
        return True
