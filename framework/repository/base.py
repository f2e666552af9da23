"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type
from sqlalchemy import func, inspect as sa_inspect
from sqlalchemy.orm import make_transient_to_detached
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T", bound=SQLModel)

MISSING_ROW_VERSION = 0


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Get all entities."""
        pass

    @abstractmethod
    async def find(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Stage a new entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Stage a full replacement of an entity."""
        pass

    @abstractmethod
    async def delete_by_id(self, id: int) -> bool:
        """Stage removal of an entity."""
        pass

    @abstractmethod
    async def exists_by_id(self, id: int) -> bool:
        """Check whether an entity exists."""
        pass


class BaseRepository(IRepository[T]):
    """
    Generic repository implementation over one SQLModel table.

    Write operations only stage changes on the session; nothing is durable
    until the owning UnitOfWork commits.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model
        self._mapper = sa_inspect(model)
        self._pk = self._mapper.primary_key[0]

    def query(self):
        """Base select statement for the entity (compose filters on top)."""
        return select(self.model)

    async def get_all(self) -> List[T]:
        """Get all entities (unordered, no paging)."""
        result = await self.session.exec(self.query())
        return list(result.all())

    async def find(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        return await self.session.get(self.model, id)

    def insert(self, entity: T) -> T:
        """Stage a new entity; its ID is assigned by the store on commit."""
        self.session.add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """
        Stage a full replacement of the row matching the entity's primary key.

        A detached entity is attached as an already persisted row with every
        column flagged as modified, so the flush issues a plain UPDATE. When the
        model maps a version column the UPDATE also matches on the version the
        caller supplied; a missing row or a stale version raises StaleDataError
        at commit. A caller that supplies no version gets the stored one.
        An entity this session already tracks is flagged in place.
        """
        version_col = self._mapper.version_id_col
        version_key = None
        if version_col is not None:
            version_key = self._mapper.get_property_by_column(version_col).key

        if sa_inspect(entity).persistent:
            self._flag_columns(entity, version_key)
            return entity

        if version_key is not None and getattr(entity, version_key) is None:
            current = await self.session.scalar(
                select(version_col).where(self._pk == getattr(entity, self._pk.key))
            )
            # Stored versions start at 1, so 0 never matches and the commit fails stale
            setattr(entity, version_key, current if current is not None else MISSING_ROW_VERSION)

        make_transient_to_detached(entity)
        self.session.add(entity)
        self._flag_columns(entity, version_key)
        return entity

    def _flag_columns(self, entity: T, version_key: Optional[str]) -> None:
        for column_attr in self._mapper.column_attrs:
            if column_attr.key == version_key or column_attr.columns[0].primary_key:
                continue
            flag_modified(entity, column_attr.key)

    async def delete_by_id(self, id: int) -> bool:
        """Stage removal; returns False when no matching row exists."""
        entity = await self.find(id)
        if entity:
            await self.session.delete(entity)
            return True
        return False

    async def exists_by_id(self, id: int) -> bool:
        """Check existence without loading the entity."""
        statement = select(self._pk).where(self._pk == id).limit(1)
        return await self.session.scalar(statement) is not None

    async def find_all(self, **filters) -> List[T]:
        """Find entities by filters (e.g. name='Chai')."""
        statement = self.query()
        for key, value in filters.items():
            if hasattr(self.model, key):
                statement = statement.where(getattr(self.model, key) == value)

        result = await self.session.exec(statement)
        return list(result.all())

    async def count(self) -> int:
        """Count all entities."""
        result = await self.session.exec(select(func.count(self._pk)))
        return result.one()
