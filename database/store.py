"""
Entity store: the persistence boundary of the workflow services.

Services receive an ``EntityStore`` instead of opening database sessions
themselves. The SQLAlchemy adapter turns backend errors into the typed errors
of ``core.exceptions`` so no caller ever inspects a database error code.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import select, func, update as sa_update
from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError, DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import (
    ConcurrentModification,
    ForeignKeyViolation,
    NotFound,
    StoreUnavailable,
    UniqueConstraintViolation,
    ValidationFailed,
    WorkflowError,
)
from database.engine import Base

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class EntityStore(ABC):
    """
    Persistence operations on model classes.

    Filters passed to ``select``/``count`` are column equality checks; a
    list/tuple/set value means "IN", and ``<column>__gte`` / ``<column>__lte``
    keys compare ranges.
    """

    @abstractmethod
    async def insert(self, model: type[M], values: Mapping[str, Any]) -> M:
        """Insert one row and return it with server defaults loaded."""

    @abstractmethod
    async def update(
        self,
        model: type[M],
        entity_id: str,
        patch: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> M:
        """Apply ``patch`` as a single UPDATE and return the fresh row."""

    @abstractmethod
    async def get(self, model: type[M], entity_id: str) -> M:
        """Return the row with ``entity_id`` or raise ``NotFound``."""

    @abstractmethod
    async def select(
        self,
        model: type[M],
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> list[M]:
        """Return the rows matching ``filters``."""

    @abstractmethod
    async def count(self, model: type[M], **filters: Any) -> int:
        """Count the rows matching ``filters``."""

    @abstractmethod
    def transaction(self) -> "AsyncIterator[EntityStore]":
        """
        Async context manager yielding a store bound to one transaction.
        Commits on exit, rolls back if the block raises.
        """


def translate_integrity_error(exc: IntegrityError, table: str) -> WorkflowError:
    """Map a backend integrity error to a typed store error."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    message = str(orig if orig is not None else exc)
    lowered = message.lower()

    if sqlstate == UNIQUE_VIOLATION or "unique" in lowered or "duplicate key" in lowered:
        return UniqueConstraintViolation(table, detail=message)
    if sqlstate == FOREIGN_KEY_VIOLATION or "foreign key" in lowered:
        return ForeignKeyViolation(table, detail=message)
    return ValidationFailed(table, "Database constraint violated")


def _apply_filters(stmt, model: type[Base], filters: Mapping[str, Any]):
    for key, value in filters.items():
        name, _, op = key.partition("__")
        column = getattr(model, name)
        if op == "gte":
            stmt = stmt.where(column >= value)
        elif op == "lte":
            stmt = stmt.where(column <= value)
        elif op:
            raise ValueError(f"Unsupported filter operator: {key}")
        elif isinstance(value, (list, tuple, set, frozenset)):
            stmt = stmt.where(column.in_(list(value)))
        else:
            stmt = stmt.where(column == value)
    return stmt


def _order_columns(model: type[Base], order_by: Iterable[str]):
    columns = []
    names = set()
    for name in order_by:
        if name.startswith("-"):
            names.add(name[1:])
            columns.append(getattr(model, name[1:]).desc())
        else:
            names.add(name)
            columns.append(getattr(model, name).asc())
    # rows written in one transaction share now(); break ties on the key
    if columns and "id" not in names:
        columns.append(model.id.asc())
    return columns


class SQLAlchemyEntityStore(EntityStore):
    """
    ``EntityStore`` backed by an async SQLAlchemy session factory.

    An unbound store runs every call in its own short transaction. The store
    yielded by ``transaction()`` shares one session until the block exits.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        session: Optional[AsyncSession] = None,
    ):
        self._session_factory = session_factory
        self._session = session

    @property
    def in_transaction(self) -> bool:
        return self._session is not None

    @asynccontextmanager
    async def _session_scope(self, table: str) -> AsyncIterator[AsyncSession]:
        try:
            if self._session is not None:
                yield self._session
            else:
                async with self._session_factory() as session:
                    async with session.begin():
                        yield session
        except IntegrityError as exc:
            error = translate_integrity_error(exc, table)
            logger.info(f"Integrity error on {table}: {error.code}")
            raise error from exc
        except (OperationalError, InterfaceError) as exc:
            logger.error(f"Database unavailable while accessing {table}", exc_info=True)
            raise StoreUnavailable() from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                logger.error(f"Database connection lost while accessing {table}")
                raise StoreUnavailable() from exc
            raise

    async def insert(self, model: type[M], values: Mapping[str, Any]) -> M:
        async with self._session_scope(model.__tablename__) as session:
            entity = model(**values)
            session.add(entity)
            await session.flush()
            await session.refresh(entity)
            return entity

    async def update(
        self,
        model: type[M],
        entity_id: str,
        patch: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> M:
        values = dict(patch)
        versioned = hasattr(model, "version")
        async with self._session_scope(model.__tablename__) as session:
            if not values:
                entity = await session.get(model, entity_id)
                if entity is None:
                    raise NotFound(model.__name__, entity_id)
                return entity

            stmt = sa_update(model).where(model.id == entity_id)
            if versioned:
                if expected_version is not None:
                    stmt = stmt.where(model.version == expected_version)
                values.setdefault("version", model.version + 1)
            stmt = stmt.values(**values).execution_options(synchronize_session=False)

            result = await session.execute(stmt)
            if result.rowcount == 0:
                if await session.get(model, entity_id) is None:
                    raise NotFound(model.__name__, entity_id)
                raise ConcurrentModification(model.__name__, entity_id)

            return await session.get(model, entity_id, populate_existing=True)

    async def get(self, model: type[M], entity_id: str) -> M:
        async with self._session_scope(model.__tablename__) as session:
            entity = await session.get(model, entity_id)
        if entity is None:
            raise NotFound(model.__name__, entity_id)
        return entity

    async def select(
        self,
        model: type[M],
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> list[M]:
        stmt = _apply_filters(select(model), model, filters)
        if order_by:
            stmt = stmt.order_by(*_order_columns(model, order_by))
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session_scope(model.__tablename__) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self, model: type[M], **filters: Any) -> int:
        stmt = _apply_filters(select(func.count()).select_from(model), model, filters)
        async with self._session_scope(model.__tablename__) as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SQLAlchemyEntityStore"]:
        if self._session is not None:
            # Nested blocks join the enclosing transaction
            yield self
            return
        async with self._session_scope("transaction") as session:
            yield type(self)(self._session_factory, session=session)
