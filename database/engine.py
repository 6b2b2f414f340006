import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def build_engine(database_url: str, echo: bool = False, **kwargs: Any) -> AsyncEngine:
    """
    Create the async engine for ``database_url``.

    In-memory SQLite URLs share one connection so every session sees the same
    database, and SQLite connections get foreign key enforcement switched on.
    """
    is_sqlite = database_url.startswith("sqlite")
    in_memory = is_sqlite and (
        ":memory:" in database_url or database_url.rstrip("/").endswith(":")
    )
    if in_memory:
        kwargs.setdefault("poolclass", StaticPool)
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    # log for debugging purposes, without credentials
    logger.info(f"Connecting to database at {database_url.split('@')[-1]}")
    engine = create_async_engine(database_url, echo=echo, **kwargs)

    if is_sqlite:
        # Listen for the 'connect' event to enable FK constraints
        @event.listens_for(engine.sync_engine, "connect")
        def connect(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session maker used by the entity store."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Function to initialize the database (create tables)
async def init_db(engine: AsyncEngine) -> None:
    # Import models so every table is registered on the metadata
    import database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db(engine: AsyncEngine) -> None:
    """Close database engine and connections."""
    await engine.dispose()
