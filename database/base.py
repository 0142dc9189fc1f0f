"""Database base configuration and session management."""
from uuid import uuid4

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from backoffice.config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def new_id() -> str:
    """Generate a primary key for a new row."""
    return uuid4().hex


def _engine_options() -> dict:
    options = {"echo": settings.debug}
    if settings.debug or settings.database_url.startswith("sqlite"):
        options["poolclass"] = NullPool
    else:
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
        options["pool_pre_ping"] = True
    return options


# Create async engine
engine = create_async_engine(settings.database_url, **_engine_options())

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db():
    """Initialize database - create all tables."""
    # Import models so every table is registered on the metadata
    import database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections."""
    await engine.dispose()


def enable_sqlite_foreign_keys(async_engine) -> None:
    """Turn on FK enforcement (and ON DELETE cascades) for SQLite connections."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)
