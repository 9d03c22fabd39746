from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from sleep_routines.config import settings
from sleep_routines.db.base import Base

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    # SQLite doesn't support connection pooling
    **({"poolclass": NullPool} if settings.is_sqlite else {"pool_pre_ping": True}),
)

# SQLite does not enforce foreign keys unless explicitly enabled.
if settings.is_sqlite:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    import sleep_routines.models  # noqa: F401 - so all models are registered

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One transaction per request: commit after the handler returns, roll back on any error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
