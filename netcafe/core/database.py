"""
Master database engine and schema
"""

from sqlalchemy import Table, event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from netcafe.core.config import Settings
from netcafe.models import MASTER_MODELS

logger = structlog.get_logger(__name__)

# Tenant tables share SQLModel.metadata; only these belong in the master database
MASTER_TABLES: list[Table] = [model.__table__ for model in MASTER_MODELS]


def create_master_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the master database"""
    engine = create_async_engine(
        settings.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://"),
        echo=settings.DEBUG,
        future=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves plan references unchecked otherwise
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_master_db(engine: AsyncEngine) -> None:
    """Create master tables that do not exist yet"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all, tables=MASTER_TABLES)
    logger.info("Master database tables created")
