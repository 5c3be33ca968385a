"""
Connection Factory

Opens an async engine for one named database and validates that it is
reachable. Also hands out the administrative connection (bound to no tenant
database) used to issue create-database statements.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from netcafe.core.config import Settings
from netcafe.core.exceptions import DatabaseConnectionError, DatabaseCreationError
from netcafe.tenancy.naming import is_safe_identifier

logger = structlog.get_logger(__name__)


@dataclass
class DatabaseConnection:
    """Live engine for one physical database plus its session factory"""

    database_name: str
    engine: AsyncEngine
    session_factory: async_sessionmaker = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Tenant connection disposed", database_name=self.database_name)


class ConnectionFactory:
    """Builds engines for tenant databases on the configured server"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.server_url: URL = make_url(settings.tenant_database_url)

    @property
    def backend(self) -> str:
        return self.server_url.get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    def sqlite_path(self, database_name: str) -> Path:
        return Path(self.settings.TENANT_SQLITE_DIR) / f"{database_name}.db"

    def url_for(self, database_name: Optional[str]) -> URL:
        """Server URL with the database component swapped for database_name"""
        if self.is_sqlite:
            if database_name is None:
                return self.server_url.set(database=None)
            return self.server_url.set(database=str(self.sqlite_path(database_name)))
        return self.server_url.set(database=database_name)

    def _engine_kwargs(self) -> dict:
        kwargs = {"echo": self.settings.DEBUG, "future": True}
        if not self.is_sqlite:
            kwargs.update(
                pool_size=self.settings.TENANT_POOL_SIZE,
                max_overflow=self.settings.TENANT_MAX_OVERFLOW,
                pool_pre_ping=True,
            )
        return kwargs

    async def open(self, database_name: str) -> DatabaseConnection:
        """
        Open an engine for database_name and check it answers a trivial query.

        Raises:
            DatabaseConnectionError: database missing, unreachable or login refused
        """
        if self.is_sqlite and not self.sqlite_path(database_name).exists():
            raise DatabaseConnectionError(database_name, "database does not exist")

        engine = create_async_engine(self.url_for(database_name), **self._engine_kwargs())
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (DBAPIError, OSError) as e:
            await engine.dispose()
            logger.error("Tenant connection failed", database_name=database_name, error=str(e))
            raise DatabaseConnectionError(database_name, str(e)) from e

        logger.info("Tenant connection opened", database_name=database_name)
        return DatabaseConnection(database_name=database_name, engine=engine)

    @asynccontextmanager
    async def admin_connection(self) -> AsyncIterator[AsyncConnection]:
        """Autocommit connection to the server itself, not to any tenant database"""
        if self.backend == "postgresql":
            url = self.server_url.set(database=self.settings.ADMIN_DATABASE)
        else:
            url = self.url_for(None)

        engine = create_async_engine(url, poolclass=NullPool, isolation_level="AUTOCOMMIT")
        try:
            try:
                conn = await engine.connect()
            except (DBAPIError, OSError) as e:
                logger.error("Admin connection failed", error=str(e))
                raise DatabaseConnectionError(None, str(e)) from e
            try:
                yield conn
            finally:
                await conn.close()
        finally:
            await engine.dispose()

    async def create_database(self, database_name: str) -> bool:
        """
        Create the physical database if it does not exist yet.

        Returns True if it was created, False if it already existed.

        Raises:
            DatabaseCreationError: unsafe name or statement rejected by the engine
            DatabaseConnectionError: administrative connection failed
        """
        if not is_safe_identifier(database_name):
            raise DatabaseCreationError(database_name, "not a safe database identifier")

        if self.is_sqlite:
            path = self.sqlite_path(database_name)
            if path.exists():
                return False
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
            except OSError as e:
                raise DatabaseCreationError(database_name, str(e)) from e
            logger.info("Tenant database created", database_name=database_name, backend="sqlite")
            return True

        async with self.admin_connection() as conn:
            try:
                if self.backend == "postgresql":
                    result = await conn.execute(
                        text("SELECT 1 FROM pg_database WHERE datname = :name"),
                        {"name": database_name},
                    )
                    if result.scalar() is not None:
                        return False
                    await conn.execute(text(f'CREATE DATABASE "{database_name}"'))
                else:
                    result = await conn.execute(
                        text(f"CREATE DATABASE IF NOT EXISTS `{database_name}`")
                    )
                    if result.rowcount == 0:
                        return False
            except DBAPIError as e:
                logger.error("Create database failed", database_name=database_name, error=str(e))
                raise DatabaseCreationError(database_name, str(e)) from e

        logger.info("Tenant database created", database_name=database_name, backend=self.backend)
        return True
