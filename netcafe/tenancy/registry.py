"""
Process-wide cache of tenant connection handles

Populated lazily, keyed by database name, cleared only at shutdown.
Population is single-flight per key: the first caller for a database opens
the connection and registers the schema, concurrent callers for the same
database await that in-flight result instead of starting their own. Once a
handle is cached, lookups do not wait on anything.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import structlog

from netcafe.core.exceptions import DatabaseConnectionError
from netcafe.tenancy.connection import DatabaseConnection
from netcafe.tenancy.schema import EntitySchemaSet

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TenantConnectionHandle:
    """A live tenant connection and the entity schema registered against it"""

    connection: DatabaseConnection
    schema: EntitySchemaSet

    @property
    def database_name(self) -> str:
        return self.connection.database_name


HandleFactory = Callable[[str], Awaitable[TenantConnectionHandle]]


class TenantConnectionRegistry:
    """Owns every cached TenantConnectionHandle"""

    def __init__(self):
        self._handles: dict[str, TenantConnectionHandle] = {}
        self._pending: dict[str, asyncio.Future] = {}
        self._closed = False

    def __contains__(self, database_name: str) -> bool:
        return database_name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def get(self, database_name: str) -> Optional[TenantConnectionHandle]:
        return self._handles.get(database_name)

    async def get_or_create(
        self,
        database_name: str,
        factory: HandleFactory,
    ) -> TenantConnectionHandle:
        """
        Return the cached handle for database_name, building it with factory
        if absent. A failed build is reported to every waiter and not cached,
        so the next call tries again.
        """
        if self._closed:
            raise DatabaseConnectionError(database_name, "connection registry is closed")

        handle = self._handles.get(database_name)
        if handle is not None:
            return handle

        pending = self._pending.get(database_name)
        if pending is None:
            pending = asyncio.ensure_future(self._populate(database_name, factory))
            self._pending[database_name] = pending

        # A cancelled waiter must not cancel the build other waiters share
        return await asyncio.shield(pending)

    async def _populate(self, database_name: str, factory: HandleFactory) -> TenantConnectionHandle:
        try:
            handle = await factory(database_name)
            if self._closed:
                # Finished after shutdown began
                await handle.connection.dispose()
                raise DatabaseConnectionError(database_name, "connection registry is closed")
            self._handles[database_name] = handle
            logger.info("Tenant connection cached", database_name=database_name)
            return handle
        finally:
            self._pending.pop(database_name, None)

    async def close(self) -> None:
        """
        Dispose every cached connection. Builds still in flight dispose their
        own connection when they finish.
        """
        self._closed = True
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            await handle.connection.dispose()
        logger.info("Tenant connection registry closed", disposed=len(handles))
