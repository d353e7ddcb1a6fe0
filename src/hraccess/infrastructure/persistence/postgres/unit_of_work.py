"""PostgreSQL Unit of Work implementation."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import OperationalError
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from hraccess.domain.exceptions import StoreUnavailable
from hraccess.infrastructure.persistence.postgres.assignment_repository import (
    PostgresAssignmentRepository,
)
from hraccess.infrastructure.persistence.postgres.audit_repository import (
    PostgresAuditRepository,
)
from hraccess.infrastructure.persistence.postgres.override_repository import (
    PostgresOverrideRepository,
)
from hraccess.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from hraccess.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from hraccess.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)

logger = logging.getLogger(__name__)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction.

    A snapshot unit of work runs REPEATABLE READ READ ONLY, so all its
    reads observe one committed state.
    """

    def __init__(self, pool: AsyncConnectionPool, snapshot: bool = False) -> None:
        self._pool = pool
        self._snapshot = snapshot
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        if self._snapshot:
            await self._conn.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY")
        self._users = PostgresUserRepository(self._conn)
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._assignments = PostgresAssignmentRepository(self._conn)
        self._overrides = PostgresOverrideRepository(self._conn)
        self._audit = PostgresAuditRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def assignments(self) -> PostgresAssignmentRepository:
        return self._assignments

    @property
    def overrides(self) -> PostgresOverrideRepository:
        return self._overrides

    @property
    def audit(self) -> PostgresAuditRepository:
        return self._audit

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool, *, snapshot: bool = False) -> object:
    """Create UnitOfWork factory (async context manager).

    Connection failures, pool exhaustion and statement timeouts surface as
    StoreUnavailable.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        try:
            async with PostgresUnitOfWork(pool, snapshot=snapshot) as uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except (PoolTimeout, OperationalError) as e:
            logger.error("Database unavailable: %s", e)
            raise StoreUnavailable("Permission store is unavailable") from e

    return factory
