"""Opens the PostgreSQL pool with the ASGI lifespan and closes it on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Ties the connection pool to server startup and shutdown.

    The pool opens without waiting for min_size connections, so the API comes
    up while the database is still unreachable; requests then fail with 503
    and /v1/health/ready reports unavailable until it is back.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.open(wait=False)
        logger.info(
            "Connection pool opened (min_size=%s, max_size=%s)",
            self._pool.min_size,
            self._pool.max_size,
        )

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.close()
        logger.info("Connection pool closed")
