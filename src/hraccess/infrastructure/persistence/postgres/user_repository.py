"""PostgreSQL user repository implementation."""

from psycopg import AsyncConnection

from hraccess.domain.entities import User


class PostgresUserRepository:
    """Reads identity flags from app_user. The identity subsystem owns writes."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by id."""
        cur = await self._conn.execute(
            "SELECT id, username, is_active, is_system_admin FROM app_user WHERE id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return User(id=r[0], username=r[1], is_active=r[2], is_system_admin=r[3])

    async def list_by_ids(self, user_ids: list[int]) -> list[User]:
        """List users by ids, ordered by username."""
        if not user_ids:
            return []
        cur = await self._conn.execute(
            "SELECT id, username, is_active, is_system_admin FROM app_user "
            "WHERE id = ANY(%s) ORDER BY username",
            (list(user_ids),),
        )
        rows = await cur.fetchall()
        return [User(id=r[0], username=r[1], is_active=r[2], is_system_admin=r[3]) for r in rows]
