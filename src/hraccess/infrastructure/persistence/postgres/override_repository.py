"""PostgreSQL user permission override repository implementation."""

from dataclasses import replace
from datetime import datetime

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from hraccess.domain.entities import UserPermissionOverride
from hraccess.domain.exceptions import ConcurrentChange

_COLUMNS = (
    "id, user_id, permission_id, is_granted, reason, created_at, created_by, expiry_at, active"
)


def _override(r: tuple) -> UserPermissionOverride:
    return UserPermissionOverride(
        id=r[0],
        user_id=r[1],
        permission_id=r[2],
        is_granted=r[3],
        reason=r[4],
        created_at=r[5],
        created_by=r[6],
        expiry_at=r[7],
        active=r[8],
    )


class PostgresOverrideRepository:
    """User permission override repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, override_id: int) -> UserPermissionOverride | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission_override WHERE id = %s",
            (override_id,),
        )
        r = await cur.fetchone()
        return _override(r) if r else None

    async def get_active_for_pair(
        self, user_id: int, permission_id: int
    ) -> UserPermissionOverride | None:
        """The single active override for (user, permission), expired or not."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission_override "
            "WHERE user_id = %s AND permission_id = %s AND active",
            (user_id, permission_id),
        )
        r = await cur.fetchone()
        return _override(r) if r else None

    async def list_effective_for_user(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[UserPermissionOverride]:
        q = (
            f"SELECT {_COLUMNS} FROM user_permission_override "
            "WHERE user_id = %s AND active AND (expiry_at IS NULL OR expiry_at > %s)"
        )
        params: list[object] = [user_id, now]
        if permission_id is not None:
            q += " AND permission_id = %s"
            params.append(permission_id)
        q += " ORDER BY permission_id"
        cur = await self._conn.execute(q, tuple(params))
        rows = await cur.fetchall()
        return [_override(r) for r in rows]

    async def list_active_for_user(self, user_id: int) -> list[UserPermissionOverride]:
        """Active overrides including expired ones, newest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission_override "
            "WHERE user_id = %s AND active ORDER BY created_at DESC",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [_override(r) for r in rows]

    async def create(self, override: UserPermissionOverride) -> UserPermissionOverride:
        try:
            cur = await self._conn.execute(
                "INSERT INTO user_permission_override (user_id, permission_id, is_granted, "
                "reason, created_at, created_by, expiry_at, active) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s) RETURNING id",
                (
                    override.user_id,
                    override.permission_id,
                    override.is_granted,
                    override.reason,
                    override.created_at,
                    override.created_by,
                    override.expiry_at,
                    override.active,
                ),
            )
        except UniqueViolation as e:
            raise ConcurrentChange(
                f"Active override already exists for user {override.user_id}, "
                f"permission {override.permission_id}"
            ) from e
        r = await cur.fetchone()
        return replace(override, id=r[0])

    async def update(self, override: UserPermissionOverride) -> None:
        await self._conn.execute(
            "UPDATE user_permission_override SET is_granted=%s, reason=%s, created_at=%s, "
            "created_by=%s, expiry_at=%s, active=%s WHERE id=%s",
            (
                override.is_granted,
                override.reason,
                override.created_at,
                override.created_by,
                override.expiry_at,
                override.active,
                override.id,
            ),
        )
