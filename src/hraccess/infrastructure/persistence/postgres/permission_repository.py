"""PostgreSQL permission catalog repository implementation."""

from psycopg import AsyncConnection

from hraccess.domain.entities import Module, Permission, PermissionType

# A permission is usable only while its row, module and type are all active
_ACTIVE_PERMISSIONS = (
    "SELECT p.id, m.code, m.name, t.code, t.name, p.description "
    "FROM permission p "
    "JOIN application_module m ON m.id = p.module_id "
    "JOIN permission_type t ON t.id = p.permission_type_id "
    "WHERE p.active AND m.active AND t.active"
)
_ORDER = " ORDER BY m.display_order, m.code, t.code"


def _permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        module_code=r[1],
        module_name=r[2],
        permission_code=r[3],
        permission_name=r[4],
        description=r[5],
    )


class PostgresPermissionRepository:
    """Permission catalog repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: int) -> Permission | None:
        """Get active permission by id."""
        cur = await self._conn.execute(
            _ACTIVE_PERMISSIONS + " AND p.id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _permission(r) if r else None

    async def get_by_key(self, module_code: str, permission_code: str) -> Permission | None:
        """Get active permission by (module code, permission code)."""
        cur = await self._conn.execute(
            _ACTIVE_PERMISSIONS + " AND m.code = %s AND t.code = %s",
            (module_code, permission_code),
        )
        r = await cur.fetchone()
        return _permission(r) if r else None

    async def list_active(self) -> list[Permission]:
        """List the active catalog."""
        cur = await self._conn.execute(_ACTIVE_PERMISSIONS + _ORDER)
        rows = await cur.fetchall()
        return [_permission(r) for r in rows]

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]:
        """List active permissions among the given ids; unknown ids are skipped."""
        if not permission_ids:
            return []
        cur = await self._conn.execute(
            _ACTIVE_PERMISSIONS + " AND p.id = ANY(%s)" + _ORDER,
            (list(permission_ids),),
        )
        rows = await cur.fetchall()
        return [_permission(r) for r in rows]

    async def list_modules(self) -> list[Module]:
        cur = await self._conn.execute(
            "SELECT id, code, name, display_order, description, active "
            "FROM application_module WHERE active ORDER BY display_order, code"
        )
        rows = await cur.fetchall()
        return [
            Module(
                id=r[0],
                code=r[1],
                name=r[2],
                display_order=r[3],
                description=r[4],
                active=r[5],
            )
            for r in rows
        ]

    async def list_types(self) -> list[PermissionType]:
        cur = await self._conn.execute(
            "SELECT id, code, name, description, active "
            "FROM permission_type WHERE active ORDER BY id"
        )
        rows = await cur.fetchall()
        return [
            PermissionType(id=r[0], code=r[1], name=r[2], description=r[3], active=r[4])
            for r in rows
        ]
