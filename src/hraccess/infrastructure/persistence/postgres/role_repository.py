"""PostgreSQL role repository implementation."""

from dataclasses import replace
from datetime import datetime

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from hraccess.application.dto.role_dto import RoleSummary
from hraccess.domain.entities import Permission, Role, RolePermission
from hraccess.domain.exceptions import DuplicateRoleCode

_ROLE_COLUMNS = (
    "r.id, r.name, r.code, r.created_at, r.modified_at, r.description, r.is_system_role, "
    "r.scope_department_id, r.scope_company_id, r.active, r.modified_by"
)


def _role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        code=r[2],
        created_at=r[3],
        modified_at=r[4],
        description=r[5],
        is_system_role=r[6],
        scope_department_id=r[7],
        scope_company_id=r[8],
        active=r[9],
        modified_by=r[10],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: int, for_update: bool = False) -> Role | None:
        """Get role by id, active or not.

        for_update locks the row until the transaction ends, so deleting a role
        and assigning it cannot both commit.
        """
        lock = " FOR UPDATE" if for_update else ""
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role r WHERE r.id = %s{lock}",
            (role_id,),
        )
        r = await cur.fetchone()
        return _role(r) if r else None

    async def get_by_code(self, code: str) -> Role | None:
        """Get role by code, active or not. Codes compare case-insensitively."""
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role r WHERE upper(r.code) = upper(%s)",
            (code,),
        )
        r = await cur.fetchone()
        return _role(r) if r else None

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]:
        if not role_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role r WHERE r.id = ANY(%s) ORDER BY r.name",
            (list(role_ids),),
        )
        rows = await cur.fetchall()
        return [_role(r) for r in rows]

    async def list_summaries(self, now: datetime) -> list[RoleSummary]:
        """Active roles with active permission and effective holder counts."""
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS}, "
            "(SELECT count(*) FROM role_permission rp "
            " WHERE rp.role_id = r.id AND rp.active), "
            "(SELECT count(*) FROM user_role ur "
            " WHERE ur.role_id = r.id AND ur.active "
            " AND (ur.expiry_at IS NULL OR ur.expiry_at > %s)) "
            "FROM role r WHERE r.active ORDER BY r.name",
            (now,),
        )
        rows = await cur.fetchall()
        return [
            RoleSummary(role=_role(r), permission_count=r[11], user_count=r[12])
            for r in rows
        ]

    async def create(self, role: Role) -> Role:
        """Insert role and return it with its generated id."""
        try:
            cur = await self._conn.execute(
                "INSERT INTO role (name, code, description, is_system_role, scope_department_id, "
                "scope_company_id, active, created_at, modified_at, modified_by) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING id",
                (
                    role.name,
                    role.code,
                    role.description,
                    role.is_system_role,
                    role.scope_department_id,
                    role.scope_company_id,
                    role.active,
                    role.created_at,
                    role.modified_at,
                    role.modified_by,
                ),
            )
        except UniqueViolation as e:
            raise DuplicateRoleCode(f"Role code already exists: {role.code}") from e
        r = await cur.fetchone()
        return replace(role, id=r[0])

    async def update(self, role: Role) -> None:
        await self._conn.execute(
            "UPDATE role SET name=%s, description=%s, active=%s, modified_at=%s, modified_by=%s "
            "WHERE id=%s",
            (
                role.name,
                role.description,
                role.active,
                role.modified_at,
                role.modified_by,
                role.id,
            ),
        )

    async def list_active_permissions(self, role_id: int) -> list[Permission]:
        """Active catalog permissions reachable through active edges of role."""
        cur = await self._conn.execute(
            "SELECT p.id, m.code, m.name, t.code, t.name, p.description "
            "FROM role_permission rp "
            "JOIN permission p ON p.id = rp.permission_id AND p.active "
            "JOIN application_module m ON m.id = p.module_id AND m.active "
            "JOIN permission_type t ON t.id = p.permission_type_id AND t.active "
            "WHERE rp.role_id = %s AND rp.active "
            "ORDER BY m.display_order, m.code, t.code",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [
            Permission(
                id=r[0],
                module_code=r[1],
                module_name=r[2],
                permission_code=r[3],
                permission_name=r[4],
                description=r[5],
            )
            for r in rows
        ]

    async def deactivate_all_edges(self, role_id: int) -> None:
        await self._conn.execute(
            "UPDATE role_permission SET active = false WHERE role_id = %s AND active",
            (role_id,),
        )

    async def activate_edge(self, edge: RolePermission) -> None:
        """Reactivate the edge if it ever existed, insert it otherwise."""
        await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id, granted_at, granted_by, active) "
            "VALUES (%s, %s, %s, %s, true) "
            "ON CONFLICT (role_id, permission_id) DO UPDATE SET "
            "active = true, granted_at = EXCLUDED.granted_at, granted_by = EXCLUDED.granted_by",
            (edge.role_id, edge.permission_id, edge.granted_at, edge.granted_by),
        )
