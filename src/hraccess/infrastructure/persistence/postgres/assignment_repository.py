"""PostgreSQL user role assignment repository implementation."""

from dataclasses import replace
from datetime import datetime

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from hraccess.application.dto.effective_permission_dto import RoleGrant
from hraccess.domain.entities import UserRoleAssignment
from hraccess.domain.exceptions import ConcurrentChange

_COLUMNS = "id, user_id, role_id, assigned_at, assigned_by, expiry_at, active"
_EFFECTIVE = "active AND (expiry_at IS NULL OR expiry_at > %s)"


def _assignment(r: tuple) -> UserRoleAssignment:
    return UserRoleAssignment(
        id=r[0],
        user_id=r[1],
        role_id=r[2],
        assigned_at=r[3],
        assigned_by=r[4],
        expiry_at=r[5],
        active=r[6],
    )


class PostgresAssignmentRepository:
    """User role assignment repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, user_id: int, role_id: int) -> UserRoleAssignment | None:
        """Get the (user, role) assignment in any state."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_role WHERE user_id = %s AND role_id = %s",
            (user_id, role_id),
        )
        r = await cur.fetchone()
        return _assignment(r) if r else None

    async def list_effective_for_user(
        self, user_id: int, now: datetime
    ) -> list[UserRoleAssignment]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_role WHERE user_id = %s AND {_EFFECTIVE} "
            "ORDER BY assigned_at",
            (user_id, now),
        )
        rows = await cur.fetchall()
        return [_assignment(r) for r in rows]

    async def list_effective_for_role(
        self, role_id: int, now: datetime
    ) -> list[UserRoleAssignment]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_role WHERE role_id = %s AND {_EFFECTIVE} "
            "ORDER BY assigned_at",
            (role_id, now),
        )
        rows = await cur.fetchall()
        return [_assignment(r) for r in rows]

    async def create(self, assignment: UserRoleAssignment) -> UserRoleAssignment:
        try:
            cur = await self._conn.execute(
                "INSERT INTO user_role (user_id, role_id, assigned_at, assigned_by, expiry_at, "
                "active) VALUES (%s, %s, %s, %s, %s, %s) RETURNING id",
                (
                    assignment.user_id,
                    assignment.role_id,
                    assignment.assigned_at,
                    assignment.assigned_by,
                    assignment.expiry_at,
                    assignment.active,
                ),
            )
        except UniqueViolation as e:
            raise ConcurrentChange(
                f"Role {assignment.role_id} was just assigned to user {assignment.user_id}"
            ) from e
        r = await cur.fetchone()
        return replace(assignment, id=r[0])

    async def update(self, assignment: UserRoleAssignment) -> None:
        await self._conn.execute(
            "UPDATE user_role SET assigned_at=%s, assigned_by=%s, expiry_at=%s, active=%s "
            "WHERE id=%s",
            (
                assignment.assigned_at,
                assignment.assigned_by,
                assignment.expiry_at,
                assignment.active,
                assignment.id,
            ),
        )

    async def list_role_grants(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[RoleGrant]:
        """Permissions reachable through effective assignments of active roles.

        Only active edges to active catalog permissions count.
        """
        q = (
            "SELECT r.id, r.name, rp.permission_id, ur.assigned_at, ur.expiry_at "
            "FROM user_role ur "
            "JOIN role r ON r.id = ur.role_id AND r.active "
            "JOIN role_permission rp ON rp.role_id = r.id AND rp.active "
            "JOIN permission p ON p.id = rp.permission_id AND p.active "
            "JOIN application_module m ON m.id = p.module_id AND m.active "
            "JOIN permission_type t ON t.id = p.permission_type_id AND t.active "
            "WHERE ur.user_id = %s AND ur.active "
            "AND (ur.expiry_at IS NULL OR ur.expiry_at > %s)"
        )
        params: list[object] = [user_id, now]
        if permission_id is not None:
            q += " AND rp.permission_id = %s"
            params.append(permission_id)
        q += " ORDER BY r.name, rp.permission_id"
        cur = await self._conn.execute(q, tuple(params))
        rows = await cur.fetchall()
        return [
            RoleGrant(
                role_id=r[0],
                role_name=r[1],
                permission_id=r[2],
                assigned_at=r[3],
                expiry_at=r[4],
            )
            for r in rows
        ]
