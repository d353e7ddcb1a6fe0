"""PostgreSQL audit log repository implementation."""

from dataclasses import replace
from datetime import datetime

from psycopg import AsyncConnection

from hraccess.domain.entities import AuditEntry
from hraccess.domain.value_objects import AuditAction, audit_target_from_row


class PostgresAuditRepository:
    """Append-only audit log. Rows are never updated or deleted."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, entry: AuditEntry) -> AuditEntry:
        cur = await self._conn.execute(
            "INSERT INTO permission_audit_log (user_id, action, target_type, target_id, "
            "old_value, new_value, reason, action_by, action_at) "
            "VALUES (%s, %s, %s, %s, %s::jsonb, %s::jsonb, %s, %s, %s) RETURNING id",
            (
                entry.user_id,
                entry.action.value,
                entry.target.kind,
                entry.target.id,
                entry.old_value,
                entry.new_value,
                entry.reason,
                entry.action_by,
                entry.action_at,
            ),
        )
        r = await cur.fetchone()
        return replace(entry, id=r[0])

    async def list_since(
        self,
        since: datetime,
        *,
        user_id: int | None = None,
        limit: int = 1000,
    ) -> list[AuditEntry]:
        """Entries at or after since, newest first."""
        q = (
            "SELECT id, user_id, action, target_type, target_id, old_value::text, "
            "new_value::text, reason, action_by, action_at "
            "FROM permission_audit_log WHERE action_at >= %s"
        )
        params: list[object] = [since]
        if user_id is not None:
            q += " AND user_id = %s"
            params.append(user_id)
        q += " ORDER BY action_at DESC, id DESC LIMIT %s"
        params.append(limit)
        cur = await self._conn.execute(q, tuple(params))
        rows = await cur.fetchall()
        return [
            AuditEntry(
                id=r[0],
                user_id=r[1],
                action=AuditAction(r[2]),
                target=audit_target_from_row(r[3], r[4]),
                old_value=r[5],
                new_value=r[6],
                reason=r[7],
                action_by=r[8],
                action_at=r[9],
            )
            for r in rows
        ]
