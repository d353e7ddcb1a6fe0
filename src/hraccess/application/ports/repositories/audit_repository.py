"""Audit log repository port."""

from datetime import datetime
from typing import Protocol

from hraccess.domain.entities import AuditEntry


class AuditRepository(Protocol):
    """Port for the append-only audit log."""

    async def append(self, entry: AuditEntry) -> AuditEntry: ...

    async def list_since(
        self,
        since: datetime,
        *,
        user_id: int | None = None,
        limit: int = 1000,
    ) -> list[AuditEntry]: ...
