"""Audit entry entity - append-only record of an administrative mutation."""

from dataclasses import dataclass
from datetime import datetime

from hraccess.domain.value_objects import AuditAction, AuditTarget


@dataclass(frozen=True)
class AuditEntry:
    """Who changed what, from which value to which value, and why."""

    user_id: int
    action: AuditAction
    target: AuditTarget
    action_at: datetime
    old_value: str | None = None
    new_value: str | None = None
    reason: str | None = None
    action_by: int | None = None
    id: int | None = None
