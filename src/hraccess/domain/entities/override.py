"""User permission override entity."""

from dataclasses import dataclass
from datetime import datetime

from hraccess.domain.value_objects import is_effective


@dataclass
class UserPermissionOverride:
    """Per-user grant or deny of one permission, reasoned and optionally time-boxed."""

    id: int
    user_id: int
    permission_id: int
    is_granted: bool
    reason: str
    created_at: datetime
    created_by: int | None = None
    expiry_at: datetime | None = None
    active: bool = True

    def is_effective(self, now: datetime) -> bool:
        return is_effective(self.active, self.expiry_at, now)

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "permission_id": self.permission_id,
            "is_granted": self.is_granted,
            "reason": self.reason,
            "created_at": self.created_at.isoformat(),
            "created_by": self.created_by,
            "expiry_at": self.expiry_at.isoformat() if self.expiry_at else None,
            "active": self.active,
        }
