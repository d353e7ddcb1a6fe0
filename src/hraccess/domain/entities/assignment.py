"""User role assignment entity."""

from dataclasses import dataclass
from datetime import datetime

from hraccess.domain.value_objects import is_effective


@dataclass
class UserRoleAssignment:
    """User holds role from assigned_at, optionally until expiry_at."""

    id: int
    user_id: int
    role_id: int
    assigned_at: datetime
    assigned_by: int | None = None
    expiry_at: datetime | None = None
    active: bool = True

    def is_effective(self, now: datetime) -> bool:
        return is_effective(self.active, self.expiry_at, now)

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "role_id": self.role_id,
            "assigned_at": self.assigned_at.isoformat(),
            "assigned_by": self.assigned_by,
            "expiry_at": self.expiry_at.isoformat() if self.expiry_at else None,
            "active": self.active,
        }
