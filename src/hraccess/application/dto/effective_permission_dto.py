"""Effective permission listing DTOs."""

from dataclasses import dataclass
from datetime import datetime

from hraccess.domain.value_objects import PermissionSource


@dataclass(frozen=True)
class RoleGrant:
    """One permission reachable through one effective role assignment."""

    role_id: int
    role_name: str
    permission_id: int
    assigned_at: datetime
    expiry_at: datetime | None = None


@dataclass(frozen=True)
class EffectivePermission:
    """A permission currently granted to a user, with its provenance."""

    permission_id: int
    module_code: str
    module_name: str
    permission_code: str
    permission_name: str
    source: PermissionSource
    role_name: str | None = None
    effective_at: datetime | None = None
    expiry_at: datetime | None = None

    def as_dict(self) -> dict:
        return {
            "permission_id": self.permission_id,
            "module_code": self.module_code,
            "module_name": self.module_name,
            "permission_code": self.permission_code,
            "permission_name": self.permission_name,
            "source": self.source.value,
            "role_name": self.role_name,
            "effective_at": self.effective_at.isoformat() if self.effective_at else None,
            "expiry_at": self.expiry_at.isoformat() if self.expiry_at else None,
        }
