"""Role entity and its permission grant edges."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    """Named bundle of permissions. System roles are immutable."""

    id: int
    name: str
    code: str
    created_at: datetime
    modified_at: datetime
    description: str | None = None
    is_system_role: bool = False
    scope_department_id: int | None = None
    scope_company_id: int | None = None
    active: bool = True
    modified_by: int | None = None

    def snapshot(self) -> dict:
        """Serializable view used for audit old/new values."""
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "is_system_role": self.is_system_role,
            "scope_department_id": self.scope_department_id,
            "scope_company_id": self.scope_company_id,
            "active": self.active,
        }


@dataclass
class RolePermission:
    """Soft-deletable grant edge between a role and a permission."""

    role_id: int
    permission_id: int
    granted_at: datetime
    granted_by: int | None = None
    active: bool = True
