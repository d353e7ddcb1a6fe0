"""Domain entities."""

from hraccess.domain.entities.assignment import UserRoleAssignment
from hraccess.domain.entities.audit_entry import AuditEntry
from hraccess.domain.entities.override import UserPermissionOverride
from hraccess.domain.entities.permission import Module, Permission, PermissionType
from hraccess.domain.entities.role import Role, RolePermission
from hraccess.domain.entities.user import User

__all__ = [
    "AuditEntry",
    "Module",
    "Permission",
    "PermissionType",
    "Role",
    "RolePermission",
    "User",
    "UserPermissionOverride",
    "UserRoleAssignment",
]
