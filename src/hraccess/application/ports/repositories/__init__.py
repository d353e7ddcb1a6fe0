"""Repository ports."""

from hraccess.application.ports.repositories.assignment_repository import (
    AssignmentRepository,
)
from hraccess.application.ports.repositories.audit_repository import AuditRepository
from hraccess.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from hraccess.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from hraccess.application.ports.repositories.role_repository import RoleRepository
from hraccess.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "AssignmentRepository",
    "AuditRepository",
    "OverrideRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
