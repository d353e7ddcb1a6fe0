"""Administrative actions recorded in the audit log."""

from enum import StrEnum


class AuditAction(StrEnum):
    """Mutations that change the decision surface."""

    ROLE_CREATED = "ROLE_CREATED"
    ROLE_UPDATED = "ROLE_UPDATED"
    ROLE_DELETED = "ROLE_DELETED"
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_REASSIGNED = "ROLE_REASSIGNED"
    ROLE_ASSIGNMENT_UPDATED = "ROLE_ASSIGNMENT_UPDATED"
    ROLE_REMOVED = "ROLE_REMOVED"
    PERMISSION_OVERRIDE_CREATED = "PERMISSION_OVERRIDE_CREATED"
    PERMISSION_OVERRIDE_UPDATED = "PERMISSION_OVERRIDE_UPDATED"
    PERMISSION_OVERRIDE_DELETED = "PERMISSION_OVERRIDE_DELETED"
