"""Domain value objects."""

from hraccess.domain.value_objects.audit_action import AuditAction
from hraccess.domain.value_objects.audit_target import (
    AssignmentTarget,
    AuditTarget,
    OverrideTarget,
    RoleTarget,
    audit_target_from_row,
)
from hraccess.domain.value_objects.decision_reason import DecisionReason
from hraccess.domain.value_objects.effectiveness import as_utc, is_effective, utcnow
from hraccess.domain.value_objects.permission_code import (
    USER_MANAGEMENT_MODULE,
    PermissionCode,
)
from hraccess.domain.value_objects.permission_key import PermissionKey
from hraccess.domain.value_objects.permission_source import PermissionSource

__all__ = [
    "USER_MANAGEMENT_MODULE",
    "AssignmentTarget",
    "AuditAction",
    "AuditTarget",
    "DecisionReason",
    "OverrideTarget",
    "PermissionCode",
    "PermissionKey",
    "PermissionSource",
    "RoleTarget",
    "as_utc",
    "audit_target_from_row",
    "is_effective",
    "utcnow",
]
