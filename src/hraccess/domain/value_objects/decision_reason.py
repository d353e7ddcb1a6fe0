"""Reason codes attached to a permission decision."""

from enum import StrEnum


class DecisionReason(StrEnum):
    """Why the resolution engine granted or denied, in precedence order."""

    USER_UNAVAILABLE = "UserUnavailable"
    PERMISSION_NOT_FOUND = "PermissionNotFound"
    SYSTEM_ADMIN = "SystemAdmin"
    DENY_OVERRIDE = "DenyOverride"
    GRANT_OVERRIDE = "GrantOverride"
    ROLE_GRANT = "RoleGrant"
    NO_PERMISSION_FOUND = "NoPermissionFound"
