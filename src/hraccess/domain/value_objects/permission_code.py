"""Standard permission type codes."""

from enum import StrEnum


class PermissionCode(StrEnum):
    """Action codes a permission type can carry. Custom codes are also allowed."""

    CREATE = "C"
    READ = "R"
    UPDATE = "U"
    DELETE = "D"
    APPROVE = "A"
    MANAGE = "M"


# Module guarding the administrative surface (roles, assignments, overrides, audit).
USER_MANAGEMENT_MODULE = "USER_MANAGEMENT"
