"""Domain exceptions."""


class HRAccessError(Exception):
    """Base exception for hraccess."""

    code = "HRAccessError"


class PermissionDenied(HRAccessError):
    """Actor does not have permission for the requested administrative action."""

    code = "PermissionDenied"


class NotFound(HRAccessError):
    """Requested resource was not found."""

    code = "NotFound"

    def __init__(self, kind: str, ident: object) -> None:
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class ValidationError(HRAccessError):
    """Validation failed for input data."""

    code = "ValidationError"


class SystemRoleImmutable(HRAccessError):
    """System roles reject update and delete."""

    code = "SystemRoleImmutable"


class RoleInUse(HRAccessError):
    """Role still has effective user assignments."""

    code = "RoleInUse"


class DuplicateRoleCode(HRAccessError):
    """Role code is already taken by another role (active or not)."""

    code = "DuplicateRoleCode"


class StoreUnavailable(HRAccessError):
    """Backing store could not be reached or failed mid-operation."""

    code = "StoreUnavailable"


class ConcurrentChange(HRAccessError):
    """Another request created the same assignment or override first."""

    code = "ConcurrentChange"
