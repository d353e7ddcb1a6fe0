"""Audit target - which record an audit entry is about."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class RoleTarget:
    """Audit entry about a role (create, update, delete)."""

    id: int
    kind: ClassVar[str] = "ROLE"


@dataclass(frozen=True)
class OverrideTarget:
    """Audit entry about a user permission override."""

    id: int
    kind: ClassVar[str] = "OVERRIDE"


@dataclass(frozen=True)
class AssignmentTarget:
    """Audit entry about a user role assignment."""

    id: int
    kind: ClassVar[str] = "ASSIGNMENT"


AuditTarget = RoleTarget | OverrideTarget | AssignmentTarget

_TARGETS: dict[str, type[RoleTarget] | type[OverrideTarget] | type[AssignmentTarget]] = {
    RoleTarget.kind: RoleTarget,
    OverrideTarget.kind: OverrideTarget,
    AssignmentTarget.kind: AssignmentTarget,
}


def audit_target_from_row(target_type: str, target_id: int) -> AuditTarget:
    """Rebuild a target from its persisted (type, id) pair."""
    try:
        target_cls = _TARGETS[target_type]
    except KeyError:
        raise ValueError(f"Unknown audit target type: {target_type!r}") from None
    return target_cls(id=target_id)
