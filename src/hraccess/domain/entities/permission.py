"""Permission entity - one catalog entry (module x permission type)."""

from dataclasses import dataclass

from hraccess.domain.value_objects import PermissionKey


@dataclass
class Module:
    """Functional area of the system, e.g. EMPLOYEES."""

    id: int
    code: str
    name: str
    display_order: int = 0
    description: str | None = None
    active: bool = True


@dataclass
class PermissionType:
    """Action kind, e.g. R (Read)."""

    id: int
    code: str
    name: str
    description: str | None = None
    active: bool = True


@dataclass
class Permission:
    """Permission - module code paired with permission type code."""

    id: int
    module_code: str
    module_name: str
    permission_code: str
    permission_name: str
    active: bool = True
    description: str | None = None

    @property
    def key(self) -> PermissionKey:
        return PermissionKey(self.module_code, self.permission_code)
