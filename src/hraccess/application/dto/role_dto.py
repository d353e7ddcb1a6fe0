"""Role mutation DTOs."""

from dataclasses import dataclass, field

from hraccess.domain.entities import Role


@dataclass
class RoleCreateInput:
    """Input for creating a custom role."""

    name: str
    code: str
    description: str | None = None
    scope_department_id: int | None = None
    scope_company_id: int | None = None
    permission_ids: list[int] = field(default_factory=list)


@dataclass
class RoleUpdateInput:
    """Partial role update; None leaves the field unchanged."""

    name: str | None = None
    description: str | None = None
    active: bool | None = None
    permission_ids: list[int] | None = None


@dataclass(frozen=True)
class RoleSummary:
    """Active role with its active permission count and effective holder count."""

    role: Role
    permission_count: int
    user_count: int

    def as_dict(self) -> dict:
        return {
            **self.role.snapshot(),
            "created_at": self.role.created_at.isoformat(),
            "modified_at": self.role.modified_at.isoformat(),
            "permission_count": self.permission_count,
            "user_count": self.user_count,
        }
