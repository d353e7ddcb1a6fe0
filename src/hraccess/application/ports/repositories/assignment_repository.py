"""User role assignment repository port."""

from datetime import datetime
from typing import Protocol

from hraccess.application.dto.effective_permission_dto import RoleGrant
from hraccess.domain.entities import UserRoleAssignment


class AssignmentRepository(Protocol):
    """Port for user-role assignments."""

    async def get(self, user_id: int, role_id: int) -> UserRoleAssignment | None: ...

    async def list_effective_for_user(
        self, user_id: int, now: datetime
    ) -> list[UserRoleAssignment]: ...

    async def list_effective_for_role(
        self, role_id: int, now: datetime
    ) -> list[UserRoleAssignment]: ...

    async def create(self, assignment: UserRoleAssignment) -> UserRoleAssignment: ...

    async def update(self, assignment: UserRoleAssignment) -> None: ...

    async def list_role_grants(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[RoleGrant]: ...
