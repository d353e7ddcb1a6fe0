"""Role repository port."""

from datetime import datetime
from typing import Protocol

from hraccess.application.dto.role_dto import RoleSummary
from hraccess.domain.entities import Permission, Role, RolePermission


class RoleRepository(Protocol):
    """Port for roles and their permission edges."""

    async def get_by_id(self, role_id: int, for_update: bool = False) -> Role | None: ...

    async def get_by_code(self, code: str) -> Role | None: ...

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]: ...

    async def list_summaries(self, now: datetime) -> list[RoleSummary]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def list_active_permissions(self, role_id: int) -> list[Permission]: ...

    async def deactivate_all_edges(self, role_id: int) -> None: ...

    async def activate_edge(self, edge: RolePermission) -> None: ...
