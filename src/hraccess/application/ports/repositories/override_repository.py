"""User permission override repository port."""

from datetime import datetime
from typing import Protocol

from hraccess.domain.entities import UserPermissionOverride


class OverrideRepository(Protocol):
    """Port for per-user permission overrides."""

    async def get_by_id(self, override_id: int) -> UserPermissionOverride | None: ...

    async def get_active_for_pair(
        self, user_id: int, permission_id: int
    ) -> UserPermissionOverride | None: ...

    async def list_effective_for_user(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[UserPermissionOverride]: ...

    async def list_active_for_user(self, user_id: int) -> list[UserPermissionOverride]: ...

    async def create(self, override: UserPermissionOverride) -> UserPermissionOverride: ...

    async def update(self, override: UserPermissionOverride) -> None: ...
