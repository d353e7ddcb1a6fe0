"""Permission catalog repository port."""

from typing import Protocol

from hraccess.domain.entities import Module, Permission, PermissionType


class PermissionRepository(Protocol):
    """Port for catalog reads. Only active permissions (active module and type) are returned."""

    async def get_by_id(self, permission_id: int) -> Permission | None: ...

    async def get_by_key(self, module_code: str, permission_code: str) -> Permission | None: ...

    async def list_active(self) -> list[Permission]: ...

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]: ...

    async def list_modules(self) -> list[Module]: ...

    async def list_types(self) -> list[PermissionType]: ...
