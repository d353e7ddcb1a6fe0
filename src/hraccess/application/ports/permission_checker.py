"""Permission checker port - the resolution engine seen by its callers."""

from typing import Protocol

from hraccess.application.dto.decision_dto import PermissionDecision
from hraccess.application.dto.effective_permission_dto import EffectivePermission


class PermissionChecker(Protocol):
    """Port for deciding whether a user may perform an action on a module."""

    async def has_permission(
        self, user_id: int, module_code: str, permission_code: str
    ) -> bool: ...

    async def check_permission(
        self, user_id: int, module_code: str, permission_code: str
    ) -> PermissionDecision: ...


class EffectivePermissionReader(Protocol):
    """Port for listing every permission currently granted to a user."""

    async def list_effective_permissions(self, user_id: int) -> list[EffectivePermission]: ...
