"""Permission checker implementation - the authorization resolution engine.

Decision precedence, each step short-circuiting:

1. user missing or inactive            -> deny  (UserUnavailable)
2. user is a system administrator       -> grant (SystemAdmin)
3. permission not in the active catalog -> deny  (PermissionNotFound)
4. effective deny override              -> deny  (DenyOverride)
5. effective grant override             -> grant (GrantOverride)
6. effective role assignment with edge  -> grant (RoleGrant)
7. otherwise                            -> deny  (NoPermissionFound)

Every read of one decision happens inside a single snapshot unit of work.
Absence of data maps to deny; store failures propagate as StoreUnavailable.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from hraccess.application.dto.decision_dto import PermissionDecision
from hraccess.domain.value_objects import DecisionReason, utcnow

logger = logging.getLogger(__name__)


class HRAccessPermissionChecker:
    """Resolves (user, module, permission) to a decision with its evidence trail."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def has_permission(
        self, user_id: int, module_code: str, permission_code: str
    ) -> bool:
        """True if user may perform permission_code on module_code right now."""
        decision = await self.check_permission(user_id, module_code, permission_code)
        return decision.granted

    async def check_permission(
        self, user_id: int, module_code: str, permission_code: str
    ) -> PermissionDecision:
        """Same algorithm as has_permission, returning reason code and sources."""
        decision = await self._resolve(user_id, module_code, permission_code)
        logger.debug(
            "Permission %s:%s for user %s -> %s (%s)",
            module_code,
            permission_code,
            user_id,
            "granted" if decision.granted else "denied",
            decision.reason,
        )
        return decision

    async def _resolve(
        self, user_id: int, module_code: str, permission_code: str
    ) -> PermissionDecision:
        now = self._clock()
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None or not user.is_active:
                return PermissionDecision(False, DecisionReason.USER_UNAVAILABLE)

            if user.is_system_admin:
                return PermissionDecision(
                    True, DecisionReason.SYSTEM_ADMIN, (DecisionReason.SYSTEM_ADMIN.value,)
                )

            permission = await uow.permissions.get_by_key(module_code, permission_code)
            if permission is None or not permission.active:
                return PermissionDecision(False, DecisionReason.PERMISSION_NOT_FOUND)

            overrides = [
                o
                for o in await uow.overrides.list_effective_for_user(
                    user_id, now, permission_id=permission.id
                )
                if o.is_effective(now)
            ]
            if any(not o.is_granted for o in overrides):
                return PermissionDecision(
                    False, DecisionReason.DENY_OVERRIDE, (DecisionReason.DENY_OVERRIDE.value,)
                )
            if overrides:
                return PermissionDecision(
                    True, DecisionReason.GRANT_OVERRIDE, (DecisionReason.GRANT_OVERRIDE.value,)
                )

            grants = await uow.assignments.list_role_grants(
                user_id, now, permission_id=permission.id
            )
            if grants:
                roles = tuple(sorted({g.role_name for g in grants}))
                return PermissionDecision(True, DecisionReason.ROLE_GRANT, roles)

        return PermissionDecision(False, DecisionReason.NO_PERMISSION_FOUND)
