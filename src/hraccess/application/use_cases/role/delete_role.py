"""Delete role use case."""

import logging
from dataclasses import replace

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.ports import PermissionChecker
from hraccess.domain.exceptions import (
    NotFound,
    PermissionDenied,
    RoleInUse,
    SystemRoleImmutable,
)
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AuditAction,
    PermissionCode,
    RoleTarget,
    utcnow,
)

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Soft-delete a custom role that nobody effectively holds."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        audit_recorder: AuditRecorder,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._audit = audit_recorder

    async def execute(self, actor_id: int, role_id: int, reason: str | None = None) -> None:
        """Deactivate role and its permission edges. Assignments must be removed first."""
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not manage roles")

        now = utcnow()
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role or not role.active:
                raise NotFound("Role", role_id)
            if role.is_system_role:
                raise SystemRoleImmutable(f"Cannot delete system role {role.code}")

            in_use = await uow.assignments.list_effective_for_role(role_id, now)
            if in_use:
                raise RoleInUse(
                    f"Role {role.code} is assigned to {len(in_use)} active user(s)"
                )

            permission_ids = sorted(
                p.id for p in await uow.roles.list_active_permissions(role_id)
            )
            deleted = replace(role, active=False, modified_at=now, modified_by=actor_id)
            await uow.roles.update(deleted)
            await uow.roles.deactivate_all_edges(role_id)

        logger.info("Role %s (%s) deleted by user %s", role_id, role.code, actor_id)
        await self._audit.record(
            user_id=actor_id,
            action=AuditAction.ROLE_DELETED,
            target=RoleTarget(role_id),
            old_value={"role": role.snapshot(), "permission_ids": permission_ids},
            new_value={"role": deleted.snapshot(), "permission_ids": []},
            reason=reason,
            action_by=actor_id,
        )
