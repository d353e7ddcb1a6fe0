"""Remove role use case."""

import logging
from dataclasses import replace

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.ports import PermissionChecker
from hraccess.domain.exceptions import NotFound, PermissionDenied
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AssignmentTarget,
    AuditAction,
    PermissionCode,
)

logger = logging.getLogger(__name__)


class RemoveRoleUseCase:
    """Deactivate a user's role assignment. History is kept."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        audit_recorder: AuditRecorder,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._audit = audit_recorder

    async def execute(
        self,
        actor_id: int,
        user_id: int,
        role_id: int,
        reason: str | None = None,
    ) -> None:
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not remove roles")

        async with self._uow_factory() as uow:
            existing = await uow.assignments.get(user_id, role_id)
            if not existing or not existing.active:
                raise NotFound("Assignment", f"user {user_id}, role {role_id}")
            removed = replace(existing, active=False)
            await uow.assignments.update(removed)

        logger.info("Role %s removed from user %s by user %s", role_id, user_id, actor_id)
        await self._audit.record(
            user_id=user_id,
            action=AuditAction.ROLE_REMOVED,
            target=AssignmentTarget(existing.id),
            old_value=existing.snapshot(),
            new_value=removed.snapshot(),
            reason=reason,
            action_by=actor_id,
        )
