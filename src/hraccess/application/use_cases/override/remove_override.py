"""Remove permission override use case."""

import logging
from dataclasses import replace

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.ports import PermissionChecker
from hraccess.domain.exceptions import NotFound, PermissionDenied
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AuditAction,
    OverrideTarget,
    PermissionCode,
)

logger = logging.getLogger(__name__)


class RemoveOverrideUseCase:
    """Deactivate a permission override."""

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
        override_id: int,
        reason: str | None = None,
    ) -> None:
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not manage permission overrides")

        async with self._uow_factory() as uow:
            existing = await uow.overrides.get_by_id(override_id)
            if not existing or not existing.active:
                raise NotFound("Override", override_id)
            removed = replace(existing, active=False)
            await uow.overrides.update(removed)

        logger.info(
            "Override %s for user %s removed by user %s",
            override_id,
            existing.user_id,
            actor_id,
        )
        await self._audit.record(
            user_id=existing.user_id,
            action=AuditAction.PERMISSION_OVERRIDE_DELETED,
            target=OverrideTarget(override_id),
            old_value=existing.snapshot(),
            new_value=removed.snapshot(),
            reason=reason,
            action_by=actor_id,
        )
