"""Set permission override use case."""

import logging
from dataclasses import replace
from datetime import datetime

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.ports import PermissionChecker
from hraccess.domain.entities import UserPermissionOverride
from hraccess.domain.exceptions import NotFound, PermissionDenied, ValidationError
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AuditAction,
    OverrideTarget,
    PermissionCode,
    as_utc,
    utcnow,
)

logger = logging.getLogger(__name__)


class SetOverrideUseCase:
    """Grant or deny one permission to one user, bypassing roles."""

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
        permission_id: int,
        is_granted: bool,
        reason: str,
        expiry_at: datetime | None = None,
    ) -> UserPermissionOverride:
        """Create the override, or update the user's active one for this permission.

        An expired but still active row is updated in place; the pair never
        holds two active overrides.
        """
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not manage permission overrides")

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Override reason is required")
        now = utcnow()
        if expiry_at is not None:
            expiry_at = as_utc(expiry_at)
            if expiry_at <= now:
                raise ValidationError("Expiry date must be in the future")

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user or not user.is_active:
                raise NotFound("User", user_id)
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)

            existing = await uow.overrides.get_active_for_pair(user_id, permission_id)
            old_value = existing.snapshot() if existing else None
            if existing:
                action = AuditAction.PERMISSION_OVERRIDE_UPDATED
                override = replace(
                    existing,
                    is_granted=is_granted,
                    reason=reason,
                    expiry_at=expiry_at,
                    created_at=now,
                    created_by=actor_id,
                )
                await uow.overrides.update(override)
            else:
                action = AuditAction.PERMISSION_OVERRIDE_CREATED
                override = await uow.overrides.create(
                    UserPermissionOverride(
                        id=0,
                        user_id=user_id,
                        permission_id=permission_id,
                        is_granted=is_granted,
                        reason=reason,
                        created_at=now,
                        created_by=actor_id,
                        expiry_at=expiry_at,
                    )
                )

        logger.info(
            "%s override on %s for user %s set by user %s",
            "Grant" if is_granted else "Deny",
            permission.key,
            user_id,
            actor_id,
        )
        await self._audit.record(
            user_id=user_id,
            action=action,
            target=OverrideTarget(override.id),
            old_value=old_value,
            new_value={**override.snapshot(), "permission": str(permission.key)},
            reason=reason,
            action_by=actor_id,
        )
        return override
