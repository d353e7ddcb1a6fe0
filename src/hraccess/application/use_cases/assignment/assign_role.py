"""Assign role use case."""

import logging
from dataclasses import replace
from datetime import datetime

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.ports import PermissionChecker
from hraccess.domain.entities import UserRoleAssignment
from hraccess.domain.exceptions import NotFound, PermissionDenied, ValidationError
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AssignmentTarget,
    AuditAction,
    PermissionCode,
    as_utc,
    utcnow,
)

logger = logging.getLogger(__name__)


class AssignRoleUseCase:
    """Assign role to user, reactivating or re-dating an existing assignment."""

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
        expiry_at: datetime | None = None,
        reason: str | None = None,
    ) -> UserRoleAssignment:
        """Assign role to user. At most one assignment row exists per (user, role)."""
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not assign roles")

        now = utcnow()
        if expiry_at is not None:
            expiry_at = as_utc(expiry_at)
            if expiry_at <= now:
                raise ValidationError("Expiry date must be in the future")

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user or not user.is_active:
                raise NotFound("User", user_id)
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role or not role.active:
                raise NotFound("Role", role_id)

            existing = await uow.assignments.get(user_id, role_id)
            old_value = existing.snapshot() if existing else None
            if existing is None:
                action = AuditAction.ROLE_ASSIGNED
                assignment = await uow.assignments.create(
                    UserRoleAssignment(
                        id=0,
                        user_id=user_id,
                        role_id=role_id,
                        assigned_at=now,
                        assigned_by=actor_id,
                        expiry_at=expiry_at,
                    )
                )
            elif not existing.active:
                action = AuditAction.ROLE_REASSIGNED
                assignment = replace(
                    existing,
                    active=True,
                    assigned_at=now,
                    assigned_by=actor_id,
                    expiry_at=expiry_at,
                )
                await uow.assignments.update(assignment)
            else:
                action = AuditAction.ROLE_ASSIGNMENT_UPDATED
                assignment = replace(existing, expiry_at=expiry_at, assigned_by=actor_id)
                await uow.assignments.update(assignment)

        logger.info(
            "Role %s (%s) assigned to user %s by user %s, expiry %s",
            role.id,
            role.code,
            user_id,
            actor_id,
            expiry_at,
        )
        await self._audit.record(
            user_id=user_id,
            action=action,
            target=AssignmentTarget(assignment.id),
            old_value=old_value,
            new_value={**assignment.snapshot(), "role_code": role.code},
            reason=reason,
            action_by=actor_id,
        )
        return assignment
