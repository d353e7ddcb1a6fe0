"""Update role use case."""

import logging
from dataclasses import replace

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.dto.role_dto import RoleUpdateInput
from hraccess.application.ports import PermissionChecker
from hraccess.domain.entities import Role, RolePermission
from hraccess.domain.exceptions import (
    NotFound,
    PermissionDenied,
    RoleInUse,
    SystemRoleImmutable,
    ValidationError,
)
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AuditAction,
    PermissionCode,
    RoleTarget,
    utcnow,
)

logger = logging.getLogger(__name__)


class UpdateRoleUseCase:
    """Update role attributes and optionally replace its permission set."""

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
        role_id: int,
        data: RoleUpdateInput,
        reason: str | None = None,
    ) -> Role:
        """Apply changes in one transaction.

        Permission set replacement deactivates every existing edge, then
        reactivates or inserts the requested ones, so prior grants stay on
        record.
        """
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not manage roles")

        if data.name is not None and not data.name.strip():
            raise ValidationError("Role name cannot be blank")

        now = utcnow()
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role or not role.active:
                raise NotFound("Role", role_id)
            if role.is_system_role:
                raise SystemRoleImmutable(f"Cannot modify system role {role.code}")

            if data.active is False:
                in_use = await uow.assignments.list_effective_for_role(role_id, now)
                if in_use:
                    raise RoleInUse(
                        f"Role {role.code} is assigned to {len(in_use)} active user(s)"
                    )

            old_permissions = sorted(
                p.id for p in await uow.roles.list_active_permissions(role_id)
            )
            old_role = role.snapshot()

            updated = replace(
                role,
                name=data.name.strip() if data.name is not None else role.name,
                description=(
                    data.description if data.description is not None else role.description
                ),
                active=data.active if data.active is not None else role.active,
                modified_at=now,
                modified_by=actor_id,
            )
            await uow.roles.update(updated)

            new_permissions = old_permissions
            if data.permission_ids is not None:
                requested = set(data.permission_ids)
                valid = await uow.permissions.list_by_ids(sorted(requested))
                invalid = requested - {p.id for p in valid}
                if invalid:
                    logger.warning(
                        "Ignoring unknown or inactive permission ids for role %s: %s",
                        role.code,
                        sorted(invalid),
                    )
                await uow.roles.deactivate_all_edges(role_id)
                for permission in valid:
                    await uow.roles.activate_edge(
                        RolePermission(
                            role_id=role_id,
                            permission_id=permission.id,
                            granted_at=now,
                            granted_by=actor_id,
                        )
                    )
                new_permissions = sorted(p.id for p in valid)

        logger.info(
            "Role %s updated by user %s (%d -> %d permissions)",
            role_id,
            actor_id,
            len(old_permissions),
            len(new_permissions),
        )
        await self._audit.record(
            user_id=actor_id,
            action=AuditAction.ROLE_UPDATED,
            target=RoleTarget(role_id),
            old_value={"role": old_role, "permission_ids": old_permissions},
            new_value={"role": updated.snapshot(), "permission_ids": new_permissions},
            reason=reason,
            action_by=actor_id,
        )
        return updated
