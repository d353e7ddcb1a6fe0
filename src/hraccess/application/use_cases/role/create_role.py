"""Create role use case."""

import logging

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.dto.role_dto import RoleCreateInput
from hraccess.application.ports import PermissionChecker
from hraccess.domain.entities import Role, RolePermission
from hraccess.domain.exceptions import DuplicateRoleCode, PermissionDenied, ValidationError
from hraccess.domain.value_objects import (
    USER_MANAGEMENT_MODULE,
    AuditAction,
    PermissionCode,
    RoleTarget,
    utcnow,
)

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Create a custom role with an initial permission set."""

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
        data: RoleCreateInput,
        reason: str | None = None,
    ) -> Role:
        """Create role. Codes are unique across active and inactive roles."""
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.UPDATE
        )
        if not allowed:
            raise PermissionDenied("User may not manage roles")

        name = (data.name or "").strip()
        code = (data.code or "").strip().upper()
        if not name or not code:
            raise ValidationError("Role name and code are required")

        now = utcnow()
        async with self._uow_factory() as uow:
            if await uow.roles.get_by_code(code):
                raise DuplicateRoleCode(f"Role code already exists: {code}")

            role = await uow.roles.create(
                Role(
                    id=0,
                    name=name,
                    code=code,
                    description=data.description,
                    is_system_role=False,
                    scope_department_id=data.scope_department_id,
                    scope_company_id=data.scope_company_id,
                    active=True,
                    created_at=now,
                    modified_at=now,
                    modified_by=actor_id,
                )
            )

            valid = await uow.permissions.list_by_ids(sorted(set(data.permission_ids)))
            invalid = set(data.permission_ids) - {p.id for p in valid}
            if invalid:
                logger.warning(
                    "Ignoring unknown or inactive permission ids for role %s: %s",
                    code,
                    sorted(invalid),
                )
            for permission in valid:
                await uow.roles.activate_edge(
                    RolePermission(
                        role_id=role.id,
                        permission_id=permission.id,
                        granted_at=now,
                        granted_by=actor_id,
                    )
                )
            permission_ids = sorted(p.id for p in valid)

        logger.info("Role %s (%s) created by user %s", role.id, role.code, actor_id)
        await self._audit.record(
            user_id=actor_id,
            action=AuditAction.ROLE_CREATED,
            target=RoleTarget(role.id),
            new_value={"role": role.snapshot(), "permission_ids": permission_ids},
            reason=reason,
            action_by=actor_id,
        )
        return role
