"""Get audit log use case."""

from datetime import timedelta

from hraccess.application.ports import PermissionChecker
from hraccess.domain.entities import AuditEntry
from hraccess.domain.exceptions import PermissionDenied, ValidationError
from hraccess.domain.value_objects import USER_MANAGEMENT_MODULE, PermissionCode, utcnow

MAX_SINCE_DAYS = 3650


class GetAuditLogUseCase:
    """Recent audit entries, newest first, optionally for one subject user."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        max_rows: int = 1000,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._max_rows = max_rows

    async def execute(
        self,
        actor_id: int,
        user_id: int | None = None,
        since_days: int = 30,
    ) -> list[AuditEntry]:
        allowed = await self._permission_checker.has_permission(
            actor_id, USER_MANAGEMENT_MODULE, PermissionCode.READ
        )
        if not allowed:
            raise PermissionDenied("User may not read the audit log")
        if not 1 <= since_days <= MAX_SINCE_DAYS:
            raise ValidationError(f"since_days must be between 1 and {MAX_SINCE_DAYS}")

        since = utcnow() - timedelta(days=since_days)
        async with self._uow_factory() as uow:
            return await uow.audit.list_since(since, user_id=user_id, limit=self._max_rows)
