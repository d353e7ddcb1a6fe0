"""Effective permission listing - every permission a user currently holds, with provenance."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from hraccess.application.dto.effective_permission_dto import EffectivePermission, RoleGrant
from hraccess.domain.entities import Permission, UserPermissionOverride
from hraccess.domain.value_objects import PermissionSource, utcnow

logger = logging.getLogger(__name__)


def _row(
    permission: Permission,
    source: PermissionSource,
    role_name: str | None = None,
    effective_at: datetime | None = None,
    expiry_at: datetime | None = None,
) -> EffectivePermission:
    return EffectivePermission(
        permission_id=permission.id,
        module_code=permission.module_code,
        module_name=permission.module_name,
        permission_code=permission.permission_code,
        permission_name=permission.permission_name,
        source=source,
        role_name=role_name,
        effective_at=effective_at,
        expiry_at=expiry_at,
    )


def _sort_key(row: EffectivePermission) -> tuple[str, str, str]:
    return (row.module_code, row.permission_code, row.role_name or "")


def aggregate_effective_permissions(
    catalog: Iterable[Permission],
    overrides: Iterable[UserPermissionOverride],
    grants: Iterable[RoleGrant],
) -> list[EffectivePermission]:
    """Merge override and role provenance for a non-admin user.

    A deny override hides the permission entirely. A grant override yields a
    single Override row and hides role rows for the same permission. Otherwise
    there is one Role row per contributing role.
    """
    by_id = {p.id: p for p in catalog}
    overrides = list(overrides)
    denied = {o.permission_id for o in overrides if not o.is_granted}
    granted: dict[int, UserPermissionOverride] = {}
    for o in overrides:
        if o.is_granted and o.permission_id not in denied:
            granted.setdefault(o.permission_id, o)

    rows: list[EffectivePermission] = []
    for permission_id, o in granted.items():
        permission = by_id.get(permission_id)
        if permission is None:
            continue
        rows.append(
            _row(
                permission,
                PermissionSource.OVERRIDE,
                effective_at=o.created_at,
                expiry_at=o.expiry_at,
            )
        )

    seen: set[tuple[int, int]] = set()
    for g in grants:
        if g.permission_id in denied or g.permission_id in granted:
            continue
        if (g.role_id, g.permission_id) in seen:
            continue
        permission = by_id.get(g.permission_id)
        if permission is None:
            continue
        seen.add((g.role_id, g.permission_id))
        rows.append(
            _row(
                permission,
                PermissionSource.ROLE,
                role_name=g.role_name,
                effective_at=g.assigned_at,
                expiry_at=g.expiry_at,
            )
        )

    rows.sort(key=_sort_key)
    return rows


class HRAccessEffectivePermissions:
    """Lists a user's currently granted permissions for display."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def list_effective_permissions(self, user_id: int) -> list[EffectivePermission]:
        """Admin: whole active catalog. Others: override and role grants, denies suppressed."""
        now = self._clock()
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None or not user.is_active:
                return []

            catalog = await uow.permissions.list_active()
            if user.is_system_admin:
                rows = [_row(p, PermissionSource.SYSTEM_ADMIN) for p in catalog]
                rows.sort(key=_sort_key)
                return rows

            overrides = [
                o
                for o in await uow.overrides.list_effective_for_user(user_id, now)
                if o.is_effective(now)
            ]
            grants = await uow.assignments.list_role_grants(user_id, now)

        rows = aggregate_effective_permissions(catalog, overrides, grants)
        logger.debug("User %s has %d effective permission rows", user_id, len(rows))
        return rows
