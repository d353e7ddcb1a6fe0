"""Unit tests for effective permission listing."""

from datetime import timedelta

import pytest

from hraccess.domain.entities import User
from hraccess.domain.value_objects import PermissionSource
from hraccess.infrastructure.permission.effective_permissions import (
    HRAccessEffectivePermissions,
    aggregate_effective_permissions,
)

from tests.conftest import NOW, FakeUnitOfWork, make_uow_factory


@pytest.fixture
def uow() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    emp_r = uow.permissions.add("EMPLOYEES", "R")
    emp_u = uow.permissions.add("EMPLOYEES", "U")
    uow.permissions.add("DEPARTMENTS", "R")
    uow.permissions.add("LEGACY", "R", active=False)
    uow.roles.add("Viewer", permissions=[emp_r])
    uow.roles.add("Editor", permissions=[emp_r, emp_u])
    uow.users.add(User(id=1, username="alice"))
    uow.users.add(User(id=2, username="root", is_system_admin=True))
    uow.users.add(User(id=3, username="gone", is_active=False))
    return uow


@pytest.fixture
def listing(uow: FakeUnitOfWork) -> HRAccessEffectivePermissions:
    return HRAccessEffectivePermissions(make_uow_factory(uow), clock=lambda: NOW)


def _ids(uow: FakeUnitOfWork) -> dict[str, int]:
    return {str(p.key): p.id for p in uow.permissions._by_id.values()}


def _role_id(uow: FakeUnitOfWork, name: str) -> int:
    return next(r.id for r in uow.roles._by_id.values() if r.name == name)


@pytest.mark.asyncio
async def test_inactive_and_unknown_users_get_empty_list(
    listing: HRAccessEffectivePermissions,
) -> None:
    assert await listing.list_effective_permissions(3) == []
    assert await listing.list_effective_permissions(404) == []


@pytest.mark.asyncio
async def test_admin_gets_whole_active_catalog(listing: HRAccessEffectivePermissions) -> None:
    rows = await listing.list_effective_permissions(2)
    assert [(r.module_code, r.permission_code) for r in rows] == [
        ("DEPARTMENTS", "R"),
        ("EMPLOYEES", "R"),
        ("EMPLOYEES", "U"),
    ]
    assert {r.source for r in rows} == {PermissionSource.SYSTEM_ADMIN}


@pytest.mark.asyncio
async def test_one_row_per_contributing_role(
    uow: FakeUnitOfWork, listing: HRAccessEffectivePermissions
) -> None:
    uow.assignments.add(1, _role_id(uow, "Viewer"))
    uow.assignments.add(1, _role_id(uow, "Editor"))
    rows = await listing.list_effective_permissions(1)
    assert [(str(r.permission_code), r.role_name) for r in rows] == [
        ("R", "Editor"),
        ("R", "Viewer"),
        ("U", "Editor"),
    ]
    assert all(r.source == PermissionSource.ROLE for r in rows)


@pytest.mark.asyncio
async def test_deny_override_hides_permission(
    uow: FakeUnitOfWork, listing: HRAccessEffectivePermissions
) -> None:
    uow.assignments.add(1, _role_id(uow, "Editor"))
    uow.overrides.add(1, _ids(uow)["EMPLOYEES:R"], False)
    rows = await listing.list_effective_permissions(1)
    assert [str(r.permission_code) for r in rows] == ["U"]


@pytest.mark.asyncio
async def test_grant_override_yields_single_override_row(
    uow: FakeUnitOfWork, listing: HRAccessEffectivePermissions
) -> None:
    uow.assignments.add(1, _role_id(uow, "Viewer"))
    override = uow.overrides.add(
        1, _ids(uow)["EMPLOYEES:R"], True, expiry_at=NOW + timedelta(days=5)
    )
    rows = await listing.list_effective_permissions(1)
    assert len(rows) == 1
    assert rows[0].source == PermissionSource.OVERRIDE
    assert rows[0].role_name is None
    assert rows[0].effective_at == override.created_at
    assert rows[0].expiry_at == override.expiry_at


@pytest.mark.asyncio
async def test_expired_assignment_not_listed(
    uow: FakeUnitOfWork, listing: HRAccessEffectivePermissions
) -> None:
    uow.assignments.add(1, _role_id(uow, "Viewer"), expiry_at=NOW - timedelta(hours=1))
    assert await listing.list_effective_permissions(1) == []


@pytest.mark.asyncio
async def test_listing_agrees_with_checker(
    uow: FakeUnitOfWork, listing: HRAccessEffectivePermissions
) -> None:
    from hraccess.infrastructure.permission.permission_checker import HRAccessPermissionChecker

    checker = HRAccessPermissionChecker(make_uow_factory(uow), clock=lambda: NOW)
    uow.assignments.add(1, _role_id(uow, "Editor"))
    ids = _ids(uow)
    uow.overrides.add(1, ids["EMPLOYEES:U"], False)
    uow.overrides.add(1, ids["DEPARTMENTS:R"], True)

    listed = {(r.module_code, r.permission_code) for r in await listing.list_effective_permissions(1)}
    for p in await uow.permissions.list_active():
        granted = await checker.has_permission(1, p.module_code, p.permission_code)
        assert granted is ((p.module_code, p.permission_code) in listed)


def test_aggregate_skips_permissions_outside_catalog(uow: FakeUnitOfWork) -> None:
    from hraccess.application.dto.effective_permission_dto import RoleGrant

    grants = [RoleGrant(role_id=1, role_name="Viewer", permission_id=999, assigned_at=NOW)]
    assert aggregate_effective_permissions([], [], grants) == []


def test_effective_permission_as_dict_serializes_times(uow: FakeUnitOfWork) -> None:
    from hraccess.application.dto.effective_permission_dto import RoleGrant

    catalog = list(uow.permissions._by_id.values())
    emp_r = next(p for p in catalog if str(p.key) == "EMPLOYEES:R")
    grants = [RoleGrant(role_id=1, role_name="Viewer", permission_id=emp_r.id, assigned_at=NOW)]
    (row,) = aggregate_effective_permissions(catalog, [], grants)
    assert row.as_dict()["effective_at"] == NOW.isoformat()
    assert row.as_dict()["source"] == "Role"
    assert row.as_dict()["expiry_at"] is None
