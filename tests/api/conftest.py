"""Fixtures for API tests."""

import pytest

from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.use_cases.assignment.assign_role import AssignRoleUseCase
from hraccess.application.use_cases.assignment.remove_role import RemoveRoleUseCase
from hraccess.application.use_cases.audit.get_audit_log import GetAuditLogUseCase
from hraccess.application.use_cases.override.remove_override import RemoveOverrideUseCase
from hraccess.application.use_cases.override.set_override import SetOverrideUseCase
from hraccess.application.use_cases.role.create_role import CreateRoleUseCase
from hraccess.application.use_cases.role.delete_role import DeleteRoleUseCase
from hraccess.application.use_cases.role.update_role import UpdateRoleUseCase
from hraccess.domain.entities import User
from hraccess.infrastructure.permission.effective_permissions import (
    HRAccessEffectivePermissions,
)
from hraccess.infrastructure.permission.permission_checker import HRAccessPermissionChecker

from tests.conftest import FakeUnitOfWork, make_uow_factory

ADMIN_ID = 100
ALICE_ID = 1
BOB_ID = 2


class _TestUser:
    def __init__(self, user_id: int) -> None:
        self.user_id = user_id


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing; X-Test-User picks the caller."""

    async def process_request(self, req, resp):
        raw = req.get_header("X-Test-User") or str(ADMIN_ID)
        req.context.user = None if raw == "anonymous" else _TestUser(int(raw))


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Catalog, an admin caller, two plain users and a Viewer role."""
    uow = FakeUnitOfWork()
    uow.users.add(User(id=ADMIN_ID, username="hr.admin", is_system_admin=True))
    uow.users.add(User(id=ALICE_ID, username="alice"))
    uow.users.add(User(id=BOB_ID, username="bob"))
    read = uow.permissions.add("EMPLOYEES", "R")
    uow.permissions.add("EMPLOYEES", "U")
    for code in ("R", "U"):
        uow.permissions.add("USER_MANAGEMENT", code)
    uow.roles.add("Viewer", permissions=[read])
    return uow


@pytest.fixture
def app(fake_uow: FakeUnitOfWork):
    """Falcon ASGI app wired like the composition root, over in-memory fakes."""
    from hraccess.interfaces.api.app import create_app
    from hraccess.interfaces.api.resources.audit import AuditResource
    from hraccess.interfaces.api.resources.health import HealthResource
    from hraccess.interfaces.api.resources.overrides import (
        OverrideResource,
        OverridesResource,
        UserOverridesResource,
    )
    from hraccess.interfaces.api.resources.permissions import (
        PermissionCatalogResource,
        PermissionCheckResource,
        PermissionMatrixResource,
        UserPermissionsResource,
    )
    from hraccess.interfaces.api.resources.roles import (
        RoleResource,
        RolesResource,
        RoleUsersResource,
    )
    from hraccess.interfaces.api.resources.user_roles import (
        UserRoleResource,
        UserRolesResource,
    )

    uow_factory = make_uow_factory(fake_uow)
    checker = HRAccessPermissionChecker(uow_factory)
    deps = {
        "unit_of_work_factory": uow_factory,
        "permission_checker": checker,
        "audit_recorder": AuditRecorder(uow_factory),
    }
    return create_app(
        middleware=[AuthBypassMiddleware()],
        health_resource=HealthResource(),
        permission_check_resource=PermissionCheckResource(checker),
        permission_catalog_resource=PermissionCatalogResource(uow_factory),
        permission_matrix_resource=PermissionMatrixResource(uow_factory),
        user_permissions_resource=UserPermissionsResource(
            HRAccessEffectivePermissions(uow_factory), checker
        ),
        user_roles_resource=UserRolesResource(uow_factory, checker, AssignRoleUseCase(**deps)),
        user_role_resource=UserRoleResource(RemoveRoleUseCase(**deps)),
        user_overrides_resource=UserOverridesResource(uow_factory, checker),
        overrides_resource=OverridesResource(SetOverrideUseCase(**deps)),
        override_resource=OverrideResource(RemoveOverrideUseCase(**deps)),
        roles_resource=RolesResource(uow_factory, checker, CreateRoleUseCase(**deps)),
        role_resource=RoleResource(
            uow_factory, checker, UpdateRoleUseCase(**deps), DeleteRoleUseCase(**deps)
        ),
        role_users_resource=RoleUsersResource(uow_factory, checker),
        audit_resource=AuditResource(GetAuditLogUseCase(uow_factory, checker)),
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
