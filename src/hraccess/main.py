"""Application entry point and composition root."""

import logging

from hraccess import __version__
from hraccess.application.audit_recorder import AuditRecorder
from hraccess.application.use_cases.assignment.assign_role import AssignRoleUseCase
from hraccess.application.use_cases.assignment.remove_role import RemoveRoleUseCase
from hraccess.application.use_cases.audit.get_audit_log import GetAuditLogUseCase
from hraccess.application.use_cases.override.remove_override import RemoveOverrideUseCase
from hraccess.application.use_cases.override.set_override import SetOverrideUseCase
from hraccess.application.use_cases.role.create_role import CreateRoleUseCase
from hraccess.application.use_cases.role.delete_role import DeleteRoleUseCase
from hraccess.application.use_cases.role.update_role import UpdateRoleUseCase
from hraccess.config import get_settings
from hraccess.infrastructure.auth.keycloak_provider import KeycloakProvider
from hraccess.infrastructure.permission.effective_permissions import (
    HRAccessEffectivePermissions,
)
from hraccess.infrastructure.permission.permission_checker import HRAccessPermissionChecker
from hraccess.infrastructure.persistence.postgres.connection import create_pool
from hraccess.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from hraccess.interfaces.api.app import create_app
from hraccess.interfaces.api.middleware.auth import AuthMiddleware
from hraccess.interfaces.api.middleware.cors import CORSMiddleware
from hraccess.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
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
from hraccess.interfaces.api.resources.user_roles import UserRoleResource, UserRolesResource
from hraccess.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point - serve the API with uvicorn."""
    print(f"hraccess v{__version__}")
    run_server()


def create_hraccess_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    setup_logging(settings)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_pool_timeout,
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )
    uow_factory = create_uow_factory(pool)
    snapshot_uow_factory = create_uow_factory(pool, snapshot=True)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("KEYCLOAK_CLIENT_SECRET not set, all API requests will be unauthenticated")

    permission_checker = HRAccessPermissionChecker(snapshot_uow_factory)
    effective_permissions = HRAccessEffectivePermissions(snapshot_uow_factory)
    audit_recorder = AuditRecorder(uow_factory)

    admin_deps = {
        "unit_of_work_factory": uow_factory,
        "permission_checker": permission_checker,
        "audit_recorder": audit_recorder,
    }
    create_role = CreateRoleUseCase(**admin_deps)
    update_role = UpdateRoleUseCase(**admin_deps)
    delete_role = DeleteRoleUseCase(**admin_deps)
    assign_role = AssignRoleUseCase(**admin_deps)
    remove_role = RemoveRoleUseCase(**admin_deps)
    set_override = SetOverrideUseCase(**admin_deps)
    remove_override = RemoveOverrideUseCase(**admin_deps)
    get_audit_log = GetAuditLogUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        max_rows=settings.audit_max_rows,
    )

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    app = create_app(
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
        health_resource=HealthResource(pool),
        permission_check_resource=PermissionCheckResource(permission_checker),
        permission_catalog_resource=PermissionCatalogResource(uow_factory),
        permission_matrix_resource=PermissionMatrixResource(uow_factory),
        user_permissions_resource=UserPermissionsResource(
            effective_permissions, permission_checker
        ),
        user_roles_resource=UserRolesResource(uow_factory, permission_checker, assign_role),
        user_role_resource=UserRoleResource(remove_role),
        user_overrides_resource=UserOverridesResource(uow_factory, permission_checker),
        overrides_resource=OverridesResource(set_override),
        override_resource=OverrideResource(remove_override),
        roles_resource=RolesResource(uow_factory, permission_checker, create_role),
        role_resource=RoleResource(uow_factory, permission_checker, update_role, delete_role),
        role_users_resource=RoleUsersResource(uow_factory, permission_checker),
        audit_resource=AuditResource(get_audit_log),
    )
    logger.info("hraccess %s started (%s)", __version__, settings.environment)
    return app


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run("hraccess.main:create_hraccess_app", factory=True, host=host, port=port)
