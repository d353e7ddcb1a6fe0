"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from hraccess.domain.exceptions import HRAccessError
from hraccess.interfaces.api.errors import render_error
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

logger = logging.getLogger(__name__)


async def _handle_domain_error(req, resp, ex, params) -> None:
    render_error(resp, ex)


async def _handle_unexpected_error(req, resp, ex, params) -> None:
    if isinstance(ex, falcon.HTTPError):
        raise ex
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "InternalError", "detail": "Internal server error"}


def create_app(
    *,
    middleware: list,
    health_resource: HealthResource,
    permission_check_resource: PermissionCheckResource,
    permission_catalog_resource: PermissionCatalogResource,
    permission_matrix_resource: PermissionMatrixResource,
    user_permissions_resource: UserPermissionsResource,
    user_roles_resource: UserRolesResource,
    user_role_resource: UserRoleResource,
    user_overrides_resource: UserOverridesResource,
    overrides_resource: OverridesResource,
    override_resource: OverrideResource,
    roles_resource: RolesResource,
    role_resource: RoleResource,
    role_users_resource: RoleUsersResource,
    audit_resource: AuditResource,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware)
    app.add_error_handler(Exception, _handle_unexpected_error)
    app.add_error_handler(HRAccessError, _handle_domain_error)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/permissions", permission_catalog_resource)
    app.add_route("/v1/permissions/check", permission_check_resource)
    app.add_route("/v1/permissions/matrix", permission_matrix_resource)
    app.add_route("/v1/users/{user_id:int}/permissions", user_permissions_resource)
    app.add_route("/v1/users/{user_id:int}/roles", user_roles_resource)
    app.add_route("/v1/users/{user_id:int}/roles/{role_id:int}", user_role_resource)
    app.add_route("/v1/users/{user_id:int}/overrides", user_overrides_resource)
    app.add_route("/v1/overrides", overrides_resource)
    app.add_route("/v1/overrides/{override_id:int}", override_resource)
    app.add_route("/v1/roles", roles_resource)
    app.add_route("/v1/roles/{role_id:int}", role_resource)
    app.add_route("/v1/roles/{role_id:int}/users", role_users_resource)
    app.add_route("/v1/audit", audit_resource)
    return app
