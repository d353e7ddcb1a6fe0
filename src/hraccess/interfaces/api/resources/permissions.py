"""Permission check, catalog and effective permission resources."""

import falcon.asgi

from hraccess.domain.exceptions import HRAccessError
from hraccess.interfaces.api.errors import (
    bad_request,
    can_read_user,
    current_user,
    forbidden,
    parse_int,
    render_error,
)


class PermissionCheckResource:
    """POST /v1/permissions/check - resolve one permission for a user."""

    def __init__(self, permission_checker) -> None:
        self._permission_checker = permission_checker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Body: module_code, permission_code and optional user_id (defaults to caller)."""
        user = current_user(req, resp)
        if not user:
            return

        try:
            body = await req.get_media()
            module_code = str(body["module_code"]).strip()
            permission_code = str(body["permission_code"]).strip()
            subject_id = parse_int(body.get("user_id", user.user_id), "user_id")
        except KeyError as e:
            bad_request(resp, f"Missing required field: {e}")
            return
        except HRAccessError as e:
            render_error(resp, e)
            return
        if not module_code or not permission_code:
            bad_request(resp, "module_code and permission_code are required")
            return

        try:
            if not await can_read_user(self._permission_checker, user.user_id, subject_id):
                forbidden(resp)
                return
            decision = await self._permission_checker.check_permission(
                subject_id, module_code, permission_code
            )
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = {
            "user_id": subject_id,
            "module_code": module_code,
            "permission_code": permission_code,
            **decision.as_dict(),
        }
        resp.status = falcon.HTTP_200


class PermissionCatalogResource:
    """GET /v1/permissions - active permission catalog."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not current_user(req, resp):
            return
        try:
            async with self._uow_factory() as uow:
                permissions = await uow.permissions.list_active()
        except HRAccessError as e:
            render_error(resp, e)
            return

        module = req.get_param("module")
        resp.media = {
            "items": [
                {
                    "id": p.id,
                    "key": str(p.key),
                    "module_code": p.module_code,
                    "module_name": p.module_name,
                    "permission_code": p.permission_code,
                    "permission_name": p.permission_name,
                    "description": p.description,
                }
                for p in permissions
                if not module or p.module_code == module
            ]
        }
        resp.status = falcon.HTTP_200


class PermissionMatrixResource:
    """GET /v1/permissions/matrix - modules x permission types for admin screens."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not current_user(req, resp):
            return
        try:
            async with self._uow_factory() as uow:
                modules = await uow.permissions.list_modules()
                types = await uow.permissions.list_types()
                permissions = await uow.permissions.list_active()
        except HRAccessError as e:
            render_error(resp, e)
            return

        by_module: dict[str, dict[str, int]] = {}
        for p in permissions:
            by_module.setdefault(p.module_code, {})[p.permission_code] = p.id

        resp.media = {
            "permission_types": [{"code": t.code, "name": t.name} for t in types],
            "modules": [
                {
                    "code": m.code,
                    "name": m.name,
                    "description": m.description,
                    "permissions": by_module.get(m.code, {}),
                }
                for m in modules
            ],
        }
        resp.status = falcon.HTTP_200


class UserPermissionsResource:
    """GET /v1/users/{user_id}/permissions - effective permissions with provenance."""

    def __init__(self, effective_permissions, permission_checker) -> None:
        self._effective = effective_permissions
        self._permission_checker = permission_checker

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: int,
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            if not await can_read_user(self._permission_checker, user.user_id, user_id):
                forbidden(resp)
                return
            items = await self._effective.list_effective_permissions(user_id)
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = {"user_id": user_id, "items": [i.as_dict() for i in items]}
        resp.status = falcon.HTTP_200
