"""Role API resources."""

import falcon.asgi

from hraccess.application.dto.role_dto import RoleCreateInput, RoleUpdateInput
from hraccess.application.use_cases.role.create_role import CreateRoleUseCase
from hraccess.application.use_cases.role.delete_role import DeleteRoleUseCase
from hraccess.application.use_cases.role.update_role import UpdateRoleUseCase
from hraccess.domain.entities import Role
from hraccess.domain.exceptions import HRAccessError, NotFound, ValidationError
from hraccess.domain.value_objects import utcnow
from hraccess.interfaces.api.errors import (
    bad_request,
    can_read_user,
    current_user,
    forbidden,
    parse_int,
    render_error,
)


def _role_to_dict(role: Role) -> dict:
    return {
        **role.snapshot(),
        "created_at": role.created_at.isoformat(),
        "modified_at": role.modified_at.isoformat(),
        "modified_by": role.modified_by,
    }


def _permission_ids(body: dict, required: bool) -> list[int] | None:
    raw = body.get("permission_ids")
    if raw is None:
        return [] if required else None
    if not isinstance(raw, list):
        raise ValidationError("permission_ids must be a list")
    return [parse_int(v, "permission_ids") for v in raw]


class RolesResource:
    """GET/POST /v1/roles - list active roles, create custom role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker,
        create_role: CreateRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._create = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List active roles with permission and user counts."""
        user = current_user(req, resp)
        if not user:
            return
        try:
            if not await can_read_user(self._permission_checker, user.user_id):
                forbidden(resp)
                return
            async with self._uow_factory() as uow:
                summaries = await uow.roles.list_summaries(utcnow())
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = {"items": [s.as_dict() for s in summaries]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create role. Body: name, code, description?, scope ids?, permission_ids?, reason?."""
        user = current_user(req, resp)
        if not user:
            return

        try:
            body = await req.get_media()
            data = RoleCreateInput(
                name=str(body["name"]),
                code=str(body["code"]),
                description=body.get("description"),
                scope_department_id=body.get("scope_department_id"),
                scope_company_id=body.get("scope_company_id"),
                permission_ids=_permission_ids(body, required=True),
            )
            role = await self._create.execute(user.user_id, data, reason=body.get("reason"))
        except KeyError as e:
            bad_request(resp, f"Missing required field: {e}")
            return
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id}."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._update = update_role
        self._delete = delete_role

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: int,
    ) -> None:
        """Get role with its active permissions."""
        user = current_user(req, resp)
        if not user:
            return
        try:
            if not await can_read_user(self._permission_checker, user.user_id):
                forbidden(resp)
                return
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", role_id)
                permissions = await uow.roles.list_active_permissions(role_id)
        except HRAccessError as e:
            render_error(resp, e)
            return
        resp.media = {
            **_role_to_dict(role),
            "permissions": [
                {"id": p.id, "key": str(p.key), "permission_name": p.permission_name}
                for p in permissions
            ],
        }
        resp.status = falcon.HTTP_200

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: int,
    ) -> None:
        """Update role. Body: name?, description?, active?, permission_ids?, reason?."""
        user = current_user(req, resp)
        if not user:
            return

        try:
            body = await req.get_media()
            active = body.get("active")
            if active is not None and not isinstance(active, bool):
                raise ValidationError("active must be a boolean")
            for field in ("name", "description"):
                if body.get(field) is not None and not isinstance(body[field], str):
                    raise ValidationError(f"{field} must be a string")
            data = RoleUpdateInput(
                name=body.get("name"),
                description=body.get("description"),
                active=active,
                permission_ids=_permission_ids(body, required=False),
            )
            role = await self._update.execute(
                user.user_id, role_id, data, reason=body.get("reason")
            )
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: int,
    ) -> None:
        """Soft-delete role. Reason via ?reason=."""
        user = current_user(req, resp)
        if not user:
            return
        try:
            await self._delete.execute(user.user_id, role_id, reason=req.get_param("reason"))
        except HRAccessError as e:
            render_error(resp, e)
            return
        resp.status = falcon.HTTP_204


class RoleUsersResource:
    """GET /v1/roles/{role_id}/users - users with an effective assignment of the role."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: int,
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            if not await can_read_user(self._permission_checker, user.user_id):
                forbidden(resp)
                return
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", role_id)
                assignments = await uow.assignments.list_effective_for_role(role_id, utcnow())
                users = {
                    u.id: u
                    for u in await uow.users.list_by_ids([a.user_id for a in assignments])
                }
        except HRAccessError as e:
            render_error(resp, e)
            return
        resp.media = {
            "role_id": role_id,
            "items": [
                {
                    "user_id": a.user_id,
                    "username": users[a.user_id].username if a.user_id in users else None,
                    "assigned_at": a.assigned_at.isoformat(),
                    "expiry_at": a.expiry_at.isoformat() if a.expiry_at else None,
                }
                for a in assignments
            ],
        }
        resp.status = falcon.HTTP_200
