"""User role assignment resources."""

import falcon.asgi

from hraccess.application.use_cases.assignment.assign_role import AssignRoleUseCase
from hraccess.application.use_cases.assignment.remove_role import RemoveRoleUseCase
from hraccess.domain.exceptions import HRAccessError
from hraccess.domain.value_objects import utcnow
from hraccess.interfaces.api.errors import (
    bad_request,
    can_read_user,
    current_user,
    forbidden,
    parse_datetime,
    parse_int,
    render_error,
)


class UserRolesResource:
    """GET/POST /v1/users/{user_id}/roles - effective roles, assign role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker,
        assign_role: AssignRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._assign = assign_role

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: int,
    ) -> None:
        """Roles the user effectively holds (active role, effective assignment)."""
        user = current_user(req, resp)
        if not user:
            return
        try:
            if not await can_read_user(self._permission_checker, user.user_id, user_id):
                forbidden(resp)
                return
            async with self._uow_factory() as uow:
                assignments = await uow.assignments.list_effective_for_user(user_id, utcnow())
                roles = {
                    r.id: r
                    for r in await uow.roles.list_by_ids([a.role_id for a in assignments])
                    if r.active
                }
        except HRAccessError as e:
            render_error(resp, e)
            return

        items = [
            {
                "assignment_id": a.id,
                "role_id": a.role_id,
                "role_code": roles[a.role_id].code,
                "role_name": roles[a.role_id].name,
                "assigned_at": a.assigned_at.isoformat(),
                "expiry_at": a.expiry_at.isoformat() if a.expiry_at else None,
            }
            for a in assignments
            if a.role_id in roles
        ]
        resp.media = {
            "user_id": user_id,
            "role_codes": sorted({i["role_code"] for i in items}),
            "items": items,
        }
        resp.status = falcon.HTTP_200

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: int,
    ) -> None:
        """Assign role. Body: role_id, expiry_at?, reason?."""
        user = current_user(req, resp)
        if not user:
            return

        try:
            body = await req.get_media()
            role_id = parse_int(body["role_id"], "role_id")
            assignment = await self._assign.execute(
                user.user_id,
                user_id,
                role_id,
                expiry_at=parse_datetime(body.get("expiry_at")),
                reason=body.get("reason"),
            )
        except KeyError as e:
            bad_request(resp, f"Missing required field: {e}")
            return
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = assignment.snapshot()
        resp.status = falcon.HTTP_200


class UserRoleResource:
    """DELETE /v1/users/{user_id}/roles/{role_id} - remove role from user."""

    def __init__(self, remove_role: RemoveRoleUseCase) -> None:
        self._remove = remove_role

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: int,
        role_id: int,
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            await self._remove.execute(
                user.user_id, user_id, role_id, reason=req.get_param("reason")
            )
        except HRAccessError as e:
            render_error(resp, e)
            return
        resp.status = falcon.HTTP_204
