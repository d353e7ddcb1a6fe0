"""Permission override resources."""

import falcon.asgi

from hraccess.application.use_cases.override.remove_override import RemoveOverrideUseCase
from hraccess.application.use_cases.override.set_override import SetOverrideUseCase
from hraccess.domain.exceptions import HRAccessError, ValidationError
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


class OverridesResource:
    """POST /v1/overrides - grant or deny a permission to a user."""

    def __init__(self, set_override: SetOverrideUseCase) -> None:
        self._set = set_override

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Body: user_id, permission_id, is_granted, reason, expiry_at?."""
        user = current_user(req, resp)
        if not user:
            return

        try:
            body = await req.get_media()
            is_granted = body["is_granted"]
            if not isinstance(is_granted, bool):
                raise ValidationError("is_granted must be a boolean")
            override = await self._set.execute(
                user.user_id,
                parse_int(body["user_id"], "user_id"),
                parse_int(body["permission_id"], "permission_id"),
                is_granted,
                reason=str(body.get("reason") or ""),
                expiry_at=parse_datetime(body.get("expiry_at")),
            )
        except KeyError as e:
            bad_request(resp, f"Missing required field: {e}")
            return
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = override.snapshot()
        resp.status = falcon.HTTP_200


class OverrideResource:
    """DELETE /v1/overrides/{override_id} - remove override."""

    def __init__(self, remove_override: RemoveOverrideUseCase) -> None:
        self._remove = remove_override

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        override_id: int,
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            await self._remove.execute(user.user_id, override_id, reason=req.get_param("reason"))
        except HRAccessError as e:
            render_error(resp, e)
            return
        resp.status = falcon.HTTP_204


class UserOverridesResource:
    """GET /v1/users/{user_id}/overrides - active overrides, expired ones flagged."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
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
            async with self._uow_factory() as uow:
                overrides = await uow.overrides.list_active_for_user(user_id)
                permissions = {
                    p.id: p
                    for p in await uow.permissions.list_by_ids(
                        [o.permission_id for o in overrides]
                    )
                }
        except HRAccessError as e:
            render_error(resp, e)
            return

        now = utcnow()
        resp.media = {
            "user_id": user_id,
            "items": [
                {
                    **o.snapshot(),
                    "permission": (
                        str(permissions[o.permission_id].key)
                        if o.permission_id in permissions
                        else None
                    ),
                    "effective": o.is_effective(now),
                }
                for o in overrides
            ],
        }
        resp.status = falcon.HTTP_200
