"""Mapping of domain errors and request parsing failures to HTTP responses."""

import logging
from datetime import datetime

import falcon
import falcon.asgi

from hraccess.domain.exceptions import (
    ConcurrentChange,
    DuplicateRoleCode,
    HRAccessError,
    NotFound,
    PermissionDenied,
    RoleInUse,
    StoreUnavailable,
    SystemRoleImmutable,
    ValidationError,
)
from hraccess.domain.value_objects import USER_MANAGEMENT_MODULE, PermissionCode, as_utc

logger = logging.getLogger(__name__)

_STATUS = {
    NotFound: falcon.HTTP_404,
    ValidationError: falcon.HTTP_400,
    PermissionDenied: falcon.HTTP_403,
    SystemRoleImmutable: falcon.HTTP_409,
    RoleInUse: falcon.HTTP_409,
    DuplicateRoleCode: falcon.HTTP_409,
    ConcurrentChange: falcon.HTTP_409,
    StoreUnavailable: falcon.HTTP_503,
}


def render_error(resp: falcon.asgi.Response, error: HRAccessError) -> None:
    """Write {"error": code, "detail": message} with the status for the error type."""
    resp.status = _STATUS.get(type(error), falcon.HTTP_500)
    resp.media = {"error": error.code, "detail": str(error)}
    if isinstance(error, StoreUnavailable):
        logger.error("Request failed, store unavailable: %s", error)


def bad_request(resp: falcon.asgi.Response, detail: str) -> None:
    resp.status = falcon.HTTP_400
    resp.media = {"error": ValidationError.code, "detail": detail}


def current_user(req: falcon.asgi.Request, resp: falcon.asgi.Response):
    """Authenticated caller, or None after writing a 401."""
    user = getattr(req.context, "user", None)
    if not user:
        resp.status = falcon.HTTP_401
        resp.media = {"error": "Unauthorized", "detail": "Bearer token required"}
    return user


async def can_read_user(permission_checker, actor_id: int, user_id: int | None = None) -> bool:
    """Users may read their own data; anyone else needs USER_MANAGEMENT read."""
    if user_id is not None and actor_id == user_id:
        return True
    return await permission_checker.has_permission(
        actor_id, USER_MANAGEMENT_MODULE, PermissionCode.READ
    )


def forbidden(resp: falcon.asgi.Response) -> None:
    resp.status = falcon.HTTP_403
    resp.media = {"error": PermissionDenied.code, "detail": "Permission denied"}


def parse_datetime(value: str | None) -> datetime | None:
    """ISO-8601 timestamp as aware UTC; naive input is taken as UTC."""
    if value in (None, ""):
        return None
    try:
        return as_utc(datetime.fromisoformat(value))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timestamp: {value}") from e


def parse_int(value: object, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be an integer") from e
