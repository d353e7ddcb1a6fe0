"""Audit log resource."""

import falcon.asgi

from hraccess.application.use_cases.audit.get_audit_log import GetAuditLogUseCase
from hraccess.domain.entities import AuditEntry
from hraccess.domain.exceptions import HRAccessError
from hraccess.interfaces.api.errors import current_user, parse_int, render_error


def _entry_to_dict(entry: AuditEntry) -> dict:
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "action": entry.action.value,
        "target_type": entry.target.kind,
        "target_id": entry.target.id,
        "old_value": entry.old_value,
        "new_value": entry.new_value,
        "reason": entry.reason,
        "action_by": entry.action_by,
        "action_at": entry.action_at.isoformat(),
    }


class AuditResource:
    """GET /v1/audit?user_id=&days= - recent administrative changes, newest first."""

    def __init__(self, get_audit_log: GetAuditLogUseCase) -> None:
        self._get = get_audit_log

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            raw_user = req.get_param("user_id")
            subject_id = parse_int(raw_user, "user_id") if raw_user else None
            days = parse_int(req.get_param("days") or 30, "days")
            entries = await self._get.execute(user.user_id, user_id=subject_id, since_days=days)
        except HRAccessError as e:
            render_error(resp, e)
            return

        resp.media = {"items": [_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200
