"""Audit recorder - appends one entry per administrative mutation."""

import json
import logging
from collections.abc import Callable
from datetime import datetime

from hraccess.domain.entities import AuditEntry
from hraccess.domain.value_objects import AuditAction, AuditTarget, utcnow

logger = logging.getLogger(__name__)


def serialize_value(value: dict | str | None) -> str | None:
    """JSON snapshot with stable key order; strings pass through."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


class AuditRecorder:
    """Writes audit entries in their own unit of work, after the guarded mutation committed.

    A failed write is logged at error level and never changes the outcome of
    the mutation that triggered it.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def record(
        self,
        *,
        user_id: int,
        action: AuditAction,
        target: AuditTarget,
        old_value: dict | str | None = None,
        new_value: dict | str | None = None,
        reason: str | None = None,
        action_by: int | None = None,
    ) -> AuditEntry | None:
        entry = AuditEntry(
            user_id=user_id,
            action=action,
            target=target,
            action_at=self._clock(),
            old_value=serialize_value(old_value),
            new_value=serialize_value(new_value),
            reason=reason,
            action_by=action_by,
        )
        try:
            async with self._uow_factory() as uow:
                stored = await uow.audit.append(entry)
        except Exception:
            logger.exception(
                "Failed to write audit entry %s for %s %s (subject user %s)",
                action,
                target.kind,
                target.id,
                user_id,
            )
            return None
        logger.info(
            "Audit: user=%s action=%s target=%s:%s by=%s",
            user_id,
            action,
            target.kind,
            target.id,
            action_by,
        )
        return stored
