"""Provenance of an effective permission row."""

from enum import StrEnum


class PermissionSource(StrEnum):
    """Where a currently granted permission comes from."""

    SYSTEM_ADMIN = "SystemAdmin"
    ROLE = "Role"
    OVERRIDE = "Override"
