"""Application ports - interfaces for external adapters."""

from hraccess.application.ports.permission_checker import (
    EffectivePermissionReader,
    PermissionChecker,
)
from hraccess.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "EffectivePermissionReader",
    "PermissionChecker",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
