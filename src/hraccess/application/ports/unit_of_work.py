"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from hraccess.application.ports.repositories.assignment_repository import (
    AssignmentRepository,
)
from hraccess.application.ports.repositories.audit_repository import AuditRepository
from hraccess.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from hraccess.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from hraccess.application.ports.repositories.role_repository import RoleRepository
from hraccess.application.ports.repositories.user_repository import UserRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def users(self) -> UserRepository: ...

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def assignments(self) -> AssignmentRepository: ...

    @property
    def overrides(self) -> OverrideRepository: ...

    @property
    def audit(self) -> AuditRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    Snapshot factories open a read-only transaction so every read of one
    permission decision sees the same committed state.
    """

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
