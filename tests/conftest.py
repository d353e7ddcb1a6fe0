"""Pytest fixtures for hraccess tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from hraccess.application.dto.effective_permission_dto import RoleGrant
from hraccess.application.dto.role_dto import RoleSummary
from hraccess.domain.entities import (
    AuditEntry,
    Module,
    Permission,
    PermissionType,
    Role,
    RolePermission,
    User,
    UserPermissionOverride,
    UserRoleAssignment,
)
from hraccess.domain.exceptions import DuplicateRoleCode, StoreUnavailable
from hraccess.domain.value_objects import PermissionCode, as_utc

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


# --- Fake repositories ---


class FakeUserRepository:
    """In-memory user repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, User] = {}

    async def get_by_id(self, user_id: int) -> User | None:
        return self._by_id.get(user_id)

    async def list_by_ids(self, user_ids: list[int]) -> list[User]:
        users = [self._by_id[i] for i in set(user_ids) if i in self._by_id]
        return sorted(users, key=lambda u: u.username)

    def add(self, user: User) -> User:
        """Helper to add user for tests."""
        self._by_id[user.id] = user
        return user


class FakePermissionRepository:
    """In-memory catalog. Permission.active stands for row, module and type all active."""

    def __init__(self) -> None:
        self._by_id: dict[int, Permission] = {}
        self._modules: dict[str, Module] = {}
        self._types: dict[str, PermissionType] = {}
        self._ids = count(1)

    def _active(self) -> list[Permission]:
        modules = {code: i for i, code in enumerate(self._modules)}
        return sorted(
            (p for p in self._by_id.values() if p.active),
            key=lambda p: (modules.get(p.module_code, 0), p.module_code, p.permission_code),
        )

    async def get_by_id(self, permission_id: int) -> Permission | None:
        p = self._by_id.get(permission_id)
        return p if p and p.active else None

    async def get_by_key(self, module_code: str, permission_code: str) -> Permission | None:
        for p in self._by_id.values():
            if p.active and p.module_code == module_code and p.permission_code == permission_code:
                return p
        return None

    async def list_active(self) -> list[Permission]:
        return self._active()

    async def list_by_ids(self, permission_ids: list[int]) -> list[Permission]:
        wanted = set(permission_ids)
        return [p for p in self._active() if p.id in wanted]

    async def list_modules(self) -> list[Module]:
        return [m for m in self._modules.values() if m.active]

    async def list_types(self) -> list[PermissionType]:
        return [t for t in self._types.values() if t.active]

    def add(
        self,
        module_code: str,
        permission_code: str,
        *,
        active: bool = True,
        module_name: str | None = None,
    ) -> Permission:
        """Helper to add a permission (and its module and type) for tests."""
        if module_code not in self._modules:
            self._modules[module_code] = Module(
                id=len(self._modules) + 1,
                code=module_code,
                name=module_name or module_code.replace("_", " ").title(),
                display_order=len(self._modules),
            )
        if permission_code not in self._types:
            try:
                type_name = PermissionCode(permission_code).name.title()
            except ValueError:
                type_name = permission_code
            self._types[permission_code] = PermissionType(
                id=len(self._types) + 1, code=permission_code, name=type_name
            )
        permission = Permission(
            id=next(self._ids),
            module_code=module_code,
            module_name=self._modules[module_code].name,
            permission_code=permission_code,
            permission_name=self._types[permission_code].name,
            active=active,
        )
        self._by_id[permission.id] = permission
        return permission

    def deactivate(self, permission_id: int) -> None:
        self._by_id[permission_id] = replace(self._by_id[permission_id], active=False)


class FakeRoleRepository:
    """In-memory role repository with permission edges."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self._by_id: dict[int, Role] = {}
        self._edges: dict[tuple[int, int], RolePermission] = {}
        self._permissions = permissions
        self._ids = count(1)
        self.assignments: FakeAssignmentRepository | None = None
        self.locked: list[int] = []

    async def get_by_id(self, role_id: int, for_update: bool = False) -> Role | None:
        if for_update:
            self.locked.append(role_id)
        return self._by_id.get(role_id)

    async def get_by_code(self, code: str) -> Role | None:
        for r in self._by_id.values():
            if r.code.upper() == code.upper():
                return r
        return None

    async def list_by_ids(self, role_ids: list[int]) -> list[Role]:
        roles = [self._by_id[i] for i in set(role_ids) if i in self._by_id]
        return sorted(roles, key=lambda r: r.name)

    async def list_summaries(self, now: datetime) -> list[RoleSummary]:
        summaries = []
        for role in sorted((r for r in self._by_id.values() if r.active), key=lambda r: r.name):
            users = (
                await self.assignments.list_effective_for_role(role.id, now)
                if self.assignments
                else []
            )
            edges = [e for e in self._edges.values() if e.role_id == role.id and e.active]
            summaries.append(
                RoleSummary(role=role, permission_count=len(edges), user_count=len(users))
            )
        return summaries

    async def create(self, role: Role) -> Role:
        if await self.get_by_code(role.code):
            raise DuplicateRoleCode(f"Role code already exists: {role.code}")
        created = replace(role, id=next(self._ids))
        self._by_id[created.id] = created
        return created

    async def update(self, role: Role) -> None:
        self._by_id[role.id] = role

    async def list_active_permissions(self, role_id: int) -> list[Permission]:
        ids = [e.permission_id for e in self._edges.values() if e.role_id == role_id and e.active]
        return await self._permissions.list_by_ids(ids)

    async def deactivate_all_edges(self, role_id: int) -> None:
        for key, edge in self._edges.items():
            if edge.role_id == role_id:
                self._edges[key] = replace(edge, active=False)

    async def activate_edge(self, edge: RolePermission) -> None:
        self._edges[(edge.role_id, edge.permission_id)] = replace(edge, active=True)

    def add(self, name: str, code: str | None = None, *, permissions=(), **kwargs) -> Role:
        """Helper to add a role with active edges to the given permissions."""
        role = Role(
            id=next(self._ids),
            name=name,
            code=code or name.upper().replace(" ", "_"),
            created_at=NOW - timedelta(days=30),
            modified_at=NOW - timedelta(days=30),
            **kwargs,
        )
        self._by_id[role.id] = role
        for p in permissions:
            self._edges[(role.id, p.id)] = RolePermission(
                role_id=role.id, permission_id=p.id, granted_at=role.created_at
            )
        return role

    def edge(self, role_id: int, permission_id: int) -> RolePermission | None:
        return self._edges.get((role_id, permission_id))


class FakeAssignmentRepository:
    """In-memory user-role assignments; role grants join roles, edges and catalog."""

    def __init__(self, roles: FakeRoleRepository, permissions: FakePermissionRepository) -> None:
        self._by_id: dict[int, UserRoleAssignment] = {}
        self._roles = roles
        self._permissions = permissions
        self._ids = count(1)
        roles.assignments = self

    async def get(self, user_id: int, role_id: int) -> UserRoleAssignment | None:
        for a in self._by_id.values():
            if a.user_id == user_id and a.role_id == role_id:
                return a
        return None

    async def list_effective_for_user(
        self, user_id: int, now: datetime
    ) -> list[UserRoleAssignment]:
        return [a for a in self._by_id.values() if a.user_id == user_id and a.is_effective(now)]

    async def list_effective_for_role(
        self, role_id: int, now: datetime
    ) -> list[UserRoleAssignment]:
        return [a for a in self._by_id.values() if a.role_id == role_id and a.is_effective(now)]

    async def create(self, assignment: UserRoleAssignment) -> UserRoleAssignment:
        created = replace(assignment, id=next(self._ids))
        self._by_id[created.id] = created
        return created

    async def update(self, assignment: UserRoleAssignment) -> None:
        self._by_id[assignment.id] = assignment

    async def list_role_grants(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[RoleGrant]:
        grants = []
        for a in await self.list_effective_for_user(user_id, now):
            role = self._roles._by_id.get(a.role_id)
            if not role or not role.active:
                continue
            for p in await self._roles.list_active_permissions(role.id):
                if permission_id is not None and p.id != permission_id:
                    continue
                grants.append(
                    RoleGrant(
                        role_id=role.id,
                        role_name=role.name,
                        permission_id=p.id,
                        assigned_at=a.assigned_at,
                        expiry_at=a.expiry_at,
                    )
                )
        return sorted(grants, key=lambda g: (g.role_name, g.permission_id))

    def add(
        self,
        user_id: int,
        role_id: int,
        *,
        expiry_at: datetime | None = None,
        active: bool = True,
        assigned_at: datetime | None = None,
    ) -> UserRoleAssignment:
        """Helper to add assignment for tests."""
        assignment = UserRoleAssignment(
            id=next(self._ids),
            user_id=user_id,
            role_id=role_id,
            assigned_at=assigned_at or NOW - timedelta(days=10),
            expiry_at=expiry_at,
            active=active,
        )
        self._by_id[assignment.id] = assignment
        return assignment


class FakeOverrideRepository:
    """In-memory permission overrides."""

    def __init__(self) -> None:
        self._by_id: dict[int, UserPermissionOverride] = {}
        self._ids = count(1)

    async def get_by_id(self, override_id: int) -> UserPermissionOverride | None:
        return self._by_id.get(override_id)

    async def get_active_for_pair(
        self, user_id: int, permission_id: int
    ) -> UserPermissionOverride | None:
        for o in self._by_id.values():
            if o.active and o.user_id == user_id and o.permission_id == permission_id:
                return o
        return None

    async def list_effective_for_user(
        self,
        user_id: int,
        now: datetime,
        permission_id: int | None = None,
    ) -> list[UserPermissionOverride]:
        return [
            o
            for o in self._by_id.values()
            if o.user_id == user_id
            and o.is_effective(now)
            and (permission_id is None or o.permission_id == permission_id)
        ]

    async def list_active_for_user(self, user_id: int) -> list[UserPermissionOverride]:
        return [o for o in self._by_id.values() if o.user_id == user_id and o.active]

    async def create(self, override: UserPermissionOverride) -> UserPermissionOverride:
        created = replace(override, id=next(self._ids))
        self._by_id[created.id] = created
        return created

    async def update(self, override: UserPermissionOverride) -> None:
        self._by_id[override.id] = override

    def add(
        self,
        user_id: int,
        permission_id: int,
        is_granted: bool,
        *,
        expiry_at: datetime | None = None,
        active: bool = True,
        reason: str = "test",
    ) -> UserPermissionOverride:
        """Helper to add override for tests."""
        override = UserPermissionOverride(
            id=next(self._ids),
            user_id=user_id,
            permission_id=permission_id,
            is_granted=is_granted,
            reason=reason,
            created_at=NOW - timedelta(days=1),
            expiry_at=expiry_at,
            active=active,
        )
        self._by_id[override.id] = override
        return override

    def all(self) -> list[UserPermissionOverride]:
        return list(self._by_id.values())


class FakeAuditRepository:
    """In-memory audit log. Set fail=True to simulate a store outage."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []
        self.fail = False
        self._ids = count(1)

    async def append(self, entry: AuditEntry) -> AuditEntry:
        if self.fail:
            raise StoreUnavailable("audit store down")
        stored = replace(entry, id=next(self._ids))
        self.entries.append(stored)
        return stored

    async def list_since(
        self,
        since: datetime,
        *,
        user_id: int | None = None,
        limit: int = 1000,
    ) -> list[AuditEntry]:
        rows = [
            e
            for e in self.entries
            if as_utc(e.action_at) >= since and (user_id is None or e.user_id == user_id)
        ]
        rows.sort(key=lambda e: (e.action_at, e.id), reverse=True)
        return rows[:limit]


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.users = FakeUserRepository()
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository(self.permissions)
        self.assignments = FakeAssignmentRepository(self.roles, self.permissions)
        self.overrides = FakeOverrideRepository()
        self.audit = FakeAuditRepository()
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory that yields the same FakeUnitOfWork on every call."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow
        await uow.commit()

    return _factory


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the test's FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def mock_permission_checker():
    """AsyncMock for PermissionChecker - allows everything by default."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.has_permission.return_value = True
    return mock


@pytest.fixture
def denying_permission_checker():
    """AsyncMock for PermissionChecker - denies everything."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.has_permission.return_value = False
    return mock
