"""User repository port (read-only view of the identity subsystem)."""

from typing import Protocol

from hraccess.domain.entities import User


class UserRepository(Protocol):
    """Port for reading user identity flags."""

    async def get_by_id(self, user_id: int) -> User | None: ...

    async def list_by_ids(self, user_ids: list[int]) -> list[User]: ...
