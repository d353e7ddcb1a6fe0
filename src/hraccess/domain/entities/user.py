"""User entity - the identity flags the engine reads."""

from dataclasses import dataclass


@dataclass
class User:
    """User owned by the identity subsystem."""

    id: int
    username: str
    is_active: bool = True
    is_system_admin: bool = False
