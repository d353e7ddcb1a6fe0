"""Permission identity - module code crossed with permission type code."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionKey:
    """Natural key of a catalog permission, e.g. EMPLOYEES:R."""

    module_code: str
    permission_code: str

    def __post_init__(self) -> None:
        if not self.module_code or not self.permission_code:
            raise ValueError("Permission key needs both module and permission code")

    def __str__(self) -> str:
        return f"{self.module_code}:{self.permission_code}"

    @classmethod
    def parse(cls, text: str) -> "PermissionKey":
        """Parse MODULE:CODE."""
        module_code, sep, permission_code = text.partition(":")
        if not sep:
            raise ValueError(f"Invalid permission key: {text!r}")
        return cls(module_code.strip(), permission_code.strip())
