"""Permission decision DTO."""

from dataclasses import dataclass, field

from hraccess.domain.value_objects import DecisionReason


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of one resolution: decision, reason code and contributing sources."""

    granted: bool
    reason: DecisionReason
    sources: tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        return {
            "granted": self.granted,
            "reason_code": self.reason.value,
            "sources": list(self.sources),
        }
