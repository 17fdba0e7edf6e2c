"""
MexKYC Validation Result

The engine's output: a confidence score in [0, 1] and the flags that
explain every deduction. Flags are immutable once emitted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .enums import EntityType, FlagLevel


@dataclass(frozen=True)
class ValidationFlag:
    """
    A single finding raised by a check.

    Attributes:
        code: Machine-readable flag code ("UBO_MISSING", "POA_STALE", ...)
        level: info, warning or critical
        message: Human-readable explanation
        action_required: What the analyst should request or do
        supporting_docs: Labels of the documents the finding rests on
        score_impact: Penalty this flag contributed to the score
    """
    code: str
    level: FlagLevel
    message: str
    action_required: Optional[str] = None
    supporting_docs: tuple[str, ...] = ()
    score_impact: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {
            "code": self.code,
            "level": self.level.value,
            "message": self.message,
            "score_impact": self.score_impact,
        }
        if self.action_required:
            result["action_required"] = self.action_required
        if self.supporting_docs:
            result["supporting_docs"] = list(self.supporting_docs)
        return result


@dataclass
class ValidationResult:
    """
    Outcome of validating one customer profile.

    Score starts at 1.0, only decreases through flag penalties, and is
    floored at zero. An entity mismatch forces exactly 0.
    """
    customer_id: str
    score: float
    flags: list[ValidationFlag] = field(default_factory=list)
    entity_type: EntityType = EntityType.UNKNOWN
    generated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def flags_with_code(self, code: str) -> list[ValidationFlag]:
        return [f for f in self.flags if f.code == code]

    def has_flag(self, code: str) -> bool:
        return any(f.code == code for f in self.flags)

    @property
    def critical_flags(self) -> list[ValidationFlag]:
        return [f for f in self.flags if f.level == FlagLevel.CRITICAL]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "customer_id": self.customer_id,
            "score": self.score,
            "entity_type": self.entity_type.value,
            "flags": [f.to_dict() for f in self.flags],
            "generated_at": self.generated_at.isoformat(),
        }
