"""
MexKYC Exception Hierarchy

Exceptions raised at the configuration, intake and citation boundaries.
The decision engine itself never raises for bad evidence: missing or
malformed documents become flags, not exceptions.

Exception codes follow the pattern: MK_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class MexKycError(Exception):
    """
    Base exception for all MexKYC errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (MK_*)
        details: Additional context about the error
        customer_id: Associated customer ID if applicable
    """
    message: str
    code: str = "MK_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    customer_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.customer_id:
            parts.append(f"(customer: {self.customer_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.customer_id:
            result["customer_id"] = self.customer_id
        return result


# =============================================================================
# Rule Pack Errors
# =============================================================================

@dataclass
class RulePackLoadError(MexKycError):
    """Failed to read a rule pack file."""
    code: str = "MK_RULE_PACK_LOAD_ERROR"


@dataclass
class RulePackValidationError(MexKycError):
    """Rule pack schema validation failed."""
    code: str = "MK_RULE_PACK_VALIDATION_ERROR"


@dataclass
class RulePackVersionMismatch(MexKycError):
    """Rule pack schema version is not compatible with this engine."""
    code: str = "MK_RULE_PACK_VERSION_MISMATCH"


# =============================================================================
# Profile Intake Errors
# =============================================================================

@dataclass
class ProfileValidationError(MexKycError):
    """Extraction records could not be assembled into a profile."""
    code: str = "MK_PROFILE_VALIDATION_ERROR"


# =============================================================================
# Citation Errors
# =============================================================================

@dataclass
class CitationNotFoundError(MexKycError):
    """Referenced legal citation is not registered."""
    code: str = "MK_CITATION_NOT_FOUND"
