"""
MexKYC Audit Trace

Evidentiary trace shown alongside a decision. Each entry cites the
documents it was derived from. The trace is derived from the same
profile as the score but never feeds back into it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from .address import Address
from .enums import AddressRole, FreshnessDocType, PowerScope


@dataclass
class TraceSource:
    """A document cited as evidence for a trace entry."""
    document: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"document": self.document, "description": self.description}


@dataclass
class UboTrace:
    """Ownership and voting math for one shareholder."""
    name: str
    shares: Optional[float]
    total_shares: float
    total_voting_shares: float
    ownership_pct: float
    voting_pct: float
    has_voting_rights: bool
    is_ubo: bool
    threshold_pct: float
    calculation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "shares": self.shares,
            "total_shares": self.total_shares,
            "total_voting_shares": self.total_voting_shares,
            "ownership_pct": self.ownership_pct,
            "voting_pct": self.voting_pct,
            "has_voting_rights": self.has_voting_rights,
            "is_ubo": self.is_ubo,
            "threshold_pct": self.threshold_pct,
            "calculation": self.calculation,
        }


@dataclass
class AddressEvidenceTrace:
    """The address resolved for one role and the documents behind it."""
    role: AddressRole
    address: Optional[Address]
    sources: list[TraceSource] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "address": self.address.to_dict() if self.address else None,
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass
class PowerTrace:
    """Resolved signing scope for one representative."""
    name: str
    role: Optional[str]
    scope: PowerScope
    matched_phrases: list[str] = field(default_factory=list)
    missing_powers: list[str] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)
    sources: list[TraceSource] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role,
            "scope": self.scope.value,
            "matched_phrases": list(self.matched_phrases),
            "missing_powers": list(self.missing_powers),
            "limitations": list(self.limitations),
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass
class SupportingDocument:
    """A dated document considered by a freshness check."""
    label: str
    document_date: Optional[date]

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "document_date": self.document_date.isoformat() if self.document_date else None,
        }


@dataclass
class FreshnessTrace:
    """Age of the most recent document of one family."""
    doc_type: FreshnessDocType
    supporting_docs: list[SupportingDocument]
    latest_date: Optional[date]
    age_days: Optional[int]
    max_age_days: int
    within_threshold: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "doc_type": self.doc_type.value,
            "supporting_docs": [d.to_dict() for d in self.supporting_docs],
            "latest_date": self.latest_date.isoformat() if self.latest_date else None,
            "age_days": self.age_days,
            "max_age_days": self.max_age_days,
            "within_threshold": self.within_threshold,
        }


@dataclass
class TraceSection:
    """Complete evidentiary trace for one profile."""
    ubos: list[UboTrace] = field(default_factory=list)
    address_evidence: list[AddressEvidenceTrace] = field(default_factory=list)
    powers: list[PowerTrace] = field(default_factory=list)
    freshness: list[FreshnessTrace] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ubos": [u.to_dict() for u in self.ubos],
            "address_evidence": [a.to_dict() for a in self.address_evidence],
            "powers": [p.to_dict() for p in self.powers],
            "freshness": [f.to_dict() for f in self.freshness],
        }
