"""
MexKYC Signatory Power Resolver

Decides how much signing authority each legal representative holds,
based on the four canonical Mexican power-of-attorney grants:

- Pleitos y cobranzas
- Actos de administración
- Actos de dominio
- Títulos de crédito

Scope rules:
- none: not empowered to sign, or a pure officer title (secretario,
  vocal, comisario...) without an apoderado designation
- full: all four grants, no especial / limitado label, and no
  restriction clause narrowing the administrative grant
- limited: everything else

The patterns and keyword lists live in ``LegalPhraseTable`` so that a
change in legal wording is a configuration edit.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig, LegalPhraseTable
from ..models import KycProfile, LegalRepresentative, PowerScope
from .text import fold


# =============================================================================
# Result
# =============================================================================

@dataclass
class SignatoryInfo:
    """Resolved signing position of one representative."""
    name: str
    role: Optional[str]
    scope: PowerScope
    matched_phrases: list[str] = field(default_factory=list)
    missing_powers: list[str] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)


# =============================================================================
# Pattern Compilation
# =============================================================================

@lru_cache(maxsize=16)
def _compiled(table: LegalPhraseTable) -> tuple[tuple[tuple[str, re.Pattern], ...], tuple[re.Pattern, ...]]:
    powers = tuple((name, re.compile(pattern)) for name, pattern in table.power_patterns)
    restrictions = tuple(
        re.compile(r"\b" + re.escape(keyword) + r"\b") for keyword in table.restriction_keywords
    )
    return powers, restrictions


def _is_pure_officer(role: str, table: LegalPhraseTable) -> bool:
    if not role or table.attorney_label in role:
        return False
    return any(title in role for title in table.officer_titles)


# =============================================================================
# Single Representative
# =============================================================================

def resolve_representative(
    representative: LegalRepresentative,
    table: Optional[LegalPhraseTable] = None,
) -> SignatoryInfo:
    """Resolve one representative record in isolation."""
    table = table or DEFAULT_CONFIG.legal_phrases
    power_patterns, restriction_patterns = _compiled(table)
    role = fold(representative.role)
    fragments = [fold(p) for p in representative.powers if p]
    sources = [representative.source_document] if representative.source_document else []

    def result(scope: PowerScope, matched: list[str], limitations: list[str]) -> SignatoryInfo:
        missing = [name for name in table.power_names if name not in matched]
        return SignatoryInfo(
            name=representative.name.strip(),
            role=representative.role,
            scope=scope,
            matched_phrases=matched,
            missing_powers=[] if scope == PowerScope.FULL else missing,
            limitations=[] if scope == PowerScope.FULL else limitations,
            sources=sources,
        )

    matched = [
        name for name, pattern in power_patterns
        if any(pattern.search(fragment) for fragment in fragments)
    ]

    if not representative.can_sign_contracts:
        return result(PowerScope.NONE, matched, ["Not empowered to sign contracts"])
    if _is_pure_officer(role, table):
        return result(PowerScope.NONE, matched, [f"Officer role without power of attorney: {representative.role}"])

    limitations: list[str] = []
    joined = " ".join(fragments)
    if any(label in role for label in table.limited_role_labels) or any(
        label in joined for label in table.limited_power_labels
    ):
        limitations.append("Explicit special/limited power designation")

    admin_pattern = dict(power_patterns).get(table.administration_power)
    if admin_pattern is not None:
        for fragment in fragments:
            if admin_pattern.search(fragment) and any(r.search(fragment) for r in restriction_patterns):
                limitations.append(f"Administrative power restricted: {fragment}")

    if len(matched) == len(power_patterns) and not limitations:
        return result(PowerScope.FULL, matched, [])
    return result(PowerScope.LIMITED, matched, limitations)


# =============================================================================
# Merge Across Documents
# =============================================================================

def merge_signatories(
    signatories: list[SignatoryInfo],
    table: Optional[LegalPhraseTable] = None,
) -> list[SignatoryInfo]:
    """
    Merge records for the same person found in several documents.
    Records are keyed by name, ignoring case, accents and spacing.

    Highest scope wins, matched phrases union, missing powers intersect,
    and limitations are cleared once any record establishes full scope.
    """
    table = table or DEFAULT_CONFIG.legal_phrases
    order = table.power_names
    merged: dict[str, SignatoryInfo] = {}

    for info in signatories:
        key = fold(info.name)
        current = merged.get(key)
        if current is None:
            merged[key] = SignatoryInfo(
                name=info.name,
                role=info.role,
                scope=info.scope,
                matched_phrases=list(info.matched_phrases),
                missing_powers=list(info.missing_powers),
                limitations=list(info.limitations),
                sources=list(info.sources),
            )
            continue

        if info.scope.rank > current.scope.rank:
            current.scope = info.scope
        phrases = set(current.matched_phrases) | set(info.matched_phrases)
        current.matched_phrases = [name for name in order if name in phrases]
        current.missing_powers = [
            name for name in current.missing_powers if name in info.missing_powers
        ]
        current.missing_powers = [
            name for name in current.missing_powers if name not in phrases
        ]
        for limitation in info.limitations:
            if limitation not in current.limitations:
                current.limitations.append(limitation)
        if info.role and info.role != current.role:
            roles = (current.role or "").split(" / ")
            if info.role not in roles:
                current.role = f"{current.role} / {info.role}" if current.role else info.role
        for source in info.sources:
            if source not in current.sources:
                current.sources.append(source)

    results = list(merged.values())
    for info in results:
        if info.scope == PowerScope.FULL:
            info.limitations = []
            info.missing_powers = []
    return results


def resolve_signatories(
    profile: KycProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[SignatoryInfo]:
    """Resolve and merge every representative in the deed and separate powers."""
    representatives: list[LegalRepresentative] = []
    if profile.company_identity is not None:
        representatives.extend(profile.company_identity.legal_representatives)
    representatives.extend(profile.power_of_attorney_records)

    resolved = [resolve_representative(r, config.legal_phrases) for r in representatives]
    return merge_signatories(resolved, config.legal_phrases)
