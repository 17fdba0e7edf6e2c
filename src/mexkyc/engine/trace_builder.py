"""
MexKYC Trace Builder

Reconstructs the evidence behind a decision from the same profile the
orchestrator scored:
- Per-shareholder ownership / voting math with the UBO threshold
- Addresses by role with the documents that supplied them
- Per-signatory matched and missing powers
- Per-family document ages

Pure derivation; the score never consults it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    Address,
    AddressEvidenceTrace,
    AddressRole,
    KycProfile,
    PowerTrace,
    TraceSection,
    TraceSource,
    UboTrace,
)
from .address_comparator import compare_addresses
from .address_resolver import operational_address_candidates, resolve_addresses
from .freshness import check_freshness
from .signatory_resolver import resolve_signatories
from .ubo_resolver import resolve_ubos


def _fmt_shares(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


@dataclass
class TraceBuilder:
    """
    Builds the audit trace for a profile.

    Usage:
        trace = TraceBuilder().build(profile, as_of=date(2025, 1, 15))
    """
    config: EngineConfig = field(default_factory=EngineConfig)

    def build(self, profile: KycProfile, as_of: date) -> TraceSection:
        resolved = resolve_addresses(profile, self.config)
        return TraceSection(
            ubos=self._ubos(resolved),
            address_evidence=self._addresses(resolved),
            powers=self._powers(resolved),
            freshness=check_freshness(resolved, as_of, self.config),
        )

    def _ubos(self, profile: KycProfile) -> list[UboTrace]:
        if profile.company_identity is None:
            return []
        threshold = self.config.ubo_threshold_pct
        resolution = resolve_ubos(profile.company_identity.shareholders, threshold)
        entries: list[UboTrace] = []
        for holder in resolution.holders:
            if holder.has_voting_rights and resolution.total_voting_shares > 0 and holder.shares:
                calculation = (
                    f"{_fmt_shares(holder.shares)} / {_fmt_shares(resolution.total_voting_shares)} "
                    f"voting shares = {holder.voting_pct:.2f}%"
                )
            elif holder.has_voting_rights:
                calculation = f"Voting weight from stated percentage = {holder.voting_pct:.2f}%"
            else:
                calculation = "Non-voting shares; excluded from control calculation"
            verdict = "UBO" if holder.is_ubo else "not UBO"
            entries.append(UboTrace(
                name=holder.name,
                shares=holder.shares,
                total_shares=resolution.total_shares,
                total_voting_shares=resolution.total_voting_shares,
                ownership_pct=round(holder.ownership_pct, 2),
                voting_pct=round(holder.voting_pct, 2),
                has_voting_rights=holder.has_voting_rights,
                is_ubo=holder.is_ubo,
                threshold_pct=threshold,
                calculation=f"{calculation} (threshold >{threshold:g}%: {verdict})",
            ))
        return entries

    def _addresses(self, profile: KycProfile) -> list[AddressEvidenceTrace]:
        entries: list[AddressEvidenceTrace] = []

        founding_sources = []
        if profile.founding_address is not None:
            founding_sources.append(TraceSource(
                "Acta Constitutiva",
                f"Founding address: {profile.founding_address.one_line()}",
            ))
        entries.append(AddressEvidenceTrace(AddressRole.FOUNDING, profile.founding_address, founding_sources))

        fiscal_sources = []
        if profile.current_fiscal_address is not None:
            fiscal_sources.append(TraceSource(
                "SAT Constancia de Situación Fiscal",
                f"Fiscal address: {profile.current_fiscal_address.one_line()}",
            ))
        entries.append(AddressEvidenceTrace(AddressRole.FISCAL, profile.current_fiscal_address, fiscal_sources))

        entries.append(AddressEvidenceTrace(
            AddressRole.OPERATIONAL,
            profile.current_operational_address,
            self._operational_sources(profile),
        ))
        return entries

    def _operational_sources(self, profile: KycProfile) -> list[TraceSource]:
        operational = profile.current_operational_address
        if operational is None:
            return []
        sources = [
            TraceSource(label, f"Address on document: {address.one_line()}")
            for label, address in operational_address_candidates(profile, self.config)
            if self._same(address, operational)
        ]
        if not sources:
            sources.append(TraceSource(
                "Inferred from Fiscal/Other",
                f"No operational document; using {operational.one_line()}",
            ))
        return sources

    def _same(self, a: Address, b: Address) -> bool:
        return a is b or compare_addresses(a, b, self.config.address_equivalence_threshold).equivalent

    def _powers(self, profile: KycProfile) -> list[PowerTrace]:
        return [
            PowerTrace(
                name=info.name,
                role=info.role,
                scope=info.scope,
                matched_phrases=list(info.matched_phrases),
                missing_powers=list(info.missing_powers),
                limitations=list(info.limitations),
                sources=[TraceSource(s, f"Representative record for {info.name}") for s in info.sources],
            )
            for info in resolve_signatories(profile, self.config)
        ]


def build_trace(
    profile: KycProfile,
    as_of: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TraceSection:
    """Build a trace with a one-off builder."""
    return TraceBuilder(config=config).build(profile, as_of)
