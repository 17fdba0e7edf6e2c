"""
MexKYC Engine Configuration

Explicit configuration threaded through every engine entry point.
Nothing in the engine reads process-wide state; a caller that wants
demo behaviour or different thresholds builds an ``EngineConfig`` (by
hand or from a rule pack) and passes it in.

Contains:
- PenaltyTable: score deductions per check outcome
- LegalPhraseTable: power-of-attorney phrase patterns and keyword lists
- EngineConfig: thresholds, demo-mode toggle and the two tables above

Usage:
    from mexkyc.config import EngineConfig, DEFAULT_CONFIG

    config = EngineConfig(demo_mode=True)
    result = validate_kyc_profile(profile, as_of=date(2025, 1, 15), config=config)
"""
from __future__ import annotations

from dataclasses import dataclass, field


# =============================================================================
# Penalty Table
# =============================================================================

@dataclass(frozen=True)
class PenaltyTable:
    """
    Score deductions applied by the orchestrator.

    Penalties are additive across independent checks and the final
    score is floored at zero.
    """
    # UBO / equity
    ubo_missing: float = 0.10
    equity_inconsistent: float = 0.20
    equity_near_100: float = 0.05

    # Signatories
    no_full_signatory: float = 0.10
    representative_not_in_deed: float = 0.05
    representative_without_powers: float = 0.05

    # Identity matrix
    identity_missing: float = 0.20
    foreign_only_passport: float = 0.20
    foreign_only_immigration: float = 0.10
    identity_name_mismatch: float = 0.10

    # Immigration / identity document outcomes
    document_status_critical: float = 0.25
    document_only_critical: float = 0.10
    document_warning: float = 0.05

    # Addresses and proof of address
    address_zip_mismatch: float = 0.10
    poa_corporate_third_party: float = 0.25
    poa_corporate_address_relief: float = 0.10
    poa_family: float = 0.05
    poa_landlord: float = 0.10
    poa_landlord_address_match: float = 0.05
    poa_missing_with_bank: float = 0.05
    poa_missing: float = 0.20

    # Document coverage
    missing_deed: float = 0.30
    missing_tax_profile_moral: float = 0.30
    missing_tax_profile_fisica: float = 0.20
    wrong_sat_type: float = 0.30
    tax_regime_no_commerce: float = 0.10
    tax_status_inactive: float = 0.10

    # Registry and foreign investment
    missing_fme: float = 0.05
    missing_rnie: float = 0.10
    missing_sre_convenio: float = 0.05

    # Freshness
    poa_stale: float = 0.10
    bank_statement_stale: float = 0.05


# =============================================================================
# Legal Phrase Table
# =============================================================================

@dataclass(frozen=True)
class LegalPhraseTable:
    """
    Pattern table for power-of-attorney text.

    All patterns and keywords are matched against upper-cased,
    accent-folded text, so they are written without diacritics.
    """
    power_patterns: tuple[tuple[str, str], ...] = (
        ("pleitos_y_cobranzas", r"PLEITOS?\s+Y\s+COBRANZAS?"),
        ("actos_de_administracion", r"ACTOS?\s+DE\s+ADMINISTRACION"),
        ("actos_de_dominio", r"ACTOS?\s+DE\s+DOMINIO"),
        ("titulos_de_credito", r"TITULOS?\s+DE\s+CREDITO"),
    )
    administration_power: str = "actos_de_administracion"
    restriction_keywords: tuple[str, ...] = (
        "SOLO",
        "SOLAMENTE",
        "UNICAMENTE",
        "EXCLUSIVAMENTE",
        "EN MATERIA LABORAL",
        "LIMITADO A",
        "RESTRINGIDO",
    )
    limited_role_labels: tuple[str, ...] = (
        "APODERADO ESPECIAL",
        "APODERADO LIMITADO",
    )
    limited_power_labels: tuple[str, ...] = (
        "PODERES ESPECIALES",
        "PODERES LIMITADOS",
    )
    officer_titles: tuple[str, ...] = (
        "SECRETARIO",
        "VOCAL",
        "COMISARIO",
        "CONSEJERO",
        "TESORERO",
        "MIEMBRO DEL CONSEJO",
    )
    attorney_label: str = "APODERADO"

    @property
    def power_names(self) -> list[str]:
        """Canonical power names in table order."""
        return [name for name, _ in self.power_patterns]


# =============================================================================
# Engine Configuration
# =============================================================================

@dataclass(frozen=True)
class EngineConfig:
    """
    Complete engine configuration.

    Attributes:
        demo_mode: Prefer the bank identity page over statement profiles
        ubo_threshold_pct: Voting percentage above which a holder is a UBO
        freshness_max_days: Maximum age of proof-of-address / statements
        expiring_soon_days: Residence-card window that triggers a warning
        aged_card_years: Age after which an open-ended permanent card is flagged
        address_equivalence_threshold: Minimum confidence for equivalent addresses
        name_overlap_threshold: Token overlap above which two names match
        identity_name_overlap_min: Minimum word overlap between ID and tax names
        penalties: Score deductions
        legal_phrases: Power-of-attorney phrase table
    """
    demo_mode: bool = False
    ubo_threshold_pct: float = 25.0
    freshness_max_days: int = 90
    expiring_soon_days: int = 30
    aged_card_years: int = 10
    address_equivalence_threshold: float = 0.75
    name_overlap_threshold: float = 0.7
    identity_name_overlap_min: float = 0.5
    penalties: PenaltyTable = field(default_factory=PenaltyTable)
    legal_phrases: LegalPhraseTable = field(default_factory=LegalPhraseTable)


DEFAULT_CONFIG = EngineConfig()
