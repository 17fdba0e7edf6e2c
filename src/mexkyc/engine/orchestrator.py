"""
MexKYC Decision Orchestrator

Runs every check over a customer profile and produces the scored
ValidationResult.

Sequence:
1. Classify the entity
2. Persona Moral: deed vs SAT coherence (mismatch = score 0, stop)
3. Resolve addresses (new profile, caller's is untouched)
4. Infer nationality
5. Identity-document requirement matrix
6. Identity-document validity; Persona Física name and regime checks
7. Persona Moral: UBOs, equity consistency, signatories
8. Fiscal vs operational postal code
9. Proof of address
10. Document coverage, wrong SAT type, tax status
11. Registry folio for sociedades mercantiles
12. Foreign ownership filings (RNIE, SRE)
13. Freshness of proof of address and bank statements
14. Summary checklist

Final score = max(0, 1.0 - sum of penalties).

Usage:
    engine = KycDecisionEngine(config=EngineConfig())
    result = engine.validate(profile, as_of=date(2025, 1, 15))
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    EntityType,
    FlagLevel,
    FreshnessDocType,
    IdentityDocument,
    ImmigrationStatus,
    KycProfile,
    NationalId,
    PowerScope,
    ValidationFlag,
    ValidationResult,
)
from .address_comparator import normalize_cp
from .address_resolver import resolve_addresses
from .entity_classifier import classify_entity
from .entity_coherence import check_entity_coherence
from .freshness import check_freshness, freshness_for
from .identity_checks import (
    check_identity_requirements,
    determine_nationality,
    identity_name_overlap,
)
from .immigration_validator import outcome_penalty, validate_identity_document
from .proof_of_address import validate_proof_of_address
from .signatory_resolver import SignatoryInfo, resolve_signatories
from .text import fold, is_sociedad_mercantil, names_match
from .ubo_resolver import UboResolution, check_equity_consistency, resolve_ubos

logger = logging.getLogger(__name__)


# =============================================================================
# Scorecard
# =============================================================================

@dataclass
class _Scorecard:
    """Accumulates flags and checklist entries during one validation."""
    flags: list[ValidationFlag] = field(default_factory=list)
    verified: list[str] = field(default_factory=list)
    not_verified: list[str] = field(default_factory=list)

    def add(
        self,
        code: str,
        level: FlagLevel,
        message: str,
        penalty: float = 0.0,
        action_required: Optional[str] = None,
        supporting_docs: tuple[str, ...] = (),
    ) -> None:
        self.flags.append(ValidationFlag(
            code=code,
            level=level,
            message=message,
            action_required=action_required,
            supporting_docs=supporting_docs,
            score_impact=round(penalty, 4),
        ))

    def extend(self, flags: list[ValidationFlag]) -> None:
        self.flags.extend(flags)

    def check(self, item: str, ok: bool) -> None:
        (self.verified if ok else self.not_verified).append(item)

    @property
    def score(self) -> float:
        total = sum(f.score_impact for f in self.flags)
        return max(0.0, round(1.0 - total, 4))


def _document_label(document: IdentityDocument) -> str:
    if isinstance(document, NationalId):
        return fold(document.document_type) or "INE"
    if isinstance(document, ImmigrationStatus):
        return document.document_type or "Immigration Document"
    return "Passport"


# =============================================================================
# Decision Engine
# =============================================================================

@dataclass
class KycDecisionEngine:
    """
    Deterministic KYC decision engine.

    Pure function of (profile, as_of, config): no I/O, no shared state.
    ``generated_at`` may be injected for fully reproducible output.
    """
    config: EngineConfig = field(default_factory=EngineConfig)

    def validate(
        self,
        profile: KycProfile,
        as_of: date,
        generated_at: Optional[datetime] = None,
    ) -> ValidationResult:
        """Validate a profile and return its score and flags."""
        config = self.config
        penalties = config.penalties
        generated_at = generated_at or datetime.now(timezone.utc)
        card = _Scorecard()

        # 1. Entity classification
        entity_type = classify_entity(profile)
        is_moral = entity_type == EntityType.PERSONA_MORAL
        logger.debug("Customer %s classified as %s", profile.customer_id, entity_type.value)

        # 2. Coherence hard stop
        wrong_sat_type = False
        if is_moral:
            coherence = check_entity_coherence(profile)
            if not coherence.coherent:
                logger.info("Customer %s rejected: entity mismatch", profile.customer_id)
                return ValidationResult(
                    customer_id=profile.customer_id,
                    score=0.0,
                    flags=[ValidationFlag(
                        code="ENTITY_MISMATCH",
                        level=FlagLevel.CRITICAL,
                        message=coherence.reason or "Deed and SAT certificate describe different entities.",
                        action_required="Confirm that the deed and SAT certificate belong to the same company.",
                        supporting_docs=("Acta Constitutiva", "SAT Constancia de Situación Fiscal"),
                        score_impact=1.0,
                    )],
                    entity_type=entity_type,
                    generated_at=generated_at,
                )
            wrong_sat_type = coherence.wrong_sat_type

        # 3. Address resolution
        resolved = resolve_addresses(profile, config)

        # 4-6. Identity
        nationality = determine_nationality(resolved)
        requirement = check_identity_requirements(resolved, nationality, config)
        if requirement is not None:
            card.add(
                requirement.code, requirement.level, requirement.message,
                penalty=requirement.penalty, action_required=requirement.action_required,
            )

        documents_ok = requirement is None
        for document in resolved.identity_documents():
            outcome = validate_identity_document(document, as_of, config)
            documents_ok = documents_ok and outcome.is_valid
            card.add(
                outcome.code, outcome.level, outcome.message,
                penalty=outcome_penalty(outcome, penalties),
                action_required=outcome.action_required,
                supporting_docs=(_document_label(document),),
            )
        card.check(f"Identity documents ({nationality.value} national)", documents_ok)

        if entity_type.is_persona_fisica:
            self._check_persona_fisica(resolved, entity_type, card)

        # 7. Corporate structure
        ubo_resolution: Optional[UboResolution] = None
        if is_moral:
            ubo_resolution = self._check_corporate_structure(resolved, card)

        # 8. Zip consistency
        fiscal_cp = normalize_cp(resolved.current_fiscal_address.cp) if resolved.current_fiscal_address else ""
        operational_cp = (
            normalize_cp(resolved.current_operational_address.cp)
            if resolved.current_operational_address else ""
        )
        if fiscal_cp and operational_cp and fiscal_cp != operational_cp:
            card.add(
                "ADDRESS_MISMATCH", FlagLevel.WARNING,
                f"Fiscal zip ({fiscal_cp}) does not match operational zip ({operational_cp}).",
                penalty=penalties.address_zip_mismatch,
                action_required="Confirm the operating address or request an updated SAT certificate.",
            )

        # 9. Proof of address
        poa = validate_proof_of_address(resolved, entity_type, config)
        card.extend(poa.flags)
        card.check("Proof of address", poa.is_valid)

        # 10. Coverage
        self._check_coverage(resolved, entity_type, wrong_sat_type, card)

        # 11-12. Registry and foreign investment
        if is_moral and resolved.company_identity is not None:
            self._check_registry(resolved, card)
            if ubo_resolution is not None:
                self._check_foreign_investment(resolved, ubo_resolution, card)

        # 13. Freshness
        freshness = check_freshness(resolved, as_of, config)
        poa_age = freshness_for(freshness, FreshnessDocType.PROOF_OF_ADDRESS)
        if poa_age is not None and poa_age.age_days is not None:
            stale = poa_age.age_days > config.freshness_max_days
            if stale:
                card.add(
                    "POA_STALE", FlagLevel.WARNING,
                    f"Latest proof of address is {poa_age.age_days} days old "
                    f"(limit {config.freshness_max_days}).",
                    penalty=penalties.poa_stale,
                    action_required="Request a proof of address issued within the last 3 months.",
                    supporting_docs=tuple(d.label for d in poa_age.supporting_docs),
                )
            card.check("Proof of address freshness", not stale)
        bank_age = freshness_for(freshness, FreshnessDocType.BANK_STATEMENT)
        if bank_age is not None and bank_age.age_days is not None:
            if bank_age.age_days > config.freshness_max_days:
                card.add(
                    "BANK_STATEMENT_STALE", FlagLevel.WARNING,
                    f"Latest bank statement is {bank_age.age_days} days old "
                    f"(limit {config.freshness_max_days}).",
                    penalty=penalties.bank_statement_stale,
                    action_required="Request a bank statement from the last 3 months.",
                    supporting_docs=tuple(d.label for d in bank_age.supporting_docs),
                )

        # 14. Checklist
        card.add("KYC_CHECKLIST", FlagLevel.INFO, self._checklist_message(entity_type, card))

        logger.info(
            "Customer %s validated: score=%.4f flags=%d",
            profile.customer_id, card.score, len(card.flags),
        )
        return ValidationResult(
            customer_id=profile.customer_id,
            score=card.score,
            flags=card.flags,
            entity_type=entity_type,
            generated_at=generated_at,
        )

    # -------------------------------------------------------------------------
    # Persona Física
    # -------------------------------------------------------------------------

    def _check_persona_fisica(
        self,
        profile: KycProfile,
        entity_type: EntityType,
        card: _Scorecard,
    ) -> None:
        penalties = self.config.penalties
        tax = profile.company_tax_profile
        docs = profile.identity_documents()

        if tax is not None and docs:
            overlap = identity_name_overlap(tax.razon_social, docs[0].full_name)
            if overlap is not None and overlap < self.config.identity_name_overlap_min:
                card.add(
                    "IDENTITY_MISMATCH", FlagLevel.WARNING,
                    f"SAT name ({tax.razon_social}) does not match identity document name ({docs[0].full_name}).",
                    penalty=penalties.identity_name_mismatch,
                    action_required="Confirm the customer's identity document matches the SAT registration.",
                )

        if entity_type == EntityType.PERSONA_FISICA_SIN_OBLIGACIONES:
            card.add(
                "TAX_REGIME_NO_COMMERCE", FlagLevel.WARNING,
                "Tax regime 'Sin obligaciones fiscales' does not allow business activity.",
                penalty=penalties.tax_regime_no_commerce,
                action_required="Request an updated SAT certificate with a business tax regime.",
                supporting_docs=("SAT Constancia de Situación Fiscal",),
            )

    # -------------------------------------------------------------------------
    # Persona Moral
    # -------------------------------------------------------------------------

    def _check_corporate_structure(self, profile: KycProfile, card: _Scorecard) -> UboResolution:
        config = self.config
        penalties = config.penalties
        deed = profile.company_identity
        shareholders = deed.shareholders if deed is not None else []
        deed_docs = ("Acta Constitutiva",) if deed is not None else ()
        resolution = resolve_ubos(shareholders, config.ubo_threshold_pct)

        ubos = resolution.ubos
        if ubos:
            names = ", ".join(f"{u.name} ({u.voting_pct:.2f}%)" for u in ubos)
            card.add(
                "UBO_IDENTIFIED", FlagLevel.INFO,
                f"Beneficial owners identified: {names}.",
                supporting_docs=deed_docs,
            )
        else:
            card.add(
                "UBO_MISSING", FlagLevel.WARNING,
                f"No beneficial owners (>{config.ubo_threshold_pct:g}%) detected from shareholder structure.",
                penalty=penalties.ubo_missing,
                action_required="Request the beneficial ownership declaration.",
                supporting_docs=deed_docs,
            )
        card.check("Beneficial owners", bool(ubos))

        equity = check_equity_consistency(shareholders)
        if equity is not None:
            if equity.deviation_from_100 > 2:
                card.add(
                    "EQUITY_INCONSISTENT", FlagLevel.CRITICAL,
                    f"Share percentages sum to {equity.sum_of_percentages:.2f}%, "
                    "inconsistent with 100%. Possible extraction error.",
                    penalty=penalties.equity_inconsistent,
                    action_required="Review the capital table in the deed and its modifications.",
                )
            elif equity.deviation_from_100 > 1:
                card.add(
                    "EQUITY_NEAR_100", FlagLevel.WARNING,
                    f"Share percentages sum to {equity.sum_of_percentages:.2f}%; likely rounding.",
                    penalty=penalties.equity_near_100,
                )

        signatories = resolve_signatories(profile, config)
        has_full = any(s.scope == PowerScope.FULL for s in signatories)
        if not has_full:
            card.add(
                "SIGNATORY_NO_FULL_POWERS", FlagLevel.WARNING,
                "No signatory with full powers (pleitos y cobranzas, administración, dominio, títulos de crédito).",
                penalty=penalties.no_full_signatory,
                action_required="Request a notarized power of attorney granting full powers.",
            )
        card.check("Signatory with full powers", has_full)

        self._check_representative(profile, signatories, card)
        return resolution

    def _check_representative(
        self,
        profile: KycProfile,
        signatories: list[SignatoryInfo],
        card: _Scorecard,
    ) -> None:
        penalties = self.config.penalties
        docs = profile.identity_documents()
        if not docs or not signatories:
            return
        rep_name = docs[0].full_name
        match = next(
            (s for s in signatories if names_match(rep_name, s.name, self.config.name_overlap_threshold)),
            None,
        )
        if match is None:
            card.add(
                "REPRESENTATIVE_NOT_IN_DEED", FlagLevel.WARNING,
                f"Identity document holder {rep_name} is not a legal representative in the deed.",
                penalty=penalties.representative_not_in_deed,
                action_required="Request the power of attorney naming the representative.",
            )
        elif match.scope == PowerScope.NONE:
            card.add(
                "REPRESENTATIVE_WITHOUT_POWERS", FlagLevel.WARNING,
                f"Representative {match.name} appears in the deed without signing powers.",
                penalty=penalties.representative_without_powers,
                action_required="Request a power of attorney for the representative.",
            )

    def _check_registry(self, profile: KycProfile, card: _Scorecard) -> None:
        deed = profile.company_identity
        if not is_sociedad_mercantil(deed.razon_social):
            return
        has_folio = (deed.registry is not None and deed.registry.has_folio) or bool(
            profile.registry_boleta and (profile.registry_boleta.numero_unico_documento or "").strip()
        )
        if not has_folio:
            card.add(
                "MISSING_FME", FlagLevel.WARNING,
                "No Folio Mercantil Electrónico found for the sociedad mercantil.",
                penalty=self.config.penalties.missing_fme,
                action_required="Request the Registro Público de Comercio inscription (boleta).",
                supporting_docs=("Acta Constitutiva",),
            )
        card.check("Commercial registry folio", has_folio)

    def _check_foreign_investment(
        self,
        profile: KycProfile,
        resolution: UboResolution,
        card: _Scorecard,
    ) -> None:
        penalties = self.config.penalties
        foreign = [h.name for h in resolution.holders if h.is_foreign]
        if not foreign:
            return
        holders = ", ".join(foreign)
        has_rnie = bool(profile.rnie_registration and profile.rnie_registration.folio_ingreso)
        has_sre = bool(profile.sre_convenio and profile.sre_convenio.folio)
        if not has_rnie:
            card.add(
                "MISSING_RNIE", FlagLevel.WARNING,
                f"Foreign shareholders ({holders}) but no RNIE registration on file.",
                penalty=penalties.missing_rnie,
                action_required="Request the Registro Nacional de Inversiones Extranjeras acuse.",
            )
        if not has_sre:
            card.add(
                "MISSING_SRE_CONVENIO", FlagLevel.WARNING,
                f"Foreign shareholders ({holders}) but no SRE convenio de extranjería on file.",
                penalty=penalties.missing_sre_convenio,
                action_required="Request the SRE convenio de extranjería registration.",
            )
        card.check("Foreign investment filings", has_rnie and has_sre)

    # -------------------------------------------------------------------------
    # Coverage
    # -------------------------------------------------------------------------

    def _check_coverage(
        self,
        profile: KycProfile,
        entity_type: EntityType,
        wrong_sat_type: bool,
        card: _Scorecard,
    ) -> None:
        penalties = self.config.penalties
        is_moral = entity_type == EntityType.PERSONA_MORAL

        if is_moral:
            has_deed = profile.company_identity is not None
            if not has_deed:
                card.add(
                    "LOW_DOC_COVERAGE", FlagLevel.CRITICAL,
                    "Missing Company Identity (Acta Constitutiva).",
                    penalty=penalties.missing_deed,
                    action_required="Request the Acta Constitutiva.",
                )
            card.check("Acta Constitutiva", has_deed)

        tax = profile.company_tax_profile
        if tax is None:
            card.add(
                "MISSING_CONSTANCIA", FlagLevel.CRITICAL,
                "Missing Tax Profile (SAT Constancia de Situación Fiscal).",
                penalty=penalties.missing_tax_profile_moral if is_moral else penalties.missing_tax_profile_fisica,
                action_required="Request a Constancia de Situación Fiscal issued within the last 3 months.",
            )
            card.check("SAT Constancia", False)
            return

        if wrong_sat_type:
            card.add(
                "WRONG_SAT_TYPE", FlagLevel.CRITICAL,
                f"SAT certificate RFC {tax.rfc} belongs to a Persona Física; "
                "the company's own Constancia is required.",
                penalty=penalties.wrong_sat_type,
                action_required="Request the company's Constancia de Situación Fiscal.",
                supporting_docs=("SAT Constancia de Situación Fiscal",),
            )
            card.check("SAT Constancia", False)
            return

        active = not tax.status or fold(tax.status) == "ACTIVO"
        if active:
            card.add(
                "SAT_CONSTANCIA_VALID", FlagLevel.INFO,
                f"SAT certificate on file for RFC {tax.rfc or 'N/A'}.",
                supporting_docs=("SAT Constancia de Situación Fiscal",),
            )
        else:
            card.add(
                "TAX_STATUS_INACTIVE", FlagLevel.WARNING,
                f"Taxpayer status is '{tax.status}', not ACTIVO.",
                penalty=penalties.tax_status_inactive,
                action_required="Confirm the taxpayer's registration status with SAT.",
                supporting_docs=("SAT Constancia de Situación Fiscal",),
            )
        card.check("SAT Constancia", active)

    @staticmethod
    def _checklist_message(entity_type: EntityType, card: _Scorecard) -> str:
        verified = ", ".join(card.verified) or "none"
        pending = ", ".join(card.not_verified) or "none"
        return f"KYC checklist ({entity_type.value}). Verified: {verified}. Not verified: {pending}."


# =============================================================================
# Convenience Functions
# =============================================================================

def validate_kyc_profile(
    profile: KycProfile,
    as_of: date,
    config: EngineConfig = DEFAULT_CONFIG,
    generated_at: Optional[datetime] = None,
) -> ValidationResult:
    """Validate a profile with a one-off engine."""
    return KycDecisionEngine(config=config).validate(profile, as_of, generated_at)
