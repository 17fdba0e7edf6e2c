"""
MexKYC Identity Requirements

Nationality inference and the identity-document requirement matrix.

Mexican nationals need one Mexican ID (INE/IFE or Mexican passport).
Foreign nationals need both a passport and an immigration status
document; each missing half carries its own penalty. The same rules
apply to Persona Física customers and to a Persona Moral's
representative.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    FlagLevel,
    ImmigrationStatus,
    KycProfile,
    NationalId,
    Nationality,
    Passport,
)
from .text import fold


def determine_nationality(profile: KycProfile) -> Nationality:
    """
    Infer nationality from the identity documents on file.

    An INE/IFE always implies Mexican; a Mexican passport too. Any
    immigration document or a foreign passport implies foreign.
    """
    docs = profile.identity_documents()
    if any(isinstance(d, NationalId) for d in docs):
        return Nationality.MEXICAN
    passports = [d for d in docs if isinstance(d, Passport)]
    if any(p.is_mexican for p in passports):
        return Nationality.MEXICAN
    if any(isinstance(d, ImmigrationStatus) for d in docs):
        return Nationality.FOREIGN
    if passports:
        return Nationality.FOREIGN
    return Nationality.UNKNOWN


@dataclass(frozen=True)
class IdentityRequirement:
    """A failed identity requirement and its penalty."""
    code: str
    level: FlagLevel
    message: str
    action_required: str
    penalty: float


def check_identity_requirements(
    profile: KycProfile,
    nationality: Nationality,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[IdentityRequirement]:
    """Apply the nationality x document matrix; None when satisfied."""
    penalties = config.penalties
    docs = profile.identity_documents()

    if nationality == Nationality.UNKNOWN:
        return IdentityRequirement(
            code="IDENTITY_DOC_MISSING",
            level=FlagLevel.CRITICAL,
            message="No identity document (INE, passport or immigration card) on file.",
            action_required="Request an official identity document for the customer or legal representative.",
            penalty=penalties.identity_missing,
        )

    if nationality == Nationality.MEXICAN:
        return None

    has_passport = any(isinstance(d, Passport) for d in docs)
    has_status = any(isinstance(d, ImmigrationStatus) for d in docs)
    if has_passport and not has_status:
        return IdentityRequirement(
            code="IMMIGRATION_DOC_MISSING",
            level=FlagLevel.CRITICAL,
            message="Foreign national presented only a passport; no immigration status document on file.",
            action_required="Request Tarjeta de Residente Temporal or Permanente.",
            penalty=penalties.foreign_only_passport,
        )
    if has_status and not has_passport:
        return IdentityRequirement(
            code="PASSPORT_MISSING",
            level=FlagLevel.WARNING,
            message="Foreign national presented an immigration document but no passport.",
            action_required="Request the customer's current passport.",
            penalty=penalties.foreign_only_immigration,
        )
    return None


def identity_name_overlap(tax_name: Optional[str], identity_name: Optional[str]) -> Optional[float]:
    """
    Share of common words between the SAT name and the ID name.

    Words of two letters or fewer are ignored; the ratio is taken over
    the larger word set. None when either name is missing.
    """
    if not tax_name or not identity_name:
        return None
    tax_words = {w for w in fold(tax_name).split(" ") if len(w) > 2}
    id_words = {w for w in fold(identity_name).split(" ") if len(w) > 2}
    if not tax_words or not id_words:
        return None
    return len(tax_words & id_words) / max(len(tax_words), len(id_words))
