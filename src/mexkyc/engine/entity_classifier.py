"""
MexKYC Entity Classifier

Determines whether the customer is a Persona Moral or one of the two
Persona Física subtypes. The classification gates every corporate check
downstream.

Priority order:
1. An incorporation deed exists -> PERSONA_MORAL, always
2. 3-letter RFC -> PERSONA_MORAL
3. 4-letter RFC -> subtype by tax regime and economic activities
4. Otherwise -> UNKNOWN
"""
from __future__ import annotations

from typing import Optional

from ..models import CompanyTaxProfile, EntityType, KycProfile
from .text import fold, rfc_kind


BUSINESS_REGIME_KEYWORDS: tuple[str, ...] = (
    "ACTIVIDAD EMPRESARIAL",
    "ACTIVIDADES EMPRESARIALES",
    "EMPRESARIAL",
    "PROFESIONAL",
    "RESICO",
    "SIMPLIFICADO DE CONFIANZA",
    "INCORPORACION FISCAL",
    "ARRENDAMIENTO",
    "PLATAFORMAS TECNOLOGICAS",
)


def classify_persona_fisica(tax_profile: Optional[CompanyTaxProfile]) -> EntityType:
    """Pick the Persona Física subtype from the tax regime text."""
    if tax_profile is None:
        return EntityType.PERSONA_FISICA_SIN_OBLIGACIONES

    regime = fold(tax_profile.tax_regime)
    if "SIN OBLIGACIONES" in regime:
        return EntityType.PERSONA_FISICA_SIN_OBLIGACIONES
    if any(keyword in regime for keyword in BUSINESS_REGIME_KEYWORDS):
        return EntityType.PERSONA_FISICA_EMPRESARIAL
    if tax_profile.economic_activities:
        return EntityType.PERSONA_FISICA_EMPRESARIAL
    return EntityType.PERSONA_FISICA_SIN_OBLIGACIONES


def classify_entity(profile: KycProfile) -> EntityType:
    """Classify the customer's legal-entity type."""
    if profile.company_identity is not None:
        return EntityType.PERSONA_MORAL

    rfc = None
    if profile.company_tax_profile is not None:
        rfc = profile.company_tax_profile.rfc

    kind = rfc_kind(rfc)
    if kind == "moral":
        return EntityType.PERSONA_MORAL
    if kind == "fisica":
        return classify_persona_fisica(profile.company_tax_profile)
    return EntityType.UNKNOWN
