"""
MexKYC Entity Coherence Checker

For a Persona Moral, the incorporation deed and the SAT certificate
must describe the same company.

- Names are compared after legal-suffix canonicalization with all
  whitespace removed; one being a prefix of the other is accepted to
  tolerate truncated company names.
- RFCs must match exactly when both documents carry one.
- A personal (4-letter) RFC on the SAT certificate next to a deed is
  not an incoherence; it is reported as ``wrong_sat_type`` and scored
  by the orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import KycProfile
from .text import canonicalize_entity_name, normalize_rfc, rfc_kind


@dataclass(frozen=True)
class CoherenceResult:
    """Deed vs tax-certificate agreement."""
    coherent: bool
    wrong_sat_type: bool = False
    reason: Optional[str] = None


def _compact(name: Optional[str]) -> str:
    return canonicalize_entity_name(name).replace(" ", "")


def entity_names_match(a: Optional[str], b: Optional[str]) -> bool:
    """Canonical, whitespace-free equality or prefix containment."""
    ca, cb = _compact(a), _compact(b)
    if not ca or not cb:
        return True
    return ca == cb or ca.startswith(cb) or cb.startswith(ca)


def check_entity_coherence(profile: KycProfile) -> CoherenceResult:
    """Compare the deed with the SAT certificate."""
    deed = profile.company_identity
    tax = profile.company_tax_profile
    if deed is None or tax is None:
        return CoherenceResult(coherent=True)

    if rfc_kind(tax.rfc) == "fisica":
        return CoherenceResult(
            coherent=True,
            wrong_sat_type=True,
            reason=f"SAT certificate RFC {tax.rfc} belongs to a Persona Física.",
        )

    deed_rfc = normalize_rfc(deed.rfc)
    tax_rfc = normalize_rfc(tax.rfc)
    if deed_rfc and tax_rfc and deed_rfc != tax_rfc:
        return CoherenceResult(
            coherent=False,
            reason=f"RFC on deed ({deed.rfc}) does not match SAT certificate RFC ({tax.rfc}).",
        )

    if not entity_names_match(deed.razon_social, tax.razon_social):
        return CoherenceResult(
            coherent=False,
            reason=(
                f"Company name on deed ({deed.razon_social}) does not match "
                f"SAT certificate name ({tax.razon_social})."
            ),
        )

    return CoherenceResult(coherent=True)
