"""
MexKYC Proof-of-Address Validator

Decides whether the customer's address is evidenced by a document in
their own name.

Source order:
1. Bank statement whose holder matches the customer (always acceptable)
2. Utility bill whose billed name matches the customer
3. Utility bill in a third party's name:
   - Persona Moral: critical, the bill must be in the company's name
   - Persona Física: shared surname -> family, otherwise landlord
4. Nothing usable: warning when a bank statement exists, else critical

A third-party bill whose address is equivalent to the fiscal address
earns penalty relief.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    BankAccount,
    BankIdentity,
    EntityType,
    FlagLevel,
    KycProfile,
    ProofOfAddress,
    ThirdPartyKind,
    ValidationFlag,
)
from .address_comparator import compare_addresses
from .text import names_match, surname_units

logger = logging.getLogger(__name__)

BankDocument = Union[BankAccount, BankIdentity]


# =============================================================================
# Result
# =============================================================================

@dataclass
class PoaResult:
    """Outcome of proof-of-address validation."""
    is_valid: bool
    source: Optional[str] = None
    third_party_kind: Optional[ThirdPartyKind] = None
    address_matches_fiscal: Optional[bool] = None
    flags: list[ValidationFlag] = field(default_factory=list)

    @property
    def penalty(self) -> float:
        return round(sum(f.score_impact for f in self.flags), 4)


# =============================================================================
# Helpers
# =============================================================================

def customer_names(profile: KycProfile, entity_type: EntityType) -> list[str]:
    """Names the customer may legitimately appear under."""
    names: list[str] = []
    tax = profile.company_tax_profile
    if tax is not None:
        names.extend(n for n in (tax.razon_social, tax.commercial_name) if n)
    if profile.company_identity is not None and profile.company_identity.razon_social:
        names.append(profile.company_identity.razon_social)
    if entity_type != EntityType.PERSONA_MORAL:
        names.extend(d.full_name for d in profile.identity_documents() if d.full_name)
    return names


def bank_documents(profile: KycProfile, config: EngineConfig) -> list[BankDocument]:
    """Bank evidence in preference order; demo mode puts the identity page first."""
    docs: list[BankDocument] = []
    if config.demo_mode and profile.bank_identity is not None:
        docs.append(profile.bank_identity)
    docs.extend(profile.bank_accounts)
    if not config.demo_mode and profile.bank_identity is not None:
        docs.append(profile.bank_identity)
    return docs


def _matches_customer(name: Optional[str], names: list[str], threshold: float) -> bool:
    return any(names_match(name, candidate, threshold) for candidate in names)


def is_family_member(customer_name: Optional[str], third_party_name: Optional[str]) -> bool:
    """Shared-surname heuristic; common given names never count."""
    return bool(surname_units(customer_name) & surname_units(third_party_name))


def _latest_bill(bills: list[ProofOfAddress]) -> ProofOfAddress:
    dated = [b for b in bills if b.document_date is not None]
    if dated:
        return max(dated, key=lambda b: b.document_date)
    return bills[0]


# =============================================================================
# Validator
# =============================================================================

def validate_proof_of_address(
    profile: KycProfile,
    entity_type: EntityType,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PoaResult:
    """
    Validate proof of address for an address-resolved profile.

    The fiscal address used for third-party relief is
    ``profile.current_fiscal_address``.
    """
    penalties = config.penalties
    names = customer_names(profile, entity_type)
    threshold = config.name_overlap_threshold

    for doc in bank_documents(profile, config):
        if _matches_customer(doc.account_holder_name, names, threshold):
            logger.debug("Proof of address satisfied by %s", doc.label)
            return PoaResult(
                is_valid=True,
                source="bank",
                flags=[ValidationFlag(
                    code="BANK_STATEMENT_VALID",
                    level=FlagLevel.INFO,
                    message=f"{doc.label} in the customer's name accepted as proof of address.",
                    supporting_docs=(doc.label,),
                )],
            )

    for bill in profile.address_evidence:
        if _matches_customer(bill.client_name, names, threshold):
            logger.debug("Proof of address satisfied by %s", bill.label)
            return PoaResult(
                is_valid=True,
                source="utility_bill",
                flags=[ValidationFlag(
                    code="POA_VALID",
                    level=FlagLevel.INFO,
                    message=f"{bill.label} billed to the customer accepted as proof of address.",
                    supporting_docs=(bill.label,),
                )],
            )

    if profile.address_evidence:
        bill = _latest_bill(profile.address_evidence)
        address_match = compare_addresses(
            bill.client_address,
            profile.current_fiscal_address,
            config.address_equivalence_threshold,
        ).equivalent
        if entity_type == EntityType.PERSONA_MORAL:
            return _corporate_third_party(bill, address_match, config)
        return _individual_third_party(bill, names, address_match, config)

    if profile.has_bank_evidence:
        return PoaResult(
            is_valid=False,
            flags=[ValidationFlag(
                code="POA_MISSING",
                level=FlagLevel.WARNING,
                message="No proof of address in the customer's name; bank statement holder does not match.",
                action_required="Request a utility bill or bank statement in the customer's name.",
                score_impact=penalties.poa_missing_with_bank,
            )],
        )

    return PoaResult(
        is_valid=False,
        flags=[ValidationFlag(
            code="POA_MISSING",
            level=FlagLevel.CRITICAL,
            message="No proof of address or bank statement provided.",
            action_required="Request a utility bill (no older than 3 months) or a bank statement.",
            score_impact=penalties.poa_missing,
        )],
    )


def _corporate_third_party(
    bill: ProofOfAddress,
    address_match: bool,
    config: EngineConfig,
) -> PoaResult:
    penalties = config.penalties
    penalty = penalties.poa_corporate_third_party
    if address_match:
        penalty -= penalties.poa_corporate_address_relief
    flags = [ValidationFlag(
        code="POA_NAME_MISMATCH",
        level=FlagLevel.CRITICAL,
        message=(
            f"{bill.label} is billed to {bill.client_name or 'an unknown party'}; "
            "a Persona Moral's proof of address must be in the company's name."
        ),
        action_required="Request a proof of address issued to the company.",
        supporting_docs=(bill.label,),
        score_impact=round(penalty, 4),
    )]
    if address_match:
        flags.append(ValidationFlag(
            code="POA_ADDRESS_VERIFIED",
            level=FlagLevel.INFO,
            message=f"{bill.label} address matches the fiscal address on the SAT certificate.",
            supporting_docs=(bill.label,),
        ))
    logger.debug("Corporate third-party proof of address (address match: %s)", address_match)
    return PoaResult(
        is_valid=False,
        source="third_party",
        address_matches_fiscal=address_match,
        flags=flags,
    )


def _individual_third_party(
    bill: ProofOfAddress,
    names: list[str],
    address_match: bool,
    config: EngineConfig,
) -> PoaResult:
    penalties = config.penalties
    family = any(is_family_member(name, bill.client_name) for name in names)
    where = " Address matches the fiscal address." if address_match else ""

    if family:
        return PoaResult(
            is_valid=True,
            source="third_party",
            third_party_kind=ThirdPartyKind.FAMILY,
            address_matches_fiscal=address_match,
            flags=[ValidationFlag(
                code="POA_THIRD_PARTY_FAMILY",
                level=FlagLevel.INFO if address_match else FlagLevel.WARNING,
                message=(
                    f"{bill.label} is billed to {bill.client_name}, who shares a surname "
                    f"with the customer.{where}"
                ),
                action_required=None if address_match else "Request proof of kinship (e.g. birth or marriage certificate).",
                supporting_docs=(bill.label,),
                score_impact=0.0 if address_match else penalties.poa_family,
            )],
        )

    penalty = penalties.poa_landlord_address_match if address_match else penalties.poa_landlord
    return PoaResult(
        is_valid=address_match,
        source="third_party",
        third_party_kind=ThirdPartyKind.LANDLORD,
        address_matches_fiscal=address_match,
        flags=[ValidationFlag(
            code="POA_THIRD_PARTY_LANDLORD",
            level=FlagLevel.WARNING,
            message=f"{bill.label} is billed to {bill.client_name or 'an unknown party'}, presumed landlord.{where}",
            action_required="Request the lease agreement (contrato de arrendamiento).",
            supporting_docs=(bill.label,),
            score_impact=penalty,
        )],
    )
