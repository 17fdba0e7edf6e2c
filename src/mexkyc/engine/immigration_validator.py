"""
MexKYC Immigration Document Validator

Decision table over identity documents, keyed by document type and by
whether an expiry date is present. Distinguishes the legal *status*
from the physical *card*: a permanent resident's status never lapses
even when the card does.

| Type                         | Rule                                        |
|------------------------------|---------------------------------------------|
| FMM                          | never valid for onboarding                  |
| Residente Permanente         | valid without expiry; expired card = warning |
| FM2 / FM3                    | obsolete since Nov-2012, critical            |
| Residente Temporal           | needs expiry; past = critical; <=30d warning |
| INE / IFE                    | expiry checked; Jan-1 issue date = warning   |
| Passport                     | expiry checked; expired = warning            |
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig, PenaltyTable
from ..models import (
    FlagLevel,
    IdentityDocument,
    ImmigrationDocType,
    ImmigrationStatus,
    NationalId,
    Passport,
)
from .text import fold


# =============================================================================
# Outcome
# =============================================================================

@dataclass(frozen=True)
class DocumentOutcome:
    """
    Validity decision for one identity document.

    Attributes:
        is_valid: Document is acceptable for onboarding
        status_valid: The legal status it evidences is in force
        document_valid: The physical card / booklet is in force
        code: Flag code
        level: Flag level
        message: Human-readable explanation
        action_required: What to request from the customer
    """
    is_valid: bool
    status_valid: bool
    document_valid: bool
    code: str
    level: FlagLevel
    message: str
    action_required: Optional[str] = None


def outcome_penalty(outcome: DocumentOutcome, penalties: PenaltyTable) -> float:
    """Map an outcome to its score deduction."""
    if outcome.level == FlagLevel.CRITICAL:
        if not outcome.status_valid:
            return penalties.document_status_critical
        return penalties.document_only_critical
    if outcome.level == FlagLevel.WARNING:
        return penalties.document_warning
    return 0.0


# =============================================================================
# Classification
# =============================================================================

def classify_immigration_document(raw_type: Optional[str]) -> ImmigrationDocType:
    """Map the category text printed on the card to a document type."""
    text = fold(raw_type)
    if not text:
        return ImmigrationDocType.UNKNOWN
    if "FMM" in text or "MULTIPLE" in text or "VISITANTE" in text:
        return ImmigrationDocType.FMM
    if "FM3" in text or "FM 3" in text or "NO INMIGRANTE" in text:
        return ImmigrationDocType.FM3
    if "FM2" in text or "FM 2" in text or "INMIGRANTE" in text:
        return ImmigrationDocType.FM2
    if "PERMANENTE" in text:
        return ImmigrationDocType.RESIDENTE_PERMANENTE
    if "TEMPORAL" in text:
        return ImmigrationDocType.RESIDENTE_TEMPORAL
    return ImmigrationDocType.UNKNOWN


def _years_between(start: date, end: date) -> int:
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


# =============================================================================
# Per-Type Rules
# =============================================================================

def _validate_immigration(
    doc: ImmigrationStatus,
    as_of: date,
    config: EngineConfig,
) -> DocumentOutcome:
    doc_type = classify_immigration_document(doc.document_type)
    expiry = doc.expiry_date

    if doc_type == ImmigrationDocType.FMM:
        return DocumentOutcome(
            is_valid=False, status_valid=False, document_valid=False,
            code="IMMIGRATION_DOC_INVALID_TYPE",
            level=FlagLevel.CRITICAL,
            message="FMM (tourist/visitor permit) does not authorize residence and is not valid for onboarding.",
            action_required="Request a Residente Temporal or Residente Permanente card.",
        )

    if doc_type in (ImmigrationDocType.FM2, ImmigrationDocType.FM3):
        return DocumentOutcome(
            is_valid=False, status_valid=True, document_valid=False,
            code="IMMIGRATION_CARD_OLD",
            level=FlagLevel.CRITICAL,
            message=f"{doc_type.value} documents were replaced by Tarjetas de Residente in November 2012 and are obsolete.",
            action_required="Request the current Tarjeta de Residente issued by INM.",
        )

    if doc_type == ImmigrationDocType.RESIDENTE_PERMANENTE:
        if expiry is None:
            if doc.issue_date is not None and _years_between(doc.issue_date, as_of) > config.aged_card_years:
                return DocumentOutcome(
                    is_valid=True, status_valid=True, document_valid=True,
                    code="IMMIGRATION_CARD_AGED",
                    level=FlagLevel.WARNING,
                    message=(
                        f"Residente Permanente card issued {doc.issue_date.isoformat()} is more than "
                        f"{config.aged_card_years} years old; photo may no longer identify the holder."
                    ),
                    action_required="Consider requesting a renewed card.",
                )
            return DocumentOutcome(
                is_valid=True, status_valid=True, document_valid=True,
                code="IMMIGRATION_DOC_VALID_PERMANENT",
                level=FlagLevel.INFO,
                message="Residente Permanente card with indefinite validity (adult card).",
            )
        if expiry < as_of:
            return DocumentOutcome(
                is_valid=True, status_valid=True, document_valid=False,
                code="IMMIGRATION_DOC_EXPIRED",
                level=FlagLevel.WARNING,
                message=(
                    f"Residente Permanente card expired {expiry.isoformat()}; "
                    "permanent residence status remains valid."
                ),
                action_required="Request card renewal before onboarding is finalized.",
            )
        return DocumentOutcome(
            is_valid=True, status_valid=True, document_valid=True,
            code="IMMIGRATION_DOC_VALID",
            level=FlagLevel.INFO,
            message=f"Residente Permanente card valid until {expiry.isoformat()}.",
        )

    if doc_type == ImmigrationDocType.RESIDENTE_TEMPORAL:
        if expiry is None:
            return DocumentOutcome(
                is_valid=False, status_valid=True, document_valid=False,
                code="IMMIGRATION_DOC_NO_EXPIRY",
                level=FlagLevel.CRITICAL,
                message="Residente Temporal card without an expiry date; temporary residence always expires.",
                action_required="Request a legible copy showing the card's expiry date.",
            )
        if expiry < as_of:
            return DocumentOutcome(
                is_valid=False, status_valid=False, document_valid=False,
                code="IMMIGRATION_DOC_EXPIRED",
                level=FlagLevel.CRITICAL,
                message=f"Residente Temporal card expired {expiry.isoformat()}.",
                action_required="Request a current Residente Temporal or Permanente card.",
            )
        remaining = (expiry - as_of).days
        if remaining <= config.expiring_soon_days:
            return DocumentOutcome(
                is_valid=True, status_valid=True, document_valid=True,
                code="IMMIGRATION_DOC_EXPIRING",
                level=FlagLevel.WARNING,
                message=f"Residente Temporal card expires in {remaining} days ({expiry.isoformat()}).",
                action_required="Request proof of renewal in process.",
            )
        return DocumentOutcome(
            is_valid=True, status_valid=True, document_valid=True,
            code="IMMIGRATION_DOC_VALID",
            level=FlagLevel.INFO,
            message=f"Residente Temporal card valid until {expiry.isoformat()}.",
        )

    return DocumentOutcome(
        is_valid=False, status_valid=False, document_valid=False,
        code="IMMIGRATION_DOC_UNRECOGNIZED",
        level=FlagLevel.WARNING,
        message=f"Unrecognized immigration document type: {doc.document_type or 'not stated'}.",
        action_required="Verify the immigration document type manually.",
    )


def _validate_national_id(doc: NationalId, as_of: date) -> DocumentOutcome:
    expiry = doc.effective_expiry
    label = fold(doc.document_type) or "INE"

    if expiry is not None and expiry < as_of:
        return DocumentOutcome(
            is_valid=False, status_valid=True, document_valid=False,
            code="IDENTITY_DOC_EXPIRED",
            level=FlagLevel.CRITICAL,
            message=f"{label} credential expired {expiry.isoformat()}.",
            action_required="Request a current INE credential or valid passport.",
        )
    if doc.issue_date is not None and doc.issue_date.month == 1 and doc.issue_date.day == 1:
        return DocumentOutcome(
            is_valid=True, status_valid=True, document_valid=True,
            code="INE_ISSUE_DATE_SUSPECT",
            level=FlagLevel.WARNING,
            message=f"{label} issue date {doc.issue_date.isoformat()} falls on January 1st; likely an extraction default.",
            action_required="Verify the issue date against the physical credential.",
        )
    suffix = f" until {expiry.isoformat()}" if expiry else ""
    return DocumentOutcome(
        is_valid=True, status_valid=True, document_valid=True,
        code="INE_VALID",
        level=FlagLevel.INFO,
        message=f"{label} credential valid{suffix}.",
    )


def _validate_passport(doc: Passport, as_of: date) -> DocumentOutcome:
    expiry = doc.expiry_date
    if expiry is None:
        return DocumentOutcome(
            is_valid=False, status_valid=True, document_valid=False,
            code="PASSPORT_EXPIRY_UNKNOWN",
            level=FlagLevel.WARNING,
            message="Passport expiry date could not be determined.",
            action_required="Request a legible copy of the passport data page.",
        )
    if expiry < as_of:
        return DocumentOutcome(
            is_valid=False, status_valid=True, document_valid=False,
            code="PASSPORT_EXPIRED",
            level=FlagLevel.WARNING,
            message=f"Passport expired {expiry.isoformat()}.",
            action_required="Request a current passport.",
        )
    return DocumentOutcome(
        is_valid=True, status_valid=True, document_valid=True,
        code="PASSPORT_VALID",
        level=FlagLevel.INFO,
        message=f"Passport valid until {expiry.isoformat()}.",
    )


# =============================================================================
# Entry Point
# =============================================================================

def validate_identity_document(
    document: IdentityDocument,
    as_of: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> DocumentOutcome:
    """Dispatch on the document variant and apply its decision table."""
    if isinstance(document, ImmigrationStatus):
        return _validate_immigration(document, as_of, config)
    if isinstance(document, NationalId):
        return _validate_national_id(document, as_of)
    if isinstance(document, Passport):
        return _validate_passport(document, as_of)
    raise TypeError(f"Unsupported identity document: {type(document).__name__}")
