"""
MexKYC Profile Loader

Assembles a KycProfile from extraction records (a dict, a JSON or YAML
file, or a string). Records are validated with the intake schemas and
converted into the engine's dataclasses.

Structural problems (a missing customer_id, a representative without a
name, a list where a record is expected) raise ProfileValidationError.
Field-level noise such as an unparseable date is logged and the field
is dropped, so the engine can still flag the document as incomplete.
"""
from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ProfileValidationError
from ..models import (
    Address,
    BankAccount,
    BankIdentity,
    CompanyIdentity,
    CompanyTaxProfile,
    EconomicActivity,
    IdentityDocument,
    ImmigrationStatus,
    KycProfile,
    LegalRepresentative,
    NationalId,
    NotaryInfo,
    Passport,
    ProofOfAddress,
    RegistryBoleta,
    RegistryInfo,
    RnieRegistration,
    Shareholder,
    SreConvenio,
)
from .schema import (
    AddressSchema,
    BankAccountSchema,
    BankIdentitySchema,
    CompanyIdentitySchema,
    CompanyTaxProfileSchema,
    IdentityRecordSchema,
    LegalRepresentativeSchema,
    ProfileSchema,
    ProofOfAddressSchema,
    ShareholderSchema,
    TaxObligationSchema,
)

logger = logging.getLogger(__name__)

NATIONAL_ID_TYPES = frozenset({"INE", "IFE", "CREDENCIAL PARA VOTAR"})
PASSPORT_TYPES = frozenset({"PASSPORT", "PASAPORTE"})

_YEAR_RE = re.compile(r"(19|20)\d{2}")
_DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


# =============================================================================
# Scalar Converters
# =============================================================================

def parse_date(value: Any, field_name: str = "date") -> Optional[date]:
    """
    Parse an extracted date.

    Accepts date/datetime objects, ISO 8601 strings (with or without a
    time part) and day-first strings ("15/01/2025"). Anything else is
    logged and treated as absent.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in _DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.warning("Ignoring unparseable %s: %r", field_name, value)
    return None


def parse_year(value: Any, field_name: str = "year") -> Optional[int]:
    """
    Extract a four-digit year from an int or a string.

    For ranges such as '2019-2029' the last year is returned, which is
    the end of validity on INE credentials.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    matches = [m.group(0) for m in _YEAR_RE.finditer(str(value))]
    if not matches:
        logger.warning("Ignoring unparseable %s: %r", field_name, value)
        return None
    return int(matches[-1])


def _text(value: Any) -> Optional[str]:
    """Numbers arrive where text is expected (cp 6600, notary number 151)."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


# =============================================================================
# Record Converters
# =============================================================================

def convert_address(schema: Optional[AddressSchema]) -> Optional[Address]:
    if schema is None:
        return None
    address = Address(
        street=_text(schema.street),
        ext_number=_text(schema.ext_number),
        int_number=_text(schema.int_number),
        colonia=_text(schema.colonia),
        municipio=_text(schema.municipio),
        estado=_text(schema.estado),
        cp=_text(schema.cp),
        cross_streets=_text(schema.cross_streets),
        country=schema.country or "MX",
    )
    return None if address.is_empty() else address


def convert_shareholder(schema: ShareholderSchema) -> Shareholder:
    return Shareholder(
        name=schema.name,
        shares=schema.shares,
        percentage=schema.percentage,
        share_type=schema.share_type,
        share_series=schema.share_series,
        has_voting_rights=schema.has_voting_rights,
        is_beneficial_owner=schema.is_beneficial_owner,
        nationality=schema.nationality,
    )


def convert_representative(
    schema: LegalRepresentativeSchema,
    default_source: Optional[str] = None,
) -> LegalRepresentative:
    return LegalRepresentative(
        name=schema.name,
        role=schema.role,
        powers=[p for p in schema.powers if p and p.strip()],
        can_sign_contracts=bool(schema.can_sign_contracts),
        has_poder=bool(schema.has_poder),
        joint_signature_required=bool(schema.joint_signature_required),
        source_document=schema.source_document or default_source,
    )


def convert_company_identity(schema: CompanyIdentitySchema) -> CompanyIdentity:
    """Convert the Acta Constitutiva record."""
    notary = None
    if schema.notary is not None:
        notary = NotaryInfo(
            name=schema.notary.name,
            notary_number=_text(schema.notary.notary_number),
            protocol_number=_text(schema.notary.protocol_number),
            protocol_date=parse_date(schema.notary.protocol_date, "notary.protocol_date"),
            location=schema.notary.office_location,
        )

    registry = None
    if schema.registry is not None:
        registry = RegistryInfo(
            fme=_text(schema.registry.fme) or _text(schema.registry.unique_doc_number),
            folio=_text(schema.registry.folio),
            nci=_text(schema.registry.nci),
            registration_date=parse_date(schema.registry.registration_date, "registry.registration_date"),
            city=schema.registry.registration_city,
        )

    return CompanyIdentity(
        razon_social=schema.razon_social,
        rfc=schema.rfc,
        incorporation_date=parse_date(schema.incorporation_date, "incorporation_date"),
        founding_address=convert_address(schema.founding_address),
        legal_representatives=[
            convert_representative(r, default_source="Acta Constitutiva")
            for r in schema.legal_representatives
        ],
        shareholders=[convert_shareholder(s) for s in schema.shareholders],
        corporate_purpose=list(schema.corporate_purpose),
        notary=notary,
        registry=registry,
        modifications=list(schema.modifications),
    )


def _obligation_text(item: Union[TaxObligationSchema, str]) -> str:
    if isinstance(item, TaxObligationSchema):
        return item.description
    return item


def convert_tax_profile(schema: CompanyTaxProfileSchema) -> CompanyTaxProfile:
    """Convert the Constancia de Situación Fiscal record."""
    issue_date = schema.issue_date
    if issue_date is None and schema.issue is not None:
        issue_date = schema.issue.issue_date

    return CompanyTaxProfile(
        rfc=schema.rfc,
        razon_social=schema.razon_social,
        commercial_name=schema.commercial_name,
        tax_regime=schema.tax_regime,
        status=schema.status,
        start_of_operations=parse_date(schema.start_of_operations, "start_of_operations"),
        issue_date=parse_date(issue_date, "tax issue_date"),
        fiscal_address=convert_address(schema.fiscal_address),
        economic_activities=[
            EconomicActivity(
                description=a.description,
                percentage=a.percentage,
                start_date=parse_date(a.start_date, "activity start_date"),
            )
            for a in schema.economic_activities
        ],
        tax_obligations=[
            text for text in (_obligation_text(o).strip() for o in schema.tax_obligations) if text
        ],
    )


def convert_identity(schema: IdentityRecordSchema) -> IdentityDocument:
    """
    Route an identity record to exactly one identity variant.

    - INE / IFE document types, or INE-shaped fields: NationalId
    - PASSPORT / PASAPORTE: Passport
    - anything else: ImmigrationStatus (the validator classifies the type)
    """
    doc_type = (schema.document_type or "").strip().upper()
    issue_date = parse_date(schema.issue_date, "identity issue_date")
    expiry_date = parse_date(schema.expiry_date, "identity expiry_date")

    if doc_type in PASSPORT_TYPES:
        return Passport(
            full_name=schema.full_name,
            issuer_country=schema.issuer_country,
            nationality=schema.nationality,
            document_number=_text(schema.document_number),
            curp=schema.curp,
            issue_date=issue_date,
            expiry_date=expiry_date,
        )

    if doc_type in NATIONAL_ID_TYPES or (not doc_type and schema.has_ine_fields):
        return NationalId(
            full_name=schema.full_name,
            document_type=doc_type or "INE",
            curp=schema.curp,
            clave_elector=schema.clave_elector,
            document_number=_text(schema.document_number) or _text(schema.cic),
            emission_year=parse_year(schema.emission_year, "emission_year"),
            vigencia_year=parse_year(schema.vigencia_year, "vigencia_year"),
            issue_date=issue_date,
            expiry_date=expiry_date,
        )

    return ImmigrationStatus(
        full_name=schema.full_name,
        document_type=schema.document_type,
        nationality=schema.nationality,
        curp=schema.curp,
        document_number=_text(schema.document_number),
        issue_date=issue_date,
        expiry_date=expiry_date,
    )


def convert_passport(schema: IdentityRecordSchema) -> Passport:
    """The passport slot always holds a Passport, whatever the extractor labelled it."""
    return Passport(
        full_name=schema.full_name,
        issuer_country=schema.issuer_country,
        nationality=schema.nationality,
        document_number=_text(schema.document_number),
        curp=schema.curp,
        issue_date=parse_date(schema.issue_date, "passport issue_date"),
        expiry_date=parse_date(schema.expiry_date, "passport expiry_date"),
    )


def convert_proof_of_address(schema: ProofOfAddressSchema) -> ProofOfAddress:
    return ProofOfAddress(
        document_type=schema.document_type,
        vendor_name=schema.vendor_name,
        client_name=schema.client_name,
        client_address=convert_address(schema.client_address),
        client_tax_id=schema.client_tax_id,
        issue_date=parse_date(schema.issue_date, "bill issue_date"),
        due_date=parse_date(schema.due_date, "bill due_date"),
        billing_period_end=parse_date(schema.billing_period_end, "bill billing_period_end"),
    )


def convert_bank_account(schema: BankAccountSchema) -> BankAccount:
    return BankAccount(
        bank_name=schema.bank_name,
        account_holder_name=schema.account_holder_name,
        account_number=_text(schema.account_number),
        clabe=_text(schema.clabe),
        currency=schema.currency,
        statement_period_start=parse_date(schema.statement_period_start, "statement_period_start"),
        statement_period_end=parse_date(schema.statement_period_end, "statement_period_end"),
        address_on_statement=convert_address(schema.address_on_statement),
    )


def convert_bank_identity(schema: BankIdentitySchema) -> BankIdentity:
    return BankIdentity(
        bank_name=schema.bank_name,
        account_holder_name=schema.account_holder_name,
        clabe=_text(schema.clabe),
        document_date=parse_date(schema.document_date, "bank identity document_date"),
        address_on_file=convert_address(schema.address_on_file),
    )


def convert_profile(schema: ProfileSchema) -> KycProfile:
    """Convert a validated profile schema into a KycProfile."""
    rnie = None
    if schema.rnie_registration is not None:
        rnie = RnieRegistration(
            folio_ingreso=_text(schema.rnie_registration.folio_ingreso),
            fecha_recepcion=parse_date(schema.rnie_registration.fecha_recepcion, "rnie fecha_recepcion"),
            razon_social=schema.rnie_registration.razon_social,
        )

    sre = None
    if schema.sre_convenio is not None:
        sre = SreConvenio(
            folio=_text(schema.sre_convenio.folio),
            fecha_registro=parse_date(schema.sre_convenio.fecha_registro, "sre fecha_registro"),
            razon_social=schema.sre_convenio.razon_social,
        )

    boleta = None
    if schema.registry_boleta is not None:
        boleta = RegistryBoleta(
            numero_unico_documento=_text(schema.registry_boleta.numero_unico_documento),
            fecha_inscripcion=parse_date(schema.registry_boleta.fecha_inscripcion, "boleta fecha_inscripcion"),
            razon_social=schema.registry_boleta.razon_social,
        )

    return KycProfile(
        customer_id=schema.customer_id,
        company_identity=(
            convert_company_identity(schema.company_identity)
            if schema.company_identity is not None else None
        ),
        company_tax_profile=(
            convert_tax_profile(schema.company_tax_profile)
            if schema.company_tax_profile is not None else None
        ),
        representative_identity=(
            convert_identity(schema.representative_identity)
            if schema.representative_identity is not None else None
        ),
        passport_identity=(
            convert_passport(schema.passport_identity)
            if schema.passport_identity is not None else None
        ),
        address_evidence=[convert_proof_of_address(p) for p in schema.address_evidence],
        bank_accounts=[convert_bank_account(b) for b in schema.bank_accounts],
        bank_identity=(
            convert_bank_identity(schema.bank_identity)
            if schema.bank_identity is not None else None
        ),
        power_of_attorney_records=[
            convert_representative(r, default_source="Poder Notarial")
            for r in schema.power_of_attorney_records
        ],
        rnie_registration=rnie,
        sre_convenio=sre,
        registry_boleta=boleta,
        current_fiscal_address=convert_address(schema.current_fiscal_address),
        current_operational_address=convert_address(schema.current_operational_address),
        founding_address=convert_address(schema.founding_address),
    )


# =============================================================================
# Entry Points
# =============================================================================

def load_profile(data: Any) -> KycProfile:
    """
    Validate extraction records and build a KycProfile.

    Raises:
        ProfileValidationError: If the records are structurally invalid
    """
    if not isinstance(data, dict):
        raise ProfileValidationError(
            message="Profile must be a mapping",
            details={"type": type(data).__name__},
        )

    customer_id = data.get("customer_id")
    try:
        schema = ProfileSchema.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(
            message=f"Profile validation failed: {e.error_count()} errors",
            details={"errors": e.errors(include_url=False)},
            customer_id=str(customer_id) if customer_id else None,
        )

    profile = convert_profile(schema)
    logger.debug("Loaded profile for customer %s", profile.customer_id)
    return profile


def load_profile_file(path: Union[str, Path]) -> KycProfile:
    """
    Load a profile from a JSON or YAML file.

    Raises:
        ProfileValidationError: If the file cannot be read or is invalid
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ProfileValidationError(
            message=f"Failed to load profile: {e}",
            details={"path": str(path), "error": str(e)},
        )
    return load_profile(data)


def load_profile_from_string(content: str, format: str = "json") -> KycProfile:
    """Load a profile from a JSON or YAML string."""
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ProfileValidationError(
            message=f"Failed to parse profile: {e}",
            details={"format": format, "error": str(e)},
        )
    return load_profile(data)
