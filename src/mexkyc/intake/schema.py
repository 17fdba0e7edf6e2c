"""
MexKYC Intake Schemas

Pydantic models for the per-document records produced by the
extraction layer. They accept the extractor's loose shapes (nulls,
empty strings, numbers where text is expected, legacy field names) and
the loader converts them into the engine's dataclasses.

Unknown keys are ignored: extractors emit many fields the engine does
not use (governance, service details, transactions...).
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, model_validator


DateLike = Optional[Union[date, str]]
TextLike = Optional[Union[str, int, float]]


# =============================================================================
# Base
# =============================================================================

class RecordSchema(BaseModel):
    """Base for extraction records: nulls and blank strings mean absent."""
    model_config = {"extra": "ignore", "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }


class AddressSchema(RecordSchema):
    """Structured address block."""
    street: TextLike = None
    ext_number: TextLike = None
    int_number: TextLike = None
    colonia: TextLike = None
    municipio: TextLike = None
    estado: TextLike = None
    cp: TextLike = None
    cross_streets: TextLike = None
    country: Optional[str] = None


# =============================================================================
# Incorporation Deed
# =============================================================================

class ShareholderSchema(RecordSchema):
    """Capital table entry."""
    name: str
    shares: Optional[float] = None
    percentage: Optional[float] = None
    share_type: Optional[str] = None
    share_series: Optional[str] = Field(
        None, validation_alias=AliasChoices("share_series", "class", "series")
    )
    has_voting_rights: Optional[bool] = None
    is_beneficial_owner: Optional[bool] = None
    nationality: Optional[str] = None


class LegalRepresentativeSchema(RecordSchema):
    """Representative with role and granted powers."""
    name: str
    role: Optional[str] = None
    powers: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("powers", "poder_scope")
    )
    can_sign_contracts: Optional[bool] = None
    has_poder: Optional[bool] = None
    joint_signature_required: Optional[bool] = None
    source_document: Optional[str] = None


class NotarySchema(RecordSchema):
    name: Optional[str] = None
    notary_number: TextLike = None
    protocol_number: TextLike = None
    protocol_date: DateLike = None
    office_location: Optional[str] = None


class RegistrySchema(RecordSchema):
    fme: TextLike = None
    folio: TextLike = None
    nci: TextLike = None
    unique_doc_number: TextLike = None
    registration_city: Optional[str] = None
    registration_date: DateLike = None


class CompanyIdentitySchema(RecordSchema):
    """Acta Constitutiva extraction."""
    razon_social: str
    rfc: Optional[str] = None
    incorporation_date: DateLike = None
    founding_address: Optional[AddressSchema] = None
    legal_representatives: list[LegalRepresentativeSchema] = Field(default_factory=list)
    shareholders: list[ShareholderSchema] = Field(default_factory=list)
    corporate_purpose: list[str] = Field(default_factory=list)
    notary: Optional[NotarySchema] = None
    registry: Optional[RegistrySchema] = None
    modifications: list[str] = Field(default_factory=list)


# =============================================================================
# Tax Certificate
# =============================================================================

class EconomicActivitySchema(RecordSchema):
    description: str
    percentage: Optional[float] = None
    start_date: DateLike = None


class TaxObligationSchema(RecordSchema):
    description: str


class IssueSchema(RecordSchema):
    issue_date: DateLike = None
    place_municipio: Optional[str] = None
    place_estado: Optional[str] = None


class CompanyTaxProfileSchema(RecordSchema):
    """Constancia de Situación Fiscal extraction."""
    rfc: Optional[str] = None
    razon_social: Optional[str] = None
    commercial_name: Optional[str] = None
    tax_regime: Optional[str] = None
    status: Optional[str] = None
    start_of_operations: DateLike = None
    issue_date: DateLike = None
    issue: Optional[IssueSchema] = None
    fiscal_address: Optional[AddressSchema] = None
    economic_activities: list[EconomicActivitySchema] = Field(default_factory=list)
    tax_obligations: list[Union[TaxObligationSchema, str]] = Field(default_factory=list)


# =============================================================================
# Identity
# =============================================================================

class IdentityRecordSchema(RecordSchema):
    """
    Any identity document: INE/IFE, immigration card or passport.

    The loader routes the record to exactly one identity variant.
    """
    full_name: str
    document_type: Optional[str] = None
    nationality: Optional[str] = None
    curp: Optional[str] = None
    document_number: TextLike = None
    clave_elector: Optional[str] = None
    cic: TextLike = None
    ocr_number: TextLike = None
    seccion: TextLike = None
    emission_year: TextLike = None
    vigencia_year: TextLike = None
    issue_date: DateLike = None
    expiry_date: DateLike = None
    issuer_country: Optional[str] = None

    @property
    def has_ine_fields(self) -> bool:
        return any(
            value is not None
            for value in (self.clave_elector, self.cic, self.ocr_number, self.seccion, self.emission_year)
        )


# =============================================================================
# Address and Bank Evidence
# =============================================================================

class ProofOfAddressSchema(RecordSchema):
    """Utility bill extraction (CFE, Telmex, ...)."""
    document_type: Optional[str] = None
    vendor_name: Optional[str] = None
    client_name: Optional[str] = None
    client_address: Optional[AddressSchema] = None
    client_tax_id: Optional[str] = None
    issue_date: DateLike = Field(
        None, validation_alias=AliasChoices("issue_date", "issue_datetime", "date")
    )
    due_date: DateLike = None
    billing_period_end: DateLike = None


class BankAccountSchema(RecordSchema):
    """Bank statement profile extraction."""
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: TextLike = None
    clabe: TextLike = None
    currency: Optional[str] = None
    statement_period_start: DateLike = None
    statement_period_end: DateLike = None
    address_on_statement: Optional[AddressSchema] = Field(
        None, validation_alias=AliasChoices("address_on_statement", "address")
    )


class BankIdentitySchema(RecordSchema):
    """Bank identity page extraction."""
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    clabe: TextLike = None
    document_date: DateLike = None
    address_on_file: Optional[AddressSchema] = None


class RnieSchema(RecordSchema):
    folio_ingreso: TextLike = None
    fecha_recepcion: DateLike = None
    razon_social: Optional[str] = None


class SreConvenioSchema(RecordSchema):
    folio: TextLike = None
    fecha_registro: DateLike = None
    razon_social: Optional[str] = None


class RegistryBoletaSchema(RecordSchema):
    numero_unico_documento: TextLike = None
    fecha_inscripcion: DateLike = None
    razon_social: Optional[str] = None


# =============================================================================
# Profile (Root)
# =============================================================================

class ProfileSchema(RecordSchema):
    """All extraction records for one customer."""
    customer_id: str
    company_identity: Optional[CompanyIdentitySchema] = None
    company_tax_profile: Optional[CompanyTaxProfileSchema] = None
    representative_identity: Optional[IdentityRecordSchema] = None
    passport_identity: Optional[IdentityRecordSchema] = None
    address_evidence: list[ProofOfAddressSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("address_evidence", "proofs_of_address"),
    )
    bank_accounts: list[BankAccountSchema] = Field(default_factory=list)
    bank_identity: Optional[BankIdentitySchema] = None
    power_of_attorney_records: list[LegalRepresentativeSchema] = Field(default_factory=list)
    rnie_registration: Optional[RnieSchema] = None
    sre_convenio: Optional[SreConvenioSchema] = None
    registry_boleta: Optional[RegistryBoletaSchema] = None
    current_fiscal_address: Optional[AddressSchema] = None
    current_operational_address: Optional[AddressSchema] = None
    founding_address: Optional[AddressSchema] = None
