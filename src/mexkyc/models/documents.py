"""
MexKYC Document Records

Typed records for every non-identity document the extraction layer
produces: the incorporation deed (Acta Constitutiva), the SAT tax
certificate (Constancia de Situación Fiscal), utility bills, bank
documents, and the registry / foreign-investment filings.

Key concepts:
- Shareholder: one line of the deed's capital table
- LegalRepresentative: one apoderado / officer with granted powers
- CompanyIdentity: the deed as a whole
- CompanyTaxProfile: the SAT certificate
- ProofOfAddress: a utility bill (CFE, Telmex, agua, gas)
- BankAccount / BankIdentity: statement profile and identity page
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .address import Address


# =============================================================================
# Incorporation Deed
# =============================================================================

@dataclass
class Shareholder:
    """
    A shareholder as listed in the deed's capital table.

    ``has_voting_rights`` and ``is_beneficial_owner`` are tri-state: None
    means the deed did not say, and the UBO resolver infers.
    """
    name: str
    shares: Optional[float] = None
    percentage: Optional[float] = None
    share_type: Optional[str] = None
    share_series: Optional[str] = None
    has_voting_rights: Optional[bool] = None
    is_beneficial_owner: Optional[bool] = None
    nationality: Optional[str] = None

    @property
    def is_foreign(self) -> bool:
        """True when a non-Mexican nationality is stated."""
        if not self.nationality:
            return False
        value = self.nationality.strip().upper()
        return not (value.startswith("MEXICAN") or value in {"MX", "MEX", "MEXICO", "MÉXICO"})


@dataclass
class LegalRepresentative:
    """
    A person named in a deed or power of attorney with a role and powers.

    Attributes:
        name: Full name as written in the source
        role: Role text ("ADMINISTRADOR UNICO", "APODERADO", "COMISARIO")
        powers: Granted-power text fragments
        can_sign_contracts: Extractor's judgement that the person may sign
        has_poder: A notarized power exists for this person
        joint_signature_required: Powers must be exercised jointly
        source_document: Label of the document the record came from
    """
    name: str
    role: Optional[str] = None
    powers: list[str] = field(default_factory=list)
    can_sign_contracts: bool = False
    has_poder: bool = False
    joint_signature_required: bool = False
    source_document: Optional[str] = None


@dataclass
class NotaryInfo:
    """Notary who formalized the deed."""
    name: Optional[str] = None
    notary_number: Optional[str] = None
    protocol_number: Optional[str] = None
    protocol_date: Optional[date] = None
    location: Optional[str] = None


@dataclass
class RegistryInfo:
    """
    Public Registry of Commerce inscription.

    ``fme`` is the Folio Mercantil Electrónico; ``folio`` is the older
    paper folio. Either one proves the inscription.
    """
    fme: Optional[str] = None
    folio: Optional[str] = None
    nci: Optional[str] = None
    registration_date: Optional[date] = None
    city: Optional[str] = None

    @property
    def has_folio(self) -> bool:
        return bool((self.fme or "").strip() or (self.folio or "").strip())


@dataclass
class CompanyIdentity:
    """The incorporation deed (Acta Constitutiva) and its modifications."""
    razon_social: str
    rfc: Optional[str] = None
    incorporation_date: Optional[date] = None
    founding_address: Optional[Address] = None
    legal_representatives: list[LegalRepresentative] = field(default_factory=list)
    shareholders: list[Shareholder] = field(default_factory=list)
    corporate_purpose: list[str] = field(default_factory=list)
    notary: Optional[NotaryInfo] = None
    registry: Optional[RegistryInfo] = None
    modifications: list[str] = field(default_factory=list)


# =============================================================================
# Tax Certificate
# =============================================================================

@dataclass
class EconomicActivity:
    """One declared economic activity from the SAT certificate."""
    description: str
    percentage: Optional[float] = None
    start_date: Optional[date] = None


@dataclass
class CompanyTaxProfile:
    """SAT Constancia de Situación Fiscal."""
    rfc: Optional[str] = None
    razon_social: Optional[str] = None
    commercial_name: Optional[str] = None
    tax_regime: Optional[str] = None
    status: Optional[str] = None
    start_of_operations: Optional[date] = None
    issue_date: Optional[date] = None
    fiscal_address: Optional[Address] = None
    economic_activities: list[EconomicActivity] = field(default_factory=list)
    tax_obligations: list[str] = field(default_factory=list)


# =============================================================================
# Address Evidence
# =============================================================================

@dataclass
class ProofOfAddress:
    """A utility bill offered as proof of address."""
    document_type: Optional[str] = None
    vendor_name: Optional[str] = None
    client_name: Optional[str] = None
    client_address: Optional[Address] = None
    client_tax_id: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    billing_period_end: Optional[date] = None

    @property
    def document_date(self) -> Optional[date]:
        """Date used for freshness: issue date, else due date, else period end."""
        return self.issue_date or self.due_date or self.billing_period_end

    @property
    def label(self) -> str:
        return self.vendor_name or self.document_type or "Proof of Address"


@dataclass
class BankAccount:
    """Bank statement profile (first page of an estado de cuenta)."""
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    clabe: Optional[str] = None
    currency: Optional[str] = None
    statement_period_start: Optional[date] = None
    statement_period_end: Optional[date] = None
    address_on_statement: Optional[Address] = None

    @property
    def document_date(self) -> Optional[date]:
        return self.statement_period_end

    @property
    def address(self) -> Optional[Address]:
        return self.address_on_statement

    @property
    def label(self) -> str:
        return f"Bank Statement ({self.bank_name})" if self.bank_name else "Bank Statement"


@dataclass
class BankIdentity:
    """Bank identity page (carátula) used as evidence in demo mode."""
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    clabe: Optional[str] = None
    document_date: Optional[date] = None
    address_on_file: Optional[Address] = None

    @property
    def address(self) -> Optional[Address]:
        return self.address_on_file

    @property
    def label(self) -> str:
        return f"Bank Identity Page ({self.bank_name})" if self.bank_name else "Bank Identity Page"


# =============================================================================
# Registry and Foreign Investment Filings
# =============================================================================

@dataclass
class RnieRegistration:
    """Acuse of the Registro Nacional de Inversiones Extranjeras."""
    folio_ingreso: Optional[str] = None
    fecha_recepcion: Optional[date] = None
    razon_social: Optional[str] = None


@dataclass
class SreConvenio:
    """SRE convenio de extranjería (Calvo clause) registration."""
    folio: Optional[str] = None
    fecha_registro: Optional[date] = None
    razon_social: Optional[str] = None


@dataclass
class RegistryBoleta:
    """Boleta de inscripción from the Registro Público de Comercio."""
    numero_unico_documento: Optional[str] = None
    fecha_inscripcion: Optional[date] = None
    razon_social: Optional[str] = None
