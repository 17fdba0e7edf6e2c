"""
MexKYC Customer Profile

The normalized profile assembled from extraction records. The engine
treats it as read-only: address resolution returns a new profile via
``dataclasses.replace`` rather than filling gaps in place.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .address import Address
from .documents import (
    BankAccount,
    BankIdentity,
    CompanyIdentity,
    CompanyTaxProfile,
    LegalRepresentative,
    ProofOfAddress,
    RegistryBoleta,
    RnieRegistration,
    SreConvenio,
)
from .identity import IdentityDocument, Passport


@dataclass
class KycProfile:
    """
    Everything known about one onboarding customer.

    Attributes:
        customer_id: Caller's identifier for the customer
        company_identity: Incorporation deed, if provided
        company_tax_profile: SAT tax certificate, if provided
        representative_identity: National ID or immigration document
        passport_identity: Passport, if provided separately
        address_evidence: Utility bills
        bank_accounts: Bank statement profiles
        bank_identity: Bank identity page
        power_of_attorney_records: Representatives from separate notarized powers
        rnie_registration: Foreign-investment registry acuse
        sre_convenio: SRE convenio de extranjería
        registry_boleta: Commercial registry boleta
        current_fiscal_address: Resolved fiscal address
        current_operational_address: Resolved operational address
        founding_address: Resolved founding address
    """
    customer_id: str
    company_identity: Optional[CompanyIdentity] = None
    company_tax_profile: Optional[CompanyTaxProfile] = None
    representative_identity: Optional[IdentityDocument] = None
    passport_identity: Optional[Passport] = None
    address_evidence: list[ProofOfAddress] = field(default_factory=list)
    bank_accounts: list[BankAccount] = field(default_factory=list)
    bank_identity: Optional[BankIdentity] = None
    power_of_attorney_records: list[LegalRepresentative] = field(default_factory=list)
    rnie_registration: Optional[RnieRegistration] = None
    sre_convenio: Optional[SreConvenio] = None
    registry_boleta: Optional[RegistryBoleta] = None
    current_fiscal_address: Optional[Address] = None
    current_operational_address: Optional[Address] = None
    founding_address: Optional[Address] = None

    def identity_documents(self) -> list[IdentityDocument]:
        """All identity documents on file, representative document first."""
        docs: list[IdentityDocument] = []
        if self.representative_identity is not None:
            docs.append(self.representative_identity)
        if self.passport_identity is not None:
            docs.append(self.passport_identity)
        return docs

    @property
    def has_bank_evidence(self) -> bool:
        return bool(self.bank_accounts) or self.bank_identity is not None
