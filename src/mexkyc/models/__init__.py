"""
MexKYC Models

All domain models for the MexKYC decision engine.

    from mexkyc.models import (
        # Enums
        EntityType, FlagLevel, Nationality, PowerScope,
        # Documents
        CompanyIdentity, CompanyTaxProfile, Shareholder, LegalRepresentative,
        ProofOfAddress, BankAccount, BankIdentity,
        # Identity
        NationalId, ImmigrationStatus, Passport,
        # Profile and results
        KycProfile, ValidationFlag, ValidationResult, TraceSection,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    AddressRole,
    EntityType,
    FlagLevel,
    FreshnessDocType,
    ImmigrationDocType,
    Nationality,
    PowerScope,
    ThirdPartyKind,
)

# =============================================================================
# Documents
# =============================================================================
from .address import Address
from .documents import (
    BankAccount,
    BankIdentity,
    CompanyIdentity,
    CompanyTaxProfile,
    EconomicActivity,
    LegalRepresentative,
    NotaryInfo,
    ProofOfAddress,
    RegistryBoleta,
    RegistryInfo,
    RnieRegistration,
    Shareholder,
    SreConvenio,
)
from .identity import (
    IdentityDocument,
    ImmigrationStatus,
    NationalId,
    Passport,
)

# =============================================================================
# Profile, Results, Trace
# =============================================================================
from .profile import KycProfile
from .result import ValidationFlag, ValidationResult
from .trace import (
    AddressEvidenceTrace,
    FreshnessTrace,
    PowerTrace,
    SupportingDocument,
    TraceSection,
    TraceSource,
    UboTrace,
)

__all__ = [
    # Enums
    "AddressRole",
    "EntityType",
    "FlagLevel",
    "FreshnessDocType",
    "ImmigrationDocType",
    "Nationality",
    "PowerScope",
    "ThirdPartyKind",
    # Documents
    "Address",
    "BankAccount",
    "BankIdentity",
    "CompanyIdentity",
    "CompanyTaxProfile",
    "EconomicActivity",
    "LegalRepresentative",
    "NotaryInfo",
    "ProofOfAddress",
    "RegistryBoleta",
    "RegistryInfo",
    "RnieRegistration",
    "Shareholder",
    "SreConvenio",
    # Identity
    "IdentityDocument",
    "ImmigrationStatus",
    "NationalId",
    "Passport",
    # Profile / results
    "KycProfile",
    "ValidationFlag",
    "ValidationResult",
    # Trace
    "AddressEvidenceTrace",
    "FreshnessTrace",
    "PowerTrace",
    "SupportingDocument",
    "TraceSection",
    "TraceSource",
    "UboTrace",
]
