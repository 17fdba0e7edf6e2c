"""
MexKYC Enumerations

All enumeration types used throughout the MexKYC system.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Entity Classification
# =============================================================================

class EntityType(str, Enum):
    """
    Legal-entity category of the customer.

    Corporate checks (UBO, equity, signatories, registry folio) run only
    for PERSONA_MORAL.
    """
    PERSONA_MORAL = "PERSONA_MORAL"
    PERSONA_FISICA_EMPRESARIAL = "PERSONA_FISICA_EMPRESARIAL"
    PERSONA_FISICA_SIN_OBLIGACIONES = "PERSONA_FISICA_SIN_OBLIGACIONES"
    UNKNOWN = "UNKNOWN"

    @property
    def is_persona_fisica(self) -> bool:
        return self in (
            EntityType.PERSONA_FISICA_EMPRESARIAL,
            EntityType.PERSONA_FISICA_SIN_OBLIGACIONES,
        )


# =============================================================================
# Flags
# =============================================================================

class FlagLevel(str, Enum):
    """Severity of a validation flag."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


# =============================================================================
# Identity
# =============================================================================

class Nationality(str, Enum):
    """Nationality inferred from the identity documents on file."""
    MEXICAN = "mexican"
    FOREIGN = "foreign"
    UNKNOWN = "unknown"


class ImmigrationDocType(str, Enum):
    """Generations of Mexican immigration status documents."""
    FMM = "FMM"                                  # Tourist / visitor permit
    FM2 = "FM2"                                  # Inmigrante (pre Nov-2012)
    FM3 = "FM3"                                  # No inmigrante (pre Nov-2012)
    RESIDENTE_TEMPORAL = "RESIDENTE_TEMPORAL"
    RESIDENTE_PERMANENTE = "RESIDENTE_PERMANENTE"
    UNKNOWN = "UNKNOWN"


# =============================================================================
# Signatories
# =============================================================================

class PowerScope(str, Enum):
    """Signing authority granted to a legal representative."""
    FULL = "full"
    LIMITED = "limited"
    NONE = "none"

    @property
    def rank(self) -> int:
        return {"none": 0, "limited": 1, "full": 2}[self.value]


# =============================================================================
# Proof of Address
# =============================================================================

class ThirdPartyKind(str, Enum):
    """Relationship inferred for a third-party proof of address."""
    FAMILY = "family"
    LANDLORD = "landlord"


# =============================================================================
# Trace
# =============================================================================

class AddressRole(str, Enum):
    """Role an address plays in the customer profile."""
    FOUNDING = "founding"
    FISCAL = "fiscal"
    OPERATIONAL = "operational"


class FreshnessDocType(str, Enum):
    """Document families whose age is tracked."""
    PROOF_OF_ADDRESS = "proof_of_address"
    BANK_STATEMENT = "bank_statement"
    SAT_CONSTANCIA = "sat_constancia"
