"""
MexKYC Identity Documents

Identity documents are a tagged variant: each document shape has its
own class and the engine dispatches on the class, never on which
fields happen to be populated.

    IdentityDocument = NationalId | ImmigrationStatus | Passport

- NationalId: INE / IFE voter credential (Mexican nationals)
- ImmigrationStatus: FMM, FM2, FM3, Residente Temporal / Permanente
- Passport: any passport, Mexican or foreign
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union


@dataclass
class NationalId:
    """INE or IFE credencial para votar."""
    full_name: str
    document_type: str = "INE"
    curp: Optional[str] = None
    clave_elector: Optional[str] = None
    document_number: Optional[str] = None
    emission_year: Optional[int] = None
    vigencia_year: Optional[int] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None

    @property
    def effective_expiry(self) -> Optional[date]:
        """Expiry date, or December 31st of the vigencia year."""
        if self.expiry_date is not None:
            return self.expiry_date
        if self.vigencia_year:
            return date(self.vigencia_year, 12, 31)
        return None


@dataclass
class ImmigrationStatus:
    """
    Immigration status document issued by the INM.

    ``document_type`` keeps the raw category text printed on the card
    ("RESIDENTE PERMANENTE", "FM3", ...); the validator classifies it.
    """
    full_name: str
    document_type: Optional[str] = None
    nationality: Optional[str] = None
    curp: Optional[str] = None
    document_number: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


@dataclass
class Passport:
    """Passport of any issuing country."""
    full_name: str
    issuer_country: Optional[str] = None
    nationality: Optional[str] = None
    document_number: Optional[str] = None
    curp: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None

    @property
    def is_mexican(self) -> bool:
        issuer = (self.issuer_country or "").strip().upper()
        nationality = (self.nationality or "").strip().upper()
        return issuer in {"MX", "MEX", "MEXICO", "MÉXICO"} or nationality.startswith("MEXICAN")


IdentityDocument = Union[NationalId, ImmigrationStatus, Passport]
