"""
Pytest configuration and fixtures for MexKYC tests.

Provides helper factories for profiles and documents. The default
profile is a clean Persona Moral that scores 1.0 on AS_OF.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from mexkyc.models import (
    Address,
    BankAccount,
    BankIdentity,
    CompanyIdentity,
    CompanyTaxProfile,
    ImmigrationStatus,
    KycProfile,
    LegalRepresentative,
    NationalId,
    Passport,
    ProofOfAddress,
    RegistryInfo,
    Shareholder,
)


AS_OF = date(2025, 1, 15)
GENERATED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

FULL_POWERS = [
    "Poder general para pleitos y cobranzas",
    "Poder general para actos de administración",
    "Poder general para actos de dominio",
    "Poder para otorgar y suscribir títulos de crédito",
]


# =============================================================================
# Factory Helpers
# =============================================================================

def days_ago(days: int) -> date:
    return AS_OF - timedelta(days=days)


def make_address(
    street: str = "AV. PASEO DE LA REFORMA",
    ext_number: str = "222",
    colonia: str = "JUAREZ",
    municipio: str = "CUAUHTEMOC",
    estado: str = "CIUDAD DE MEXICO",
    cp: str = "06600",
    **kwargs,
) -> Address:
    """Create an Address in Mexico City by default."""
    return Address(
        street=street,
        ext_number=ext_number,
        colonia=colonia,
        municipio=municipio,
        estado=estado,
        cp=cp,
        **kwargs,
    )


def make_other_address() -> Address:
    """An address sharing no component with make_address()."""
    return Address(
        street="CALLE HIDALGO",
        ext_number="15",
        colonia="CENTRO",
        municipio="GUADALAJARA",
        estado="JALISCO",
        cp="44100",
    )


def make_shareholder(
    name: str,
    shares: Optional[float] = None,
    percentage: Optional[float] = None,
    **kwargs,
) -> Shareholder:
    return Shareholder(name=name, shares=shares, percentage=percentage, **kwargs)


def make_representative(
    name: str = "Juan Pérez García",
    role: str = "ADMINISTRADOR UNICO",
    powers: Optional[list[str]] = None,
    can_sign_contracts: bool = True,
    source_document: str = "Acta Constitutiva",
    **kwargs,
) -> LegalRepresentative:
    """Create a representative holding all four canonical powers by default."""
    return LegalRepresentative(
        name=name,
        role=role,
        powers=list(FULL_POWERS) if powers is None else powers,
        can_sign_contracts=can_sign_contracts,
        source_document=source_document,
        **kwargs,
    )


def make_deed(
    razon_social: str = "GRUPO POUNJ, S.A. DE C.V.",
    rfc: Optional[str] = "GPO200115AB1",
    shareholders: Optional[list[Shareholder]] = None,
    legal_representatives: Optional[list[LegalRepresentative]] = None,
    registry: Optional[RegistryInfo] = None,
    **kwargs,
) -> CompanyIdentity:
    """Create an Acta Constitutiva with a 700/300 capital table by default."""
    if shareholders is None:
        shareholders = [
            make_shareholder("Juan Pérez García", shares=700, share_series="Serie A"),
            make_shareholder("Ana López Ruiz", shares=300, share_series="Serie A"),
        ]
    if legal_representatives is None:
        legal_representatives = [make_representative()]
    if registry is None:
        registry = RegistryInfo(fme="N-2020012345")
    return CompanyIdentity(
        razon_social=razon_social,
        rfc=rfc,
        shareholders=shareholders,
        legal_representatives=legal_representatives,
        registry=registry,
        founding_address=kwargs.pop("founding_address", make_address()),
        **kwargs,
    )


def make_tax_profile(
    rfc: str = "GPO200115AB1",
    razon_social: str = "GRUPO POUNJ",
    tax_regime: str = "General de Ley Personas Morales",
    status: Optional[str] = "ACTIVO",
    issue_date: Optional[date] = None,
    fiscal_address: Optional[Address] = None,
    **kwargs,
) -> CompanyTaxProfile:
    return CompanyTaxProfile(
        rfc=rfc,
        razon_social=razon_social,
        tax_regime=tax_regime,
        status=status,
        issue_date=issue_date or days_ago(10),
        fiscal_address=fiscal_address or make_address(),
        **kwargs,
    )


def make_ine(
    full_name: str = "JUAN PEREZ GARCIA",
    vigencia_year: Optional[int] = 2030,
    **kwargs,
) -> NationalId:
    return NationalId(full_name=full_name, vigencia_year=vigencia_year, **kwargs)


def make_passport(
    full_name: str = "JOHN MICHAEL SMITH",
    issuer_country: str = "USA",
    nationality: str = "AMERICAN",
    expiry_date: Optional[date] = date(2030, 6, 1),
    **kwargs,
) -> Passport:
    return Passport(
        full_name=full_name,
        issuer_country=issuer_country,
        nationality=nationality,
        expiry_date=expiry_date,
        **kwargs,
    )


def make_immigration(
    full_name: str = "JOHN MICHAEL SMITH",
    document_type: str = "RESIDENTE PERMANENTE",
    issue_date: Optional[date] = date(2020, 3, 1),
    expiry_date: Optional[date] = None,
    **kwargs,
) -> ImmigrationStatus:
    return ImmigrationStatus(
        full_name=full_name,
        document_type=document_type,
        nationality="ESTADOUNIDENSE",
        issue_date=issue_date,
        expiry_date=expiry_date,
        **kwargs,
    )


def make_bill(
    client_name: str = "GRUPO POUNJ SA DE CV",
    client_address: Optional[Address] = None,
    issue_date: Optional[date] = None,
    vendor_name: str = "CFE",
    **kwargs,
) -> ProofOfAddress:
    return ProofOfAddress(
        document_type="utility_bill",
        vendor_name=vendor_name,
        client_name=client_name,
        client_address=client_address or make_address(),
        issue_date=issue_date or days_ago(20),
        **kwargs,
    )


def make_bank_account(
    account_holder_name: str = "GRUPO POUNJ SA DE CV",
    statement_period_end: Optional[date] = None,
    address_on_statement: Optional[Address] = None,
    bank_name: str = "BBVA",
    **kwargs,
) -> BankAccount:
    return BankAccount(
        bank_name=bank_name,
        account_holder_name=account_holder_name,
        statement_period_end=statement_period_end or days_ago(20),
        address_on_statement=address_on_statement or make_address(),
        **kwargs,
    )


def make_bank_identity(
    account_holder_name: str = "GRUPO POUNJ SA DE CV",
    document_date: Optional[date] = None,
    address_on_file: Optional[Address] = None,
) -> BankIdentity:
    return BankIdentity(
        bank_name="BANORTE",
        account_holder_name=account_holder_name,
        document_date=document_date or days_ago(5),
        address_on_file=address_on_file or make_address(),
    )


_UNSET = object()


def make_profile(
    customer_id: str = "CUST-001",
    company_identity=_UNSET,
    company_tax_profile=_UNSET,
    representative_identity=_UNSET,
    bank_accounts=_UNSET,
    **kwargs,
) -> KycProfile:
    """
    Create a clean Persona Moral profile.

    Pass None to drop a default document.
    """
    return KycProfile(
        customer_id=customer_id,
        company_identity=make_deed() if company_identity is _UNSET else company_identity,
        company_tax_profile=make_tax_profile() if company_tax_profile is _UNSET else company_tax_profile,
        representative_identity=make_ine() if representative_identity is _UNSET else representative_identity,
        bank_accounts=[make_bank_account()] if bank_accounts is _UNSET else bank_accounts,
        **kwargs,
    )


def make_fisica_profile(
    full_name: str = "MARIA DE LA CRUZ HERNANDEZ",
    tax_regime: str = "Régimen Simplificado de Confianza",
    **kwargs,
) -> KycProfile:
    """Create a Persona Física con actividad empresarial profile."""
    kwargs.setdefault("company_identity", None)
    kwargs.setdefault(
        "company_tax_profile",
        make_tax_profile(rfc="CUHM800101AB1", razon_social=full_name, tax_regime=tax_regime),
    )
    kwargs.setdefault("representative_identity", make_ine(full_name=full_name))
    kwargs.setdefault("bank_accounts", [make_bank_account(account_holder_name=full_name)])
    return make_profile(**kwargs)


def codes(result) -> list[str]:
    return [f.code for f in result.flags]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def moral_profile() -> KycProfile:
    return make_profile()


@pytest.fixture
def fisica_profile() -> KycProfile:
    return make_fisica_profile()
