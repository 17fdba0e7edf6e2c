"""
MexKYC Address Resolver

Fills the profile's resolved addresses from the documents on file and
returns a new profile. The caller's profile is never modified.

Sources:
- fiscal: the SAT certificate's fiscal address
- founding: the deed's founding address
- operational: demo-mode bank identity page, then the first bank
  statement address, then the first utility bill address, then fiscal
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import Address, KycProfile


def _usable(address: Optional[Address]) -> Optional[Address]:
    if address is None or address.is_empty():
        return None
    return address


def operational_address_candidates(
    profile: KycProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[tuple[str, Address]]:
    """Operational address candidates in preference order, with source labels."""
    candidates: list[tuple[str, Address]] = []
    if config.demo_mode and profile.bank_identity is not None:
        address = _usable(profile.bank_identity.address_on_file)
        if address:
            candidates.append((profile.bank_identity.label, address))
    for account in profile.bank_accounts:
        address = _usable(account.address_on_statement)
        if address:
            candidates.append((account.label, address))
    for bill in profile.address_evidence:
        address = _usable(bill.client_address)
        if address:
            candidates.append((bill.label, address))
    return candidates


def resolve_addresses(
    profile: KycProfile,
    config: EngineConfig = DEFAULT_CONFIG,
) -> KycProfile:
    """Return a copy of ``profile`` with resolved addresses populated."""
    fiscal = _usable(profile.current_fiscal_address)
    if fiscal is None and profile.company_tax_profile is not None:
        fiscal = _usable(profile.company_tax_profile.fiscal_address)

    founding = _usable(profile.founding_address)
    if founding is None and profile.company_identity is not None:
        founding = _usable(profile.company_identity.founding_address)

    operational = _usable(profile.current_operational_address)
    if operational is None:
        candidates = operational_address_candidates(profile, config)
        operational = candidates[0][1] if candidates else fiscal

    return replace(
        profile,
        current_fiscal_address=fiscal,
        current_operational_address=operational,
        founding_address=founding,
    )
