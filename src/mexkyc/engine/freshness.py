"""
MexKYC Freshness Checker

Computes the age of the most recent document in each tracked family
relative to the caller's reference date.

Families:
- proof_of_address: utility bills (issue date, else due date)
- bank_statement: statement period end (identity page date in demo mode)
- sat_constancia: SAT certificate issue date
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import FreshnessDocType, FreshnessTrace, KycProfile, SupportingDocument


def _entry(
    doc_type: FreshnessDocType,
    docs: list[SupportingDocument],
    as_of: date,
    max_age_days: int,
) -> FreshnessTrace:
    dates = [d.document_date for d in docs if d.document_date is not None]
    latest: Optional[date] = max(dates) if dates else None
    age = (as_of - latest).days if latest is not None else None
    return FreshnessTrace(
        doc_type=doc_type,
        supporting_docs=docs,
        latest_date=latest,
        age_days=age,
        max_age_days=max_age_days,
        within_threshold=age is not None and age <= max_age_days,
    )


def check_freshness(
    profile: KycProfile,
    as_of: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[FreshnessTrace]:
    """One entry per document family present in the profile."""
    max_days = config.freshness_max_days
    results: list[FreshnessTrace] = []

    if profile.address_evidence:
        docs = [SupportingDocument(b.label, b.document_date) for b in profile.address_evidence]
        results.append(_entry(FreshnessDocType.PROOF_OF_ADDRESS, docs, as_of, max_days))

    bank_docs = [SupportingDocument(a.label, a.statement_period_end) for a in profile.bank_accounts]
    if config.demo_mode and profile.bank_identity is not None:
        bank_docs.insert(
            0, SupportingDocument(profile.bank_identity.label, profile.bank_identity.document_date)
        )
    if bank_docs:
        results.append(_entry(FreshnessDocType.BANK_STATEMENT, bank_docs, as_of, max_days))

    tax = profile.company_tax_profile
    if tax is not None:
        docs = [SupportingDocument("SAT Constancia de Situación Fiscal", tax.issue_date)]
        results.append(_entry(FreshnessDocType.SAT_CONSTANCIA, docs, as_of, max_days))

    return results


def freshness_for(
    entries: list[FreshnessTrace],
    doc_type: FreshnessDocType,
) -> Optional[FreshnessTrace]:
    for entry in entries:
        if entry.doc_type == doc_type:
            return entry
    return None
