"""
MexKYC Intake

Turns extraction records into a KycProfile.

Usage:
    from mexkyc.intake import load_profile, load_profile_file

    profile = load_profile({"customer_id": "C-001", "company_identity": {...}})
    profile = load_profile_file("fixtures/customer.json")
"""
from __future__ import annotations

from .loader import (
    convert_identity,
    convert_profile,
    load_profile,
    load_profile_file,
    load_profile_from_string,
    parse_date,
    parse_year,
)
from .schema import IdentityRecordSchema, ProfileSchema, RecordSchema

__all__ = [
    "load_profile",
    "load_profile_file",
    "load_profile_from_string",
    "convert_profile",
    "convert_identity",
    "parse_date",
    "parse_year",
    "ProfileSchema",
    "IdentityRecordSchema",
    "RecordSchema",
]
