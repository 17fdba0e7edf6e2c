"""
MexKYC Rule Packs

Schema validation and loading for rule packs.

Rule packs are YAML or JSON files that override engine thresholds,
penalties and the legal phrase table used for power-of-attorney text.

Usage:
    from mexkyc.packs import load_rule_pack, RulePackLoader

    config = load_rule_pack("packs/mx_kyc_default.yaml")

    loader = RulePackLoader()
    demo = loader.load("packs/mx_kyc_demo.yaml")
"""
from __future__ import annotations

from .loader import (
    RulePackLoader,
    convert_rule_pack,
    load_rule_pack,
    load_rule_pack_from_string,
)
from .schema import (
    SCHEMA_VERSION,
    LegalPhraseSchema,
    PenaltySchema,
    PowerPatternSchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "RulePackLoader",
    "convert_rule_pack",
    "load_rule_pack",
    "load_rule_pack_from_string",
    # Validation
    "validate_rule_pack",
    "check_schema_version",
    # Schemas
    "LegalPhraseSchema",
    "PenaltySchema",
    "PowerPatternSchema",
    "RulePackSchema",
]
