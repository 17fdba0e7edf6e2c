"""
MexKYC - Mexican KYC Decision Engine

Scores the onboarding evidence of Mexican companies (Persona Moral) and
individuals with business activity (Persona Física) and explains every
deduction with a flag.

Key features:
- Deterministic: same profile and reference date, same result
- Flags, not exceptions: missing or bad evidence lowers the score
- Auditable: a separate trace shows UBO math, address matches, powers and ages
- Configurable: thresholds, penalties and legal phrases come from rule packs

Usage:
    from datetime import date
    from mexkyc import load_profile, validate_kyc_profile, build_trace

    profile = load_profile(extraction_records)
    result = validate_kyc_profile(profile, as_of=date(2025, 1, 15))
    trace = build_trace(profile, as_of=date(2025, 1, 15))
"""
from __future__ import annotations

__version__ = "0.1.0"

from .canon import canonical_json, content_hash, result_digest
from .citations import CitationRegistry, DecisionCitation, LegalCitation, cite_result
from .config import DEFAULT_CONFIG, EngineConfig, LegalPhraseTable, PenaltyTable
from .engine import (
    KycDecisionEngine,
    TraceBuilder,
    build_trace,
    classify_entity,
    compare_addresses,
    resolve_addresses,
    resolve_signatories,
    resolve_ubos,
    validate_identity_document,
    validate_kyc_profile,
    validate_proof_of_address,
)
from .exceptions import (
    CitationNotFoundError,
    MexKycError,
    ProfileValidationError,
    RulePackLoadError,
    RulePackValidationError,
    RulePackVersionMismatch,
)
from .intake import load_profile, load_profile_file
from .models import (
    EntityType,
    FlagLevel,
    KycProfile,
    TraceSection,
    ValidationFlag,
    ValidationResult,
)
from .packs import RulePackLoader, load_rule_pack

__all__ = [
    "__version__",
    # Engine
    "KycDecisionEngine",
    "TraceBuilder",
    "validate_kyc_profile",
    "build_trace",
    "classify_entity",
    "compare_addresses",
    "resolve_addresses",
    "resolve_signatories",
    "resolve_ubos",
    "validate_identity_document",
    "validate_proof_of_address",
    # Models
    "EntityType",
    "FlagLevel",
    "KycProfile",
    "TraceSection",
    "ValidationFlag",
    "ValidationResult",
    # Configuration
    "DEFAULT_CONFIG",
    "EngineConfig",
    "LegalPhraseTable",
    "PenaltyTable",
    "RulePackLoader",
    "load_rule_pack",
    # Intake
    "load_profile",
    "load_profile_file",
    # Citations
    "CitationRegistry",
    "DecisionCitation",
    "LegalCitation",
    "cite_result",
    # Serialization
    "canonical_json",
    "content_hash",
    "result_digest",
    # Exceptions
    "MexKycError",
    "CitationNotFoundError",
    "ProfileValidationError",
    "RulePackLoadError",
    "RulePackValidationError",
    "RulePackVersionMismatch",
]
