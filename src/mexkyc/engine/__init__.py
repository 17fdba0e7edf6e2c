"""
MexKYC Engine

Resolvers, validators and the orchestrator that turn a KycProfile into
a scored decision and an audit trace.

Services:
- classify_entity: Persona Moral / Física subtype
- compare_addresses: weighted address equivalence
- resolve_ubos: beneficial ownership and voting math
- resolve_signatories: power-of-attorney scope per representative
- validate_identity_document: immigration / INE / passport decision table
- validate_proof_of_address: bank, bill and third-party rules
- check_entity_coherence: deed vs SAT certificate
- check_freshness: document ages
- KycDecisionEngine: the full decision
- TraceBuilder: the evidentiary trace

Usage:
    from mexkyc.engine import KycDecisionEngine, TraceBuilder

    engine = KycDecisionEngine()
    result = engine.validate(profile, as_of=date(2025, 1, 15))
    trace = TraceBuilder().build(profile, as_of=date(2025, 1, 15))
"""
from __future__ import annotations

from .address_comparator import (
    AddressComparison,
    addresses_equivalent,
    compare_addresses,
    normalize_address,
    normalize_state,
    strip_street_type,
)
from .address_resolver import resolve_addresses
from .entity_classifier import classify_entity, classify_persona_fisica
from .entity_coherence import CoherenceResult, check_entity_coherence
from .freshness import check_freshness
from .identity_checks import (
    IdentityRequirement,
    check_identity_requirements,
    determine_nationality,
)
from .immigration_validator import (
    DocumentOutcome,
    classify_immigration_document,
    outcome_penalty,
    validate_identity_document,
)
from .orchestrator import KycDecisionEngine, validate_kyc_profile
from .proof_of_address import PoaResult, validate_proof_of_address
from .signatory_resolver import (
    SignatoryInfo,
    merge_signatories,
    resolve_representative,
    resolve_signatories,
)
from .trace_builder import TraceBuilder, build_trace
from .ubo_resolver import (
    EquityCheck,
    UboInfo,
    UboResolution,
    check_equity_consistency,
    infer_voting_rights,
    resolve_ubos,
)

__all__ = [
    # Addresses
    "AddressComparison",
    "addresses_equivalent",
    "compare_addresses",
    "normalize_address",
    "normalize_state",
    "strip_street_type",
    "resolve_addresses",
    # Entity
    "classify_entity",
    "classify_persona_fisica",
    "CoherenceResult",
    "check_entity_coherence",
    # Identity
    "IdentityRequirement",
    "check_identity_requirements",
    "determine_nationality",
    "DocumentOutcome",
    "classify_immigration_document",
    "outcome_penalty",
    "validate_identity_document",
    # Corporate
    "EquityCheck",
    "UboInfo",
    "UboResolution",
    "check_equity_consistency",
    "infer_voting_rights",
    "resolve_ubos",
    "SignatoryInfo",
    "merge_signatories",
    "resolve_representative",
    "resolve_signatories",
    # Evidence
    "PoaResult",
    "validate_proof_of_address",
    "check_freshness",
    # Decision
    "KycDecisionEngine",
    "validate_kyc_profile",
    "TraceBuilder",
    "build_trace",
]
