"""
MexKYC Rule Pack Schemas

Pydantic models for validating rule pack YAML/JSON files. A rule pack
overrides the engine's thresholds, penalties and legal phrase table
without a code change.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major-version compatibility
"""
from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Component Schemas
# =============================================================================

class PenaltySchema(BaseModel):
    """
    Penalty overrides. Any field left out keeps the engine default.

    Keys must name an existing penalty; values are score deductions in [0, 1].
    """
    model_config = {"extra": "forbid"}

    ubo_missing: Optional[float] = Field(None, ge=0, le=1)
    equity_inconsistent: Optional[float] = Field(None, ge=0, le=1)
    equity_near_100: Optional[float] = Field(None, ge=0, le=1)
    no_full_signatory: Optional[float] = Field(None, ge=0, le=1)
    representative_not_in_deed: Optional[float] = Field(None, ge=0, le=1)
    representative_without_powers: Optional[float] = Field(None, ge=0, le=1)
    identity_missing: Optional[float] = Field(None, ge=0, le=1)
    foreign_only_passport: Optional[float] = Field(None, ge=0, le=1)
    foreign_only_immigration: Optional[float] = Field(None, ge=0, le=1)
    identity_name_mismatch: Optional[float] = Field(None, ge=0, le=1)
    document_status_critical: Optional[float] = Field(None, ge=0, le=1)
    document_only_critical: Optional[float] = Field(None, ge=0, le=1)
    document_warning: Optional[float] = Field(None, ge=0, le=1)
    address_zip_mismatch: Optional[float] = Field(None, ge=0, le=1)
    poa_corporate_third_party: Optional[float] = Field(None, ge=0, le=1)
    poa_corporate_address_relief: Optional[float] = Field(None, ge=0, le=1)
    poa_family: Optional[float] = Field(None, ge=0, le=1)
    poa_landlord: Optional[float] = Field(None, ge=0, le=1)
    poa_landlord_address_match: Optional[float] = Field(None, ge=0, le=1)
    poa_missing_with_bank: Optional[float] = Field(None, ge=0, le=1)
    poa_missing: Optional[float] = Field(None, ge=0, le=1)
    missing_deed: Optional[float] = Field(None, ge=0, le=1)
    missing_tax_profile_moral: Optional[float] = Field(None, ge=0, le=1)
    missing_tax_profile_fisica: Optional[float] = Field(None, ge=0, le=1)
    wrong_sat_type: Optional[float] = Field(None, ge=0, le=1)
    tax_regime_no_commerce: Optional[float] = Field(None, ge=0, le=1)
    tax_status_inactive: Optional[float] = Field(None, ge=0, le=1)
    missing_fme: Optional[float] = Field(None, ge=0, le=1)
    missing_rnie: Optional[float] = Field(None, ge=0, le=1)
    missing_sre_convenio: Optional[float] = Field(None, ge=0, le=1)
    poa_stale: Optional[float] = Field(None, ge=0, le=1)
    bank_statement_stale: Optional[float] = Field(None, ge=0, le=1)

    @model_validator(mode="after")
    def validate_relief(self) -> "PenaltySchema":
        """Address relief cannot exceed the corporate third-party penalty it reduces."""
        if (
            self.poa_corporate_third_party is not None
            and self.poa_corporate_address_relief is not None
            and self.poa_corporate_address_relief > self.poa_corporate_third_party
        ):
            raise ValueError("poa_corporate_address_relief must not exceed poa_corporate_third_party")
        return self


class PowerPatternSchema(BaseModel):
    """One canonical power-of-attorney grant and its regex."""
    model_config = {"extra": "forbid"}

    name: str = Field(..., description="Power identifier (e.g., 'actos_de_dominio')")
    pattern: str = Field(..., description="Regex matched against upper-cased, accent-folded text")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex '{v}': {e}")
        return v


class LegalPhraseSchema(BaseModel):
    """Legal phrase table overrides."""
    model_config = {"extra": "forbid"}

    power_patterns: Optional[list[PowerPatternSchema]] = Field(
        None, description="Canonical grants; all must be present for full scope"
    )
    administration_power: Optional[str] = Field(
        None, description="Name of the grant that restriction keywords narrow"
    )
    restriction_keywords: Optional[list[str]] = None
    limited_role_labels: Optional[list[str]] = None
    limited_power_labels: Optional[list[str]] = None
    officer_titles: Optional[list[str]] = None
    attorney_label: Optional[str] = None

    @field_validator(
        "restriction_keywords", "limited_role_labels", "limited_power_labels", "officer_titles"
    )
    @classmethod
    def upper_keywords(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return [item.strip().upper() for item in v if item.strip()]

    @model_validator(mode="after")
    def validate_administration_power(self) -> "LegalPhraseSchema":
        """The administration grant must be one of the declared patterns."""
        if self.power_patterns and self.administration_power:
            names = {p.name for p in self.power_patterns}
            if self.administration_power not in names:
                raise ValueError(
                    f"administration_power '{self.administration_power}' is not a declared power pattern"
                )
        return self


# =============================================================================
# Rule Pack Schema (Root)
# =============================================================================

class RulePackSchema(BaseModel):
    """Root schema for a rule pack file."""
    model_config = {"extra": "forbid"}

    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    id: str = Field(..., description="Unique identifier (e.g., 'mx-kyc-default-2025')")
    name: Optional[str] = Field(None, description="Human-readable name")
    description: Optional[str] = None

    demo_mode: Optional[bool] = Field(None, description="Prefer the bank identity page")
    ubo_threshold_pct: Optional[float] = Field(None, gt=0, lt=100)
    freshness_max_days: Optional[int] = Field(None, gt=0)
    expiring_soon_days: Optional[int] = Field(None, ge=0)
    aged_card_years: Optional[int] = Field(None, gt=0)
    address_equivalence_threshold: Optional[float] = Field(None, gt=0, le=1)
    name_overlap_threshold: Optional[float] = Field(None, gt=0, le=1)
    identity_name_overlap_min: Optional[float] = Field(None, gt=0, le=1)

    penalties: Optional[PenaltySchema] = None
    legal_phrases: Optional[LegalPhraseSchema] = None


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_rule_pack(data: dict[str, Any]) -> RulePackSchema:
    """
    Validate a rule pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RulePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True when the pack's major schema version matches ours."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
