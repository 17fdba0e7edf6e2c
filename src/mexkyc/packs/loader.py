"""
MexKYC Rule Pack Loader

Loads and validates rule packs from YAML or JSON files and converts
them into an EngineConfig. Fields a pack leaves out keep the engine
defaults.
"""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..config import DEFAULT_CONFIG, EngineConfig, LegalPhraseTable, PenaltyTable
from ..exceptions import RulePackLoadError, RulePackValidationError, RulePackVersionMismatch
from .schema import (
    SCHEMA_VERSION,
    LegalPhraseSchema,
    PenaltySchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)

logger = logging.getLogger(__name__)

_ENGINE_FIELDS = (
    "demo_mode",
    "ubo_threshold_pct",
    "freshness_max_days",
    "expiring_soon_days",
    "aged_card_years",
    "address_equivalence_threshold",
    "name_overlap_threshold",
    "identity_name_overlap_min",
)


# =============================================================================
# Schema to Config Converters
# =============================================================================

def _convert_penalties(schema: Optional[PenaltySchema], base: PenaltyTable) -> PenaltyTable:
    if schema is None:
        return base
    return replace(base, **schema.model_dump(exclude_none=True))


def _convert_legal_phrases(schema: Optional[LegalPhraseSchema], base: LegalPhraseTable) -> LegalPhraseTable:
    if schema is None:
        return base
    overrides: dict[str, Any] = {}
    if schema.power_patterns is not None:
        overrides["power_patterns"] = tuple((p.name, p.pattern) for p in schema.power_patterns)
    for name in ("restriction_keywords", "limited_role_labels", "limited_power_labels", "officer_titles"):
        value = getattr(schema, name)
        if value is not None:
            overrides[name] = tuple(value)
    if schema.administration_power is not None:
        overrides["administration_power"] = schema.administration_power
    if schema.attorney_label is not None:
        overrides["attorney_label"] = schema.attorney_label.strip().upper()
    return replace(base, **overrides)


def convert_rule_pack(schema: RulePackSchema, base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    """Apply a validated rule pack on top of ``base``."""
    overrides: dict[str, Any] = {
        name: getattr(schema, name)
        for name in _ENGINE_FIELDS
        if getattr(schema, name) is not None
    }
    overrides["penalties"] = _convert_penalties(schema.penalties, base.penalties)
    overrides["legal_phrases"] = _convert_legal_phrases(schema.legal_phrases, base.legal_phrases)
    return replace(base, **overrides)


# =============================================================================
# Rule Pack Loader
# =============================================================================

class RulePackLoader:
    """
    Loads rule packs from YAML or JSON files.

    Usage:
        loader = RulePackLoader()
        config = loader.load("packs/mx_kyc_default.yaml")
    """

    def __init__(self, strict_version: bool = True, base: EngineConfig = DEFAULT_CONFIG):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
            base: Configuration the pack's overrides are applied to
        """
        self.strict_version = strict_version
        self.base = base
        self._configs: dict[str, EngineConfig] = {}

    def load(self, path: Union[str, Path]) -> EngineConfig:
        """
        Load a rule pack from a file.

        Raises:
            RulePackLoadError: If file cannot be read or parsed
            RulePackValidationError: If validation fails
            RulePackVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise RulePackLoadError(
                message=f"Failed to load rule pack: {e}",
                details={"path": str(path), "error": str(e)},
            )

        schema = self._validate(data, str(path))
        config = convert_rule_pack(schema, self.base)
        self._configs[schema.id] = config
        logger.info("Loaded rule pack %s from %s", schema.id, path)
        return config

    def load_data(self, data: Any, source: str = "<string>") -> EngineConfig:
        """Load a rule pack from already-parsed data."""
        schema = self._validate(data, source)
        config = convert_rule_pack(schema, self.base)
        self._configs[schema.id] = config
        return config

    def _validate(self, data: Any, source: str) -> RulePackSchema:
        if not isinstance(data, dict):
            raise RulePackValidationError(
                message="Rule pack must be a mapping",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise RulePackVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            return validate_rule_pack(data)
        except ValidationError as e:
            raise RulePackValidationError(
                message=f"Rule pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            )

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f)
            elif path.suffix.lower() == ".json":
                return json.load(f)
            else:
                content = f.read()
                try:
                    return yaml.safe_load(content)
                except yaml.YAMLError:
                    return json.loads(content)

    def get_config(self, pack_id: str) -> Optional[EngineConfig]:
        """Get a cached configuration by pack ID."""
        return self._configs.get(pack_id)

    def list_packs(self) -> list[str]:
        """List IDs of all loaded packs."""
        return list(self._configs.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_rule_pack(path: Union[str, Path]) -> EngineConfig:
    """Load a rule pack from a file with a temporary loader."""
    return RulePackLoader().load(path)


def load_rule_pack_from_string(content: str, format: str = "yaml") -> EngineConfig:
    """
    Load a rule pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise RulePackLoadError(
            message=f"Failed to parse rule pack: {e}",
            details={"format": format, "error": str(e)},
        )
    return RulePackLoader().load_data(data)
