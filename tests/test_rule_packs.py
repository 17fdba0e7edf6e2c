"""
Tests for rule pack loading and validation.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from mexkyc.config import DEFAULT_CONFIG
from mexkyc.exceptions import RulePackLoadError, RulePackValidationError, RulePackVersionMismatch
from mexkyc.packs import RulePackLoader, check_schema_version, load_rule_pack, load_rule_pack_from_string


PACKS_DIR = Path(__file__).parent.parent / "packs"


class TestBundledPacks:
    """Tests for the packs shipped with the project."""

    def test_default_pack_matches_engine_defaults(self):
        config = load_rule_pack(PACKS_DIR / "mx_kyc_default.yaml")
        assert config == DEFAULT_CONFIG

    def test_demo_pack(self):
        config = load_rule_pack(PACKS_DIR / "mx_kyc_demo.yaml")
        assert config.demo_mode
        assert config.penalties == DEFAULT_CONFIG.penalties

    def test_loader_caches_by_id(self):
        loader = RulePackLoader()
        loader.load(PACKS_DIR / "mx_kyc_default.yaml")
        loader.load(PACKS_DIR / "mx_kyc_demo.yaml")
        assert loader.list_packs() == ["mx-kyc-default", "mx-kyc-demo"]
        assert loader.get_config("mx-kyc-demo").demo_mode
        assert loader.get_config("missing") is None


class TestOverrides:
    """Tests for partial overrides."""

    def test_partial_penalties_keep_defaults(self):
        config = load_rule_pack_from_string(
            "id: strict\npenalties:\n  ubo_missing: 0.3\n"
        )
        assert config.penalties.ubo_missing == 0.3
        assert config.penalties.poa_missing == DEFAULT_CONFIG.penalties.poa_missing

    def test_thresholds(self):
        config = load_rule_pack_from_string(
            '{"id": "tight", "ubo_threshold_pct": 10, "freshness_max_days": 60}', format="json"
        )
        assert config.ubo_threshold_pct == 10
        assert config.freshness_max_days == 60

    def test_phrase_table_upper_cased(self):
        config = load_rule_pack_from_string(
            "id: phrases\nlegal_phrases:\n  officer_titles: [' vocal ', 'Comisario']\n"
        )
        assert config.legal_phrases.officer_titles == ("VOCAL", "COMISARIO")

    def test_custom_base(self):
        loader = RulePackLoader(base=load_rule_pack(PACKS_DIR / "mx_kyc_demo.yaml"))
        config = loader.load_data({"id": "demo-strict", "freshness_max_days": 30})
        assert config.demo_mode
        assert config.freshness_max_days == 30


class TestValidation:
    """Tests for rejected packs."""

    def test_unknown_key(self):
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string("id: x\nubo_treshold_pct: 20\n")

    def test_unknown_penalty(self):
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string("id: x\npenalties:\n  made_up: 0.1\n")

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_penalty_out_of_range(self, value):
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string(f"id: x\npenalties:\n  poa_stale: {value}\n")

    def test_relief_exceeds_penalty(self):
        content = "id: x\npenalties:\n  poa_corporate_third_party: 0.1\n  poa_corporate_address_relief: 0.2\n"
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string(content)

    def test_bad_regex(self):
        content = "id: x\nlegal_phrases:\n  power_patterns:\n    - name: broken\n      pattern: '(ACTOS'\n"
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string(content)

    def test_administration_power_must_be_declared(self):
        content = (
            "id: x\nlegal_phrases:\n  power_patterns:\n    - name: pleitos\n      pattern: PLEITOS\n"
            "  administration_power: administracion\n"
        )
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string(content)

    def test_missing_id(self):
        with pytest.raises(RulePackValidationError) as exc:
            load_rule_pack_from_string("demo_mode: true\n")
        assert exc.value.code == "MK_RULE_PACK_VALIDATION_ERROR"
        assert exc.value.details["errors"]

    def test_not_a_mapping(self):
        with pytest.raises(RulePackValidationError):
            load_rule_pack_from_string("- a\n- b\n")


class TestVersionAndFiles:
    """Tests for version checks and file handling."""

    def test_major_version_mismatch(self):
        with pytest.raises(RulePackVersionMismatch) as exc:
            load_rule_pack_from_string('schema_version: "2.0.0"\nid: x\n')
        assert exc.value.details["pack_version"] == "2.0.0"

    def test_minor_version_accepted(self):
        assert check_schema_version({"schema_version": "1.4.0"})

    def test_lenient_loader(self):
        loader = RulePackLoader(strict_version=False)
        assert loader.load_data({"schema_version": "2.0.0", "id": "future"}) == DEFAULT_CONFIG

    def test_json_file(self, tmp_path):
        path = tmp_path / "pack.json"
        path.write_text(json.dumps({"id": "json-pack", "aged_card_years": 8}), encoding="utf-8")
        assert load_rule_pack(path).aged_card_years == 8

    def test_missing_file(self, tmp_path):
        with pytest.raises(RulePackLoadError):
            load_rule_pack(tmp_path / "nope.yaml")

    def test_malformed_yaml(self):
        with pytest.raises(RulePackLoadError):
            load_rule_pack_from_string("id: [unclosed\n")
