"""
Tests for loading extraction records into a KycProfile.
"""
from __future__ import annotations

import copy
import json
import logging
from datetime import date

import pytest
import yaml

from mexkyc.engine import KycDecisionEngine
from mexkyc.exceptions import ProfileValidationError
from mexkyc.intake import (
    load_profile,
    load_profile_file,
    load_profile_from_string,
    parse_date,
    parse_year,
)
from mexkyc.models import ImmigrationStatus, NationalId, Passport

from tests.conftest import AS_OF, FULL_POWERS, GENERATED_AT


ADDRESS = {
    "street": "AV. PASEO DE LA REFORMA",
    "ext_number": "222",
    "colonia": "JUAREZ",
    "municipio": "CUAUHTEMOC",
    "estado": "CIUDAD DE MEXICO",
    "cp": "06600",
}

RECORDS = {
    "customer_id": "CUST-001",
    "company_identity": {
        "razon_social": "GRUPO POUNJ, S.A. DE C.V.",
        "rfc": "GPO200115AB1",
        "incorporation_date": "2020-01-15",
        "founding_address": ADDRESS,
        "shareholders": [
            {"name": "Juan Pérez García", "shares": 700, "class": "Serie A"},
            {"name": "Ana López Ruiz", "shares": "300", "class": "Serie A", "nationality": None},
        ],
        "legal_representatives": [{
            "name": "Juan Pérez García",
            "role": "ADMINISTRADOR UNICO",
            "poder_scope": FULL_POWERS,
            "can_sign_contracts": True,
        }],
        "notary": {"name": "Lic. Roberto Núñez", "notary_number": 151, "protocol_date": "15/01/2020"},
        "registry": {"unique_doc_number": "N-2020012345", "registration_city": "CDMX"},
        "governance": {"board": "ignored by the engine"},
    },
    "company_tax_profile": {
        "rfc": "GPO200115AB1",
        "razon_social": "GRUPO POUNJ",
        "tax_regime": "General de Ley Personas Morales",
        "status": "ACTIVO",
        "issue": {"issue_date": "2025-01-05"},
        "fiscal_address": ADDRESS,
        "tax_obligations": [{"description": "Declaración anual de ISR"}, "Pago de IVA", " "],
    },
    "representative_identity": {
        "full_name": "JUAN PEREZ GARCIA",
        "document_type": "INE",
        "vigencia_year": "2020-2030",
    },
    "bank_accounts": [{
        "bank_name": "BBVA",
        "account_holder_name": "GRUPO POUNJ SA DE CV",
        "statement_period_end": "2024-12-26",
        "address": ADDRESS,
    }],
}


def records(**overrides):
    data = copy.deepcopy(RECORDS)
    data.update(overrides)
    return data


class TestLoadProfile:
    """Tests for load_profile."""

    def test_full_profile_scores_clean(self):
        profile = load_profile(records())
        result = KycDecisionEngine().validate(profile, AS_OF, GENERATED_AT)
        assert result.score == 1.0

    def test_deed_fields(self):
        deed = load_profile(records()).company_identity
        assert deed.shareholders[0].share_series == "Serie A"
        assert deed.shareholders[1].shares == 300.0
        assert deed.legal_representatives[0].powers == FULL_POWERS
        assert deed.legal_representatives[0].source_document == "Acta Constitutiva"
        assert deed.notary.notary_number == "151"
        assert deed.notary.protocol_date == date(2020, 1, 15)
        assert deed.registry.fme == "N-2020012345"

    def test_tax_fields(self):
        tax = load_profile(records()).company_tax_profile
        assert tax.issue_date == date(2025, 1, 5)
        assert tax.tax_obligations == ["Declaración anual de ISR", "Pago de IVA"]

    def test_vigencia_range(self):
        ine = load_profile(records()).representative_identity
        assert isinstance(ine, NationalId)
        assert ine.vigencia_year == 2030

    def test_legacy_aliases(self):
        profile = load_profile(records(
            proofs_of_address=[{"vendor_name": "CFE", "client_name": "GRUPO POUNJ", "issue_datetime": "2025-01-10T08:30:00"}],
        ))
        assert profile.address_evidence[0].issue_date == date(2025, 1, 10)
        assert profile.bank_accounts[0].address_on_statement.cp == "06600"

    def test_separate_powers_default_source(self):
        profile = load_profile(records(
            power_of_attorney_records=[{"name": "Ana López Ruiz", "role": "APODERADO", "powers": FULL_POWERS[:1]}],
        ))
        assert profile.power_of_attorney_records[0].source_document == "Poder Notarial"
        assert not profile.power_of_attorney_records[0].can_sign_contracts

    def test_blank_and_numeric_values(self):
        profile = load_profile(records(
            current_fiscal_address={"street": "  ", "cp": 6600},
            founding_address={"street": "", "cp": None},
        ))
        assert profile.current_fiscal_address.street is None
        assert profile.current_fiscal_address.cp == "6600"
        assert profile.founding_address is None


class TestIdentityRouting:
    """Each identity record becomes exactly one variant."""

    @pytest.mark.parametrize("record,expected", [
        ({"full_name": "JUAN PEREZ", "document_type": "INE"}, NationalId),
        ({"full_name": "JUAN PEREZ", "document_type": "ife"}, NationalId),
        ({"full_name": "JUAN PEREZ", "clave_elector": "PRGRJN80010109H100"}, NationalId),
        ({"full_name": "JOHN SMITH", "document_type": "Pasaporte"}, Passport),
        ({"full_name": "JOHN SMITH", "document_type": "RESIDENTE TEMPORAL"}, ImmigrationStatus),
        ({"full_name": "JOHN SMITH"}, ImmigrationStatus),
    ])
    def test_representative_identity(self, record, expected):
        profile = load_profile(records(representative_identity=record))
        assert type(profile.representative_identity) is expected

    def test_inferred_ine_type(self):
        profile = load_profile(records(representative_identity={"full_name": "JUAN PEREZ", "cic": 123456789}))
        assert profile.representative_identity.document_type == "INE"
        assert profile.representative_identity.document_number == "123456789"

    def test_passport_slot_is_always_passport(self):
        profile = load_profile(records(
            passport_identity={"full_name": "JOHN SMITH", "document_type": "INE", "expiry_date": "2030-06-01"},
        ))
        assert isinstance(profile.passport_identity, Passport)
        assert profile.passport_identity.expiry_date == date(2030, 6, 1)


class TestErrors:
    """Structural problems raise ProfileValidationError."""

    def test_missing_customer_id(self):
        data = records()
        del data["customer_id"]
        with pytest.raises(ProfileValidationError) as exc:
            load_profile(data)
        assert exc.value.code == "MK_PROFILE_VALIDATION_ERROR"
        assert exc.value.details["errors"]

    def test_representative_without_name(self):
        data = records(power_of_attorney_records=[{"role": "APODERADO"}])
        with pytest.raises(ProfileValidationError) as exc:
            load_profile(data)
        assert exc.value.customer_id == "CUST-001"

    def test_not_a_mapping(self):
        with pytest.raises(ProfileValidationError):
            load_profile([RECORDS])

    def test_bad_json_string(self):
        with pytest.raises(ProfileValidationError):
            load_profile_from_string("{not json")

    def test_unparseable_date_is_dropped(self, caplog):
        data = records()
        data["bank_accounts"][0]["statement_period_end"] = "fin de mes"
        with caplog.at_level(logging.WARNING, logger="mexkyc.intake.loader"):
            profile = load_profile(data)
        assert profile.bank_accounts[0].statement_period_end is None
        assert "statement_period_end" in caplog.text


class TestFiles:
    """Tests for file and string entry points."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps(RECORDS, ensure_ascii=False), encoding="utf-8")
        assert load_profile_file(path).customer_id == "CUST-001"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text(yaml.safe_dump(RECORDS, allow_unicode=True), encoding="utf-8")
        profile = load_profile_file(path)
        assert profile.company_identity.razon_social == "GRUPO POUNJ, S.A. DE C.V."

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProfileValidationError):
            load_profile_file(tmp_path / "missing.json")

    def test_yaml_string(self):
        profile = load_profile_from_string("customer_id: CUST-9\n", format="yaml")
        assert profile.customer_id == "CUST-9"
        assert profile.bank_accounts == []


class TestScalarParsers:
    """Tests for parse_date and parse_year."""

    @pytest.mark.parametrize("raw,expected", [
        ("2025-01-15", date(2025, 1, 15)),
        ("2025-01-15T10:00:00Z", date(2025, 1, 15)),
        ("15/01/2025", date(2025, 1, 15)),
        ("15-01-2025", date(2025, 1, 15)),
        (date(2025, 1, 15), date(2025, 1, 15)),
        ("", None),
        (None, None),
        ("enero 2025", None),
    ])
    def test_parse_date(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        (2030, 2030),
        ("2030", 2030),
        ("2019-2029", 2029),
        ("VIGENCIA 2031", 2031),
        ("sin vigencia", None),
    ])
    def test_parse_year(self, raw, expected):
        assert parse_year(raw) == expected
