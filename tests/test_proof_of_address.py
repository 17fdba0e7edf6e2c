"""
Tests for proof-of-address validation.
"""
from __future__ import annotations

import pytest

from mexkyc.config import DEFAULT_CONFIG, EngineConfig
from mexkyc.engine import resolve_addresses, validate_proof_of_address
from mexkyc.engine.proof_of_address import is_family_member
from mexkyc.models import EntityType, FlagLevel, ThirdPartyKind

from tests.conftest import (
    days_ago,
    make_address,
    make_bank_account,
    make_bank_identity,
    make_bill,
    make_fisica_profile,
    make_other_address,
    make_profile,
)


PENALTIES = DEFAULT_CONFIG.penalties
MORAL = EntityType.PERSONA_MORAL
FISICA = EntityType.PERSONA_FISICA_EMPRESARIAL


def validate(profile, entity_type, config=DEFAULT_CONFIG):
    return validate_proof_of_address(resolve_addresses(profile, config), entity_type, config)


class TestOwnDocuments:
    """Tests for evidence in the customer's own name."""

    def test_bank_statement_accepted(self, moral_profile):
        result = validate(moral_profile, MORAL)
        assert result.is_valid
        assert result.source == "bank"
        assert [f.code for f in result.flags] == ["BANK_STATEMENT_VALID"]
        assert result.penalty == 0.0

    def test_utility_bill_accepted(self):
        profile = make_profile(bank_accounts=[], address_evidence=[make_bill()])
        result = validate(profile, MORAL)
        assert result.is_valid
        assert result.source == "utility_bill"
        assert result.flags[0].code == "POA_VALID"

    def test_bank_checked_before_bills(self):
        profile = make_profile(address_evidence=[make_bill()])
        assert validate(profile, MORAL).source == "bank"

    def test_demo_mode_prefers_identity_page(self):
        profile = make_profile(bank_identity=make_bank_identity())
        normal = validate(profile, MORAL)
        demo = validate(profile, MORAL, EngineConfig(demo_mode=True))
        assert normal.flags[0].supporting_docs == ("Bank Statement (BBVA)",)
        assert demo.flags[0].supporting_docs == ("Bank Identity Page (BANORTE)",)


class TestCorporateThirdParty:
    """A Persona Moral's bill must be in the company's name."""

    def test_third_party_bill_is_critical(self):
        profile = make_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="ROBERTO SANCHEZ TORRES", client_address=make_other_address())],
        )
        result = validate(profile, MORAL)
        assert not result.is_valid
        assert result.flags[0].code == "POA_NAME_MISMATCH"
        assert result.flags[0].level == FlagLevel.CRITICAL
        assert result.penalty == pytest.approx(0.25)

    def test_address_match_earns_relief(self):
        profile = make_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="ROBERTO SANCHEZ TORRES", client_address=make_address())],
        )
        result = validate(profile, MORAL)
        assert [f.code for f in result.flags] == ["POA_NAME_MISMATCH", "POA_ADDRESS_VERIFIED"]
        assert result.address_matches_fiscal
        assert result.penalty == pytest.approx(0.15)

    def test_latest_bill_is_judged(self):
        """Among several third-party bills, the most recent decides address relief."""
        profile = make_profile(
            bank_accounts=[],
            address_evidence=[
                make_bill(client_name="ROBERTO SANCHEZ TORRES", client_address=make_other_address(), issue_date=days_ago(60)),
                make_bill(client_name="ROBERTO SANCHEZ TORRES", client_address=make_address(), issue_date=days_ago(10)),
            ],
        )
        assert validate(profile, MORAL).address_matches_fiscal


class TestIndividualThirdParty:
    """Family and landlord bills for Persona Física customers."""

    def test_family_member(self):
        profile = make_fisica_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="JOSE DE LA CRUZ LOPEZ", client_address=make_other_address())],
        )
        result = validate(profile, FISICA)
        assert result.is_valid
        assert result.third_party_kind == ThirdPartyKind.FAMILY
        assert result.flags[0].level == FlagLevel.WARNING
        assert result.penalty == pytest.approx(PENALTIES.poa_family)

    def test_family_member_at_fiscal_address(self):
        profile = make_fisica_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="JOSE DE LA CRUZ LOPEZ")],
        )
        result = validate(profile, FISICA)
        assert result.flags[0].level == FlagLevel.INFO
        assert result.penalty == 0.0

    def test_landlord(self):
        profile = make_fisica_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="ROBERTO SANCHEZ TORRES", client_address=make_other_address())],
        )
        result = validate(profile, FISICA)
        assert not result.is_valid
        assert result.third_party_kind == ThirdPartyKind.LANDLORD
        assert result.penalty == pytest.approx(PENALTIES.poa_landlord)

    def test_landlord_at_fiscal_address(self):
        profile = make_fisica_profile(
            bank_accounts=[],
            address_evidence=[make_bill(client_name="ROBERTO SANCHEZ TORRES")],
        )
        result = validate(profile, FISICA)
        assert result.is_valid
        assert result.flags[0].code == "POA_THIRD_PARTY_LANDLORD"
        assert result.penalty == pytest.approx(PENALTIES.poa_landlord_address_match)

    def test_common_given_name_is_not_family(self):
        assert not is_family_member("MARIA LOPEZ RUIZ", "MARIA SANCHEZ TORRES")
        assert is_family_member("MARIA DE LA CRUZ HERNANDEZ", "Jose de la Cruz")


class TestMissingEvidence:
    """Tests for profiles without usable proof of address."""

    def test_foreign_bank_holder_is_warning(self):
        profile = make_profile(bank_accounts=[make_bank_account(account_holder_name="TRANSPORTES DEL BAJIO")])
        result = validate(profile, MORAL)
        assert result.flags[0].code == "POA_MISSING"
        assert result.flags[0].level == FlagLevel.WARNING
        assert result.penalty == pytest.approx(PENALTIES.poa_missing_with_bank)

    def test_nothing_on_file_is_critical(self):
        result = validate(make_profile(bank_accounts=[]), MORAL)
        assert not result.is_valid
        assert result.flags[0].level == FlagLevel.CRITICAL
        assert result.penalty == pytest.approx(PENALTIES.poa_missing)
