"""
Tests for the evidentiary trace.
"""
from __future__ import annotations

from mexkyc.canon import content_hash
from mexkyc.engine import TraceBuilder, build_trace
from mexkyc.models import AddressRole, FreshnessDocType, PowerScope

from tests.conftest import AS_OF, make_bill, make_deed, make_profile, make_shareholder


class TestUboTrace:
    """Tests for per-shareholder calculations."""

    def test_voting_share_calculation(self, moral_profile):
        trace = TraceBuilder().build(moral_profile, AS_OF)
        major, minor = trace.ubos
        assert major.calculation == "700 / 1,000 voting shares = 70.00% (threshold >25%: UBO)"
        assert minor.voting_pct == 30.0
        assert major.threshold_pct == 25.0

    def test_non_voting_holder(self):
        deed = make_deed(shareholders=[
            make_shareholder("Fundador", shares=300, share_series="Serie A"),
            make_shareholder("Inversionista", shares=700, share_series="Serie B"),
        ])
        trace = build_trace(make_profile(company_identity=deed), AS_OF)
        investor = trace.ubos[1]
        assert not investor.has_voting_rights
        assert investor.ownership_pct == 70.0
        assert investor.calculation.startswith("Non-voting shares")
        assert investor.calculation.endswith("not UBO)")

    def test_stated_percentages(self):
        deed = make_deed(shareholders=[
            make_shareholder("A", percentage=80.0),
            make_shareholder("B", percentage=20.0),
        ])
        trace = build_trace(make_profile(company_identity=deed), AS_OF)
        assert trace.ubos[0].calculation.startswith("Voting weight from stated percentage = 80.00%")

    def test_no_deed(self):
        assert build_trace(make_profile(company_identity=None), AS_OF).ubos == []


class TestAddressTrace:
    """Tests for address evidence by role."""

    def test_roles_in_order(self, moral_profile):
        trace = build_trace(moral_profile, AS_OF)
        assert [a.role for a in trace.address_evidence] == [
            AddressRole.FOUNDING,
            AddressRole.FISCAL,
            AddressRole.OPERATIONAL,
        ]

    def test_operational_cites_matching_documents(self):
        profile = make_profile(address_evidence=[make_bill()])
        operational = build_trace(profile, AS_OF).address_evidence[2]
        assert [s.document for s in operational.sources] == ["Bank Statement (BBVA)", "CFE"]

    def test_operational_inferred_from_fiscal(self):
        operational = build_trace(make_profile(bank_accounts=[]), AS_OF).address_evidence[2]
        assert operational.address is not None
        assert operational.sources[0].document == "Inferred from Fiscal/Other"

    def test_missing_addresses(self):
        profile = make_profile(company_identity=None, company_tax_profile=None, bank_accounts=[])
        trace = build_trace(profile, AS_OF)
        assert all(a.address is None and a.sources == [] for a in trace.address_evidence)


class TestPowerAndFreshnessTrace:
    """Tests for signatory and freshness sections."""

    def test_power_entry(self, moral_profile):
        powers = build_trace(moral_profile, AS_OF).powers
        assert len(powers) == 1
        assert powers[0].scope == PowerScope.FULL
        assert powers[0].missing_powers == []
        assert powers[0].sources[0].document == "Acta Constitutiva"

    def test_freshness_entries(self, moral_profile):
        freshness = build_trace(moral_profile, AS_OF).freshness
        assert [f.doc_type for f in freshness] == [FreshnessDocType.BANK_STATEMENT, FreshnessDocType.SAT_CONSTANCIA]

    def test_serializable_and_stable(self, moral_profile):
        first = build_trace(moral_profile, AS_OF).to_dict()
        second = build_trace(moral_profile, AS_OF).to_dict()
        assert content_hash(first) == content_hash(second)
        assert first["powers"][0]["scope"] == "full"
