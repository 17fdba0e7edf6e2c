"""
Tests for beneficial ownership and voting-rights resolution.
"""
from __future__ import annotations

import pytest

from mexkyc.engine import check_equity_consistency, infer_voting_rights, resolve_ubos

from tests.conftest import make_shareholder


class TestVotingRights:
    """Tests for the voting eligibility precedence."""

    def test_serie_a_votes(self):
        assert infer_voting_rights(make_shareholder("A", shares=10, share_series="Serie A"))

    def test_serie_b_does_not_vote(self):
        assert not infer_voting_rights(make_shareholder("B", shares=10, share_series="Serie B"))

    def test_roman_numeral_series(self):
        assert not infer_voting_rights(make_shareholder("B", shares=10, share_series="II"))
        assert infer_voting_rights(make_shareholder("A", shares=10, share_series="I"))

    def test_explicit_flag_wins(self):
        """An explicit flag overrides share type and series."""
        holder = make_shareholder(
            "X", shares=10, share_type="Preferente", share_series="Serie B", has_voting_rights=True
        )
        assert infer_voting_rights(holder)

    def test_share_type_beats_series(self):
        holder = make_shareholder("X", shares=10, share_type="Ordinaria", share_series="Serie B")
        assert infer_voting_rights(holder)
        holder = make_shareholder("Y", shares=10, share_type="Acciones preferentes", share_series="Serie A")
        assert not infer_voting_rights(holder)

    def test_default_votes(self):
        assert infer_voting_rights(make_shareholder("X", shares=10))


class TestResolveUbos:
    """Tests for resolve_ubos."""

    def test_700_300_split(self):
        """Ownership 70/30, both voting by default, voting equals ownership."""
        resolution = resolve_ubos([
            make_shareholder("Mayoritario", shares=700),
            make_shareholder("Minoritario", shares=300),
        ])
        major, minor = resolution.holders
        assert major.ownership_pct == pytest.approx(70.0)
        assert minor.ownership_pct == pytest.approx(30.0)
        assert major.voting_pct == major.ownership_pct
        assert minor.voting_pct == minor.ownership_pct
        assert major.is_ubo
        assert resolution.total_shares == 1000
        assert resolution.total_voting_shares == 1000

    def test_threshold_is_strict(self):
        """A holder exactly at the threshold is not a UBO."""
        resolution = resolve_ubos(
            [make_shareholder("Mayoritario", shares=700), make_shareholder("Minoritario", shares=300)],
            threshold_pct=30.0,
        )
        assert [u.name for u in resolution.ubos] == ["Mayoritario"]

    def test_non_voting_shares_excluded_from_control(self):
        """Serie B capital dilutes ownership but not voting control."""
        resolution = resolve_ubos([
            make_shareholder("Fundador", shares=200, share_series="Serie A"),
            make_shareholder("Socio", shares=100, share_series="Serie A"),
            make_shareholder("Inversionista", shares=700, share_series="Serie B"),
        ])
        founder, partner, investor = resolution.holders
        assert founder.ownership_pct == pytest.approx(20.0)
        assert founder.voting_pct == pytest.approx(66.6667)
        assert partner.voting_pct == pytest.approx(33.3333)
        assert investor.voting_pct == 0.0
        assert not investor.is_ubo
        assert {u.name for u in resolution.ubos} == {"Fundador", "Socio"}

    def test_explicit_beneficial_owner(self):
        """A holder marked as beneficial owner is a UBO regardless of percentage."""
        resolution = resolve_ubos([
            make_shareholder("Grande", shares=900),
            make_shareholder("Controlador", shares=100, is_beneficial_owner=True),
        ])
        assert {u.name for u in resolution.ubos} == {"Grande", "Controlador"}

    def test_stated_percentage_preferred(self):
        resolution = resolve_ubos([
            make_shareholder("A", shares=1, percentage=60.0),
            make_shareholder("B", shares=1, percentage=40.0),
        ])
        assert [h.ownership_pct for h in resolution.holders] == [60.0, 40.0]

    def test_percentages_only(self):
        """Without share counts, stated percentages drive voting weight."""
        resolution = resolve_ubos([
            make_shareholder("A", percentage=80.0),
            make_shareholder("B", percentage=20.0),
        ])
        assert [u.name for u in resolution.ubos] == ["A"]
        assert resolution.holders[0].voting_pct == pytest.approx(80.0)

    def test_idempotent(self):
        """Resolving twice yields identical results."""
        shareholders = [
            make_shareholder("A", shares=510, share_series="Serie A"),
            make_shareholder("B", shares=490, share_series="Serie B"),
        ]
        assert resolve_ubos(shareholders) == resolve_ubos(shareholders)

    def test_foreign_holder_marked(self):
        resolution = resolve_ubos([make_shareholder("Foreign Holdings LLC", shares=100, nationality="Estadounidense")])
        assert resolution.holders[0].is_foreign

    def test_empty(self):
        resolution = resolve_ubos([])
        assert resolution.holders == []
        assert resolution.ubos == []


class TestEquityConsistency:
    """Tests for check_equity_consistency."""

    def test_computed_percentages_sum_to_100(self):
        check = check_equity_consistency([make_shareholder("A", shares=700), make_shareholder("B", shares=300)])
        assert check.deviation_from_100 == pytest.approx(0.0)

    def test_stated_percentages_off(self):
        check = check_equity_consistency([
            make_shareholder("A", percentage=60.0),
            make_shareholder("B", percentage=35.0),
        ])
        assert check.sum_of_percentages == pytest.approx(95.0)
        assert check.deviation_from_100 == pytest.approx(5.0)

    def test_no_shareholders(self):
        assert check_equity_consistency([]) is None
