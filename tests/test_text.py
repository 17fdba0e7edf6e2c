"""
Tests for name, entity and RFC canonicalization.
"""
from __future__ import annotations

import pytest

from mexkyc.engine.text import (
    canonicalize_entity_name,
    canonicalize_person_name,
    fold,
    is_sociedad_mercantil,
    legal_suffix,
    name_units,
    names_match,
    rfc_kind,
    surname_units,
    token_overlap,
)


class TestFold:
    """Tests for accent folding and whitespace collapsing."""

    def test_removes_accents_and_uppercases(self):
        """Diacritics are stripped, text is upper-cased."""
        assert fold("Martínez Peña") == "MARTINEZ PENA"

    def test_collapses_punctuation(self):
        """Punctuation becomes whitespace and runs collapse."""
        assert fold("  S.A.  de   C.V. ") == "S A DE C V"

    def test_none_is_empty(self):
        assert fold(None) == ""


class TestTokenOverlap:
    """Tests for order-independent token overlap."""

    def test_ratio_over_smaller_set(self):
        """Overlap is divided by the smaller token set."""
        assert token_overlap("GRUPO POUNJ SA DE CV", "GRUPO POUNJ") == 1.0

    def test_single_character_tokens_ignored(self):
        assert token_overlap("A B", "A B") == 0.0

    def test_symmetric(self):
        a, b = "JUAN CARLOS PEREZ", "PEREZ LOPEZ JUAN"
        assert token_overlap(a, b) == token_overlap(b, a)


class TestEntityNames:
    """Tests for legal suffix canonicalization."""

    @pytest.mark.parametrize("raw", [
        "Grupo Pounj, S.A. de C.V.",
        "GRUPO POUNJ SA DE CV",
        "Grupo Pounj Sociedad Anónima de Capital Variable",
    ])
    def test_suffix_variants_canonicalize(self, raw):
        """All spellings of S.A. de C.V. reach the same canonical form."""
        assert canonicalize_entity_name(raw) == "GRUPO POUNJ SA DE CV"

    def test_sapi(self):
        assert legal_suffix("Fintech Uno, S.A.P.I. de C.V.") == "SAPI DE CV"

    def test_sociedad_civil_is_not_mercantile(self):
        """A Sociedad Civil has no commercial registry folio requirement."""
        assert not is_sociedad_mercantil("Despacho Contable, S.C.")

    def test_srl_is_mercantile(self):
        assert is_sociedad_mercantil("Comercial Norte S. de R.L. de C.V.")

    def test_no_suffix(self):
        assert legal_suffix("JUAN PEREZ") is None


class TestPersonNames:
    """Tests for person-name matching."""

    def test_nickname_resolution(self):
        """Common nicknames resolve to the canonical given name."""
        assert canonicalize_person_name("Pepe Hernández") == canonicalize_person_name("José Hernandez")

    def test_order_independent(self):
        assert names_match("PEREZ GARCIA JUAN", "Juan Pérez García")

    def test_unrelated_names(self):
        assert not names_match("JUAN PEREZ", "ROBERTO SANCHEZ")

    def test_missing_name_never_matches(self):
        assert not names_match(None, "JUAN PEREZ")

    def test_compound_surname_stays_one_unit(self):
        """Particles stay attached to the surname they introduce."""
        assert name_units("María de la Cruz Pérez") == ["MARIA", "DE LA CRUZ", "PEREZ"]

    def test_common_given_names_are_not_surnames(self):
        assert surname_units("MARIA DE LA CRUZ PEREZ") == {"DE LA CRUZ", "PEREZ"}


class TestRfc:
    """Tests for RFC shape detection."""

    def test_three_letter_rfc_is_moral(self):
        assert rfc_kind("GPO200115AB1") == "moral"

    def test_four_letter_rfc_is_fisica(self):
        assert rfc_kind("CUHM800101AB1") == "fisica"

    def test_separators_ignored(self):
        assert rfc_kind("GPO-200115-AB1") == "moral"

    def test_malformed(self):
        assert rfc_kind("12345") is None
        assert rfc_kind(None) is None
