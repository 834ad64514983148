"""Tests for plausibility and format validation."""

import pytest

from chemresolve.identifiers import IdentifierKind
from chemresolve.validation import (
    FORMAT_EXAMPLES,
    FORMAT_PATTERNS,
    is_plausible,
    looks_like,
    matches_format,
)


class TestIsPlausible:
    """Tests for the gibberish filter."""

    @pytest.mark.parametrize("raw", ["", "   ", "\t"])
    def test_blank_rejected(self, raw: str) -> None:
        """Test that blank input is never plausible."""
        for kind in IdentifierKind:
            assert not is_plausible(kind, raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "water",
            "ethanol",
            "caffeine",
            "acetylsalicylic acid",
            "2-methylpropane",
            "methylbenzene",
            "hcl",
            "ch4",
            "cl",
            "Br",
        ],
    )
    def test_plausible_names(self, raw: str) -> None:
        """Test that real names and shorthands pass."""
        assert is_plausible(IdentifierKind.IUPAC_NAME, raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "xk7##",  # consonant cluster with junk
            "x",  # too short
            "##!",  # punctuation only
            "zzq",  # short letter token
            "brrrrt",  # long consonant run
            "123",  # no letters
            "xkcd",  # no vowel
        ],
    )
    def test_implausible_names(self, raw: str) -> None:
        """Test that gibberish names are rejected."""
        assert not is_plausible(IdentifierKind.IUPAC_NAME, raw)

    @pytest.mark.parametrize("raw", ["O", "C", "CCO", "c1ccccc1", "CC(=O)O"])
    def test_short_smiles_allowed(self, raw: str) -> None:
        """Test that short SMILES strings are not mistaken for gibberish."""
        assert is_plausible(IdentifierKind.SMILES, raw)

    def test_punctuation_only_smiles_rejected(self) -> None:
        """Test that SMILES still need at least one letter or digit."""
        assert not is_plausible(IdentifierKind.SMILES, "@@")

    @pytest.mark.parametrize(
        "kind,raw",
        [
            (IdentifierKind.CAS_NUMBER, "7732-18-5"),
            (IdentifierKind.PUBCHEM_CID, "962"),
            (IdentifierKind.UNII, "059QF0KO0R"),
            (IdentifierKind.INCHI, "InChI=1S/H2O/h1H2"),
        ],
    )
    def test_other_kinds(self, kind: IdentifierKind, raw: str) -> None:
        """Test that registry identifiers with digits pass."""
        assert is_plausible(kind, raw)

    def test_consonant_run_only_checked_for_names(self) -> None:
        """Test that other kinds are not subject to the vowel heuristics."""
        assert is_plausible(IdentifierKind.RTECS_NUMBER, "ZC0110000")
        assert is_plausible(IdentifierKind.COMPTOX_DASHBOARD, "DTXSID6026296")


class TestMatchesFormat:
    """Tests for per-kind format patterns."""

    @pytest.mark.parametrize("kind", list(FORMAT_PATTERNS))
    def test_examples(self, kind: IdentifierKind) -> None:
        """Test that every documented example is accepted."""
        assert matches_format(kind, FORMAT_EXAMPLES[kind])

    @pytest.mark.parametrize(
        "kind,value",
        [
            (IdentifierKind.CAS_NUMBER, "7732-185"),
            (IdentifierKind.CAS_NUMBER, "1-18-5"),
            (IdentifierKind.PUBCHEM_CID, "abc"),
            (IdentifierKind.PUBCHEM_CID, "0"),
            (IdentifierKind.CHEMSPIDER, "000"),
            (IdentifierKind.UNII, "059QF0KO0"),
            (IdentifierKind.EC_NUMBER, "231-7912"),
            (IdentifierKind.E_NUMBER, "E30"),
            (IdentifierKind.SMILES, "C C O"),
            (IdentifierKind.INCHI, "InChI=2/H2O"),
            (IdentifierKind.RTECS_NUMBER, "Z0110000"),
            (IdentifierKind.COMPTOX_DASHBOARD, "DTXSID123"),
        ],
    )
    def test_rejects_malformed(self, kind: IdentifierKind, value: str) -> None:
        """Test that malformed values are rejected."""
        assert not matches_format(kind, value)

    @pytest.mark.parametrize("kind", [IdentifierKind.IUPAC_NAME, IdentifierKind.ECHA_INFO_CARD])
    def test_unpatterned_kinds_pass(self, kind: IdentifierKind) -> None:
        """Test that kinds without a pattern always pass."""
        assert matches_format(kind, "anything at all")

    def test_e_number_suffix(self) -> None:
        """Test E numbers with a letter suffix."""
        assert matches_format(IdentifierKind.E_NUMBER, "E160a")
        assert matches_format(IdentifierKind.E_NUMBER, "E1404")


class TestLooksLike:
    """Tests for recognizing identifiers in free text."""

    def test_cas_synonym(self) -> None:
        """Test recognizing a CAS number."""
        assert looks_like(IdentifierKind.CAS_NUMBER, "7732-18-5")
        assert not looks_like(IdentifierKind.CAS_NUMBER, "water")

    def test_unpatterned_kind_never_matches(self) -> None:
        """Test that kinds without a pattern never match free text."""
        assert not looks_like(IdentifierKind.IUPAC_NAME, "water")
