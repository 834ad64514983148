"""Tests for identifier normalization."""

import pytest

from chemresolve.identifiers import IdentifierKind
from chemresolve.normalize import normalize
from chemresolve.validation import FORMAT_EXAMPLES, FORMAT_PATTERNS, matches_format

SAMPLE_INPUTS = [
    "",
    "   ",
    "water",
    "  Ethanol ",
    "7732185",
    "7732-18-5",
    "12345",
    "2317912",
    "CID:962",
    "cid 962",
    "CID: CID:5",
    "CSID937",
    "inchi=1S/H2O/h1H2",
    "1S/H2O/h1H2",
    "InChI=1S/CH4/h1H4",
    "e300",
    "300",
    "E160a",
    "059qf0ko0r",
    "zc0110000",
    "dtxsid:6026296",
    "DTXSID6026296",
    "C(O)C",
    "c1ccccc1",
    "xk7##",
]


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize("kind", list(IdentifierKind))
    def test_idempotent(self, kind: IdentifierKind) -> None:
        """Test that normalizing twice equals normalizing once."""
        for raw in SAMPLE_INPUTS:
            once = normalize(kind, raw)
            assert normalize(kind, once) == once, f"{kind.value}: {raw!r}"

    @pytest.mark.parametrize("kind", list(IdentifierKind))
    def test_never_raises(self, kind: IdentifierKind) -> None:
        """Test that arbitrary input always produces a string."""
        for raw in SAMPLE_INPUTS + ["\t\n", "😀", "a" * 500]:
            assert isinstance(normalize(kind, raw), str)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("7732185", "7732-18-5"),
            ("64175", "64-17-5"),
            (" 7732-18-5 ", "7732-18-5"),
            ("7732 18 5", "7732 18 5"),
        ],
    )
    def test_cas(self, raw: str, expected: str) -> None:
        """Test inserting hyphens into bare CAS numbers."""
        assert normalize(IdentifierKind.CAS_NUMBER, raw) == expected

    def test_ec(self) -> None:
        """Test inserting hyphens into bare EC numbers."""
        assert normalize(IdentifierKind.EC_NUMBER, "2317912") == "231-791-2"
        assert normalize(IdentifierKind.EC_NUMBER, "231-791-2") == "231-791-2"

    @pytest.mark.parametrize("raw", ["CID:962", "cid 962", "CID962", " CID : 962 ", "962"])
    def test_pubchem_cid_prefix(self, raw: str) -> None:
        """Test stripping textual prefixes from PubChem CIDs."""
        assert normalize(IdentifierKind.PUBCHEM_CID, raw) == "962"

    def test_chemspider_prefix(self) -> None:
        """Test stripping textual prefixes from ChemSpider IDs."""
        assert normalize(IdentifierKind.CHEMSPIDER, "CSID:937") == "937"

    def test_cid_leading_zeros_kept(self) -> None:
        """Test that leading zeros are not stripped."""
        assert normalize(IdentifierKind.PUBCHEM_CID, "0962") == "0962"

    @pytest.mark.parametrize(
        "raw",
        ["InChI=1S/H2O/h1H2", "inchi=1S/H2O/h1H2", "INCHI=1S/H2O/h1H2", "1S/H2O/h1H2"],
    )
    def test_inchi_prefix(self, raw: str) -> None:
        """Test canonical InChI= prefix handling."""
        assert normalize(IdentifierKind.INCHI, raw) == "InChI=1S/H2O/h1H2"

    @pytest.mark.parametrize("raw,expected", [("300", "E300"), ("e300", "E300"), ("E160a", "E160A")])
    def test_e_number(self, raw: str, expected: str) -> None:
        """Test upper-casing and adding the E prefix."""
        assert normalize(IdentifierKind.E_NUMBER, raw) == expected

    def test_unii_and_rtecs_uppercase(self) -> None:
        """Test upper-casing registry codes."""
        assert normalize(IdentifierKind.UNII, "059qf0ko0r") == "059QF0KO0R"
        assert normalize(IdentifierKind.RTECS_NUMBER, "zc0110000") == "ZC0110000"

    def test_comptox(self) -> None:
        """Test canonical DTXSID form."""
        assert normalize(IdentifierKind.COMPTOX_DASHBOARD, "dtxsid:6026296") == "DTXSID6026296"
        assert normalize(IdentifierKind.COMPTOX_DASHBOARD, "dtxsid6026296") == "DTXSID6026296"

    @pytest.mark.parametrize(
        "kind",
        [IdentifierKind.IUPAC_NAME, IdentifierKind.SMILES, IdentifierKind.ECHA_INFO_CARD],
    )
    def test_pass_through_trims_only(self, kind: IdentifierKind) -> None:
        """Test that other kinds are only trimmed, never re-cased."""
        assert normalize(kind, "  C(O)C ") == "C(O)C"

    @pytest.mark.parametrize("kind", list(FORMAT_PATTERNS))
    def test_examples_match_format(self, kind: IdentifierKind) -> None:
        """Test that each kind's known-good example passes its format check."""
        assert matches_format(kind, normalize(kind, FORMAT_EXAMPLES[kind]))
