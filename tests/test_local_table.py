"""Tests for the built-in compound table."""

import pytest

from chemresolve.identifiers import IdentifierKind, IdentifierSet
from chemresolve.local_table import DEFAULT_COMPOUNDS, CompoundTable
from chemresolve.validation import matches_format


class TestCompoundTable:
    """Tests for CompoundTable lookups."""

    @pytest.fixture
    def table(self) -> CompoundTable:
        """The default table."""
        return CompoundTable()

    @pytest.mark.parametrize(
        "kind,value,expected_cid",
        [
            (IdentifierKind.IUPAC_NAME, "water", "962"),
            (IdentifierKind.IUPAC_NAME, "Ethyl Alcohol", "702"),
            (IdentifierKind.IUPAC_NAME, "ch4", "297"),
            (IdentifierKind.SMILES, "CC(=O)O", "176"),
            (IdentifierKind.CAS_NUMBER, "58-08-2", "2519"),
            (IdentifierKind.PUBCHEM_CID, "2244", "2244"),
            (IdentifierKind.UNII, "3K9958V90M", "702"),
            (IdentifierKind.INCHI, "InChI=1S/CH4O/c1-2/h2H,1H3", "887"),
        ],
    )
    def test_lookup(self, table: CompoundTable, kind: IdentifierKind, value: str, expected_cid: str) -> None:
        """Test finding compounds by alias or by their own field values."""
        identifiers = table.lookup(kind, value)
        assert identifiers is not None
        assert identifiers.pubchem_cid == expected_cid

    def test_miss(self, table: CompoundTable) -> None:
        """Test that unknown compounds are not found."""
        assert table.lookup(IdentifierKind.IUPAC_NAME, "unobtainium") is None
        assert table.lookup(IdentifierKind.PUBCHEM_CID, "999999999") is None

    def test_aliases_share_one_record(self, table: CompoundTable) -> None:
        """Test that every alias of a compound returns the same set."""
        by_name = table.lookup(IdentifierKind.IUPAC_NAME, "toluene")
        by_alias = table.lookup(IdentifierKind.IUPAC_NAME, "methylbenzene")
        by_smiles = table.lookup(IdentifierKind.SMILES, "Cc1ccccc1")
        assert by_name is by_alias is by_smiles

    def test_size(self, table: CompoundTable) -> None:
        """Test that the table holds every default compound."""
        assert len(table) == len(DEFAULT_COMPOUNDS) == 17

    def test_custom_table(self) -> None:
        """Test building a table from custom compounds."""
        table = CompoundTable(compounds=[(("heavy water", "d2o"), IdentifierSet(cas_number="7789-20-0"))])

        assert table.lookup(IdentifierKind.IUPAC_NAME, "D2O") == IdentifierSet(cas_number="7789-20-0")
        assert table.lookup(IdentifierKind.CAS_NUMBER, "7789-20-0") is not None
        assert len(table) == 1

    @pytest.mark.parametrize("names,identifiers", DEFAULT_COMPOUNDS)
    def test_entries_well_formed(self, names: tuple[str, ...], identifiers: IdentifierSet) -> None:
        """Test that every built-in value passes its own format check."""
        for kind in identifiers.populated():
            value = identifiers.get(kind)
            assert value is not None
            assert matches_format(kind, value), f"{names[0]}: {kind.value}={value}"
