"""Built-in table of common compounds, consulted before any remote source.

The table is immutable. Each compound is stored once with its identifier set
and a list of aliases (common names, formulas, SMILES forms); every alias and
the compound's own CAS number resolve to the same full set.
"""

import logging
from collections.abc import Iterable
from types import MappingProxyType

from chemresolve.identifiers import IdentifierKind, IdentifierSet

logger = logging.getLogger(__name__)

# (aliases, identifiers); aliases are matched case-insensitively
DEFAULT_COMPOUNDS: tuple[tuple[tuple[str, ...], IdentifierSet], ...] = (
    (
        ("water", "h2o", "o"),
        IdentifierSet(
            iupac_name="water",
            smiles="O",
            inchi="InChI=1S/H2O/h1H2",
            cas_number="7732-18-5",
            pubchem_cid="962",
            unii="059QF0KO0R",
        ),
    ),
    (
        ("carbon dioxide", "co2", "o=c=o"),
        IdentifierSet(
            iupac_name="carbon dioxide",
            smiles="O=C=O",
            inchi="InChI=1S/CO2/c2-1-3",
            cas_number="124-38-9",
            pubchem_cid="280",
            unii="142M471B3J",
        ),
    ),
    (
        ("methane", "ch4", "c"),
        IdentifierSet(
            iupac_name="methane",
            smiles="C",
            inchi="InChI=1S/CH4/h1H4",
            cas_number="74-82-8",
            pubchem_cid="297",
            unii="OP0UW79H66",
        ),
    ),
    (
        ("ethanol", "ethyl alcohol", "cco"),
        IdentifierSet(
            iupac_name="ethanol",
            smiles="CCO",
            inchi="InChI=1S/C2H6O/c1-2-3/h3H,2H2,1H3",
            cas_number="64-17-5",
            pubchem_cid="702",
            unii="3K9958V90M",
        ),
    ),
    (
        ("benzene", "c1ccccc1"),
        IdentifierSet(
            iupac_name="benzene",
            smiles="c1ccccc1",
            inchi="InChI=1S/C6H6/c1-2-4-6-5-3-1/h1-6H",
            cas_number="71-43-2",
            pubchem_cid="241",
            unii="J64922108F",
        ),
    ),
    (
        ("acetic acid", "cc(=o)o"),
        IdentifierSet(
            iupac_name="acetic acid",
            smiles="CC(=O)O",
            inchi="InChI=1S/C2H4O2/c1-2(3)4/h1H3,(H,3,4)",
            cas_number="64-19-7",
            pubchem_cid="176",
            unii="Q40Q9N063P",
        ),
    ),
    (
        ("formic acid", "methanoic acid", "c(=o)o"),
        IdentifierSet(
            iupac_name="formic acid",
            smiles="C(=O)O",
            inchi="InChI=1S/CH2O2/c2-1-3/h1H,(H,2,3)",
            cas_number="64-18-6",
            pubchem_cid="284",
            unii="0YIW783RG1",
        ),
    ),
    (
        ("methanol", "methyl alcohol", "co"),
        IdentifierSet(
            iupac_name="methanol",
            smiles="CO",
            inchi="InChI=1S/CH4O/c1-2/h2H,1H3",
            cas_number="67-56-1",
            pubchem_cid="887",
            unii="Y4S76JWI15",
        ),
    ),
    (
        ("ammonia", "nh3", "n"),
        IdentifierSet(
            iupac_name="ammonia",
            smiles="N",
            inchi="InChI=1S/H3N/h1H3",
            cas_number="7664-41-7",
            pubchem_cid="222",
            unii="5138Q19F1X",
        ),
    ),
    (
        ("ethane", "cc"),
        IdentifierSet(
            iupac_name="ethane",
            smiles="CC",
            inchi="InChI=1S/C2H6/c1-2/h1-2H3",
            cas_number="74-84-0",
            pubchem_cid="6324",
            unii="L99N5N533T",
        ),
    ),
    (
        ("propane", "ccc"),
        IdentifierSet(
            iupac_name="propane",
            smiles="CCC",
            inchi="InChI=1S/C3H8/c1-3-2/h3H2,1-2H3",
            cas_number="74-98-6",
            pubchem_cid="6334",
            unii="T75W9KEA2A",
        ),
    ),
    (
        ("butane", "cccc"),
        IdentifierSet(
            iupac_name="butane",
            smiles="CCCC",
            inchi="InChI=1S/C4H10/c1-3-4-2/h3-4H2,1-2H3",
            cas_number="106-97-8",
            pubchem_cid="7843",
            unii="VR7E826LM6",
        ),
    ),
    (
        ("isobutane", "2-methylpropane", "cc(c)c"),
        IdentifierSet(
            iupac_name="2-methylpropane",
            smiles="CC(C)C",
            inchi="InChI=1S/C4H10/c1-4(2)3/h4H,1-3H3",
            cas_number="75-28-5",
            pubchem_cid="6344",
            unii="BXN20XJN5I",
        ),
    ),
    (
        ("toluene", "methylbenzene", "cc1ccccc1"),
        IdentifierSet(
            iupac_name="toluene",
            smiles="Cc1ccccc1",
            inchi="InChI=1S/C7H8/c1-7-5-3-2-4-6-7/h2-6H,1H3",
            cas_number="108-88-3",
            pubchem_cid="1140",
            unii="3FPU23BG52",
        ),
    ),
    (
        ("glucose", "d-glucose"),
        IdentifierSet(
            iupac_name="D-glucose",
            smiles="C([C@@H]1[C@H]([C@@H]([C@H]([C@H](O1)O)O)O)O)O",
            inchi="InChI=1S/C6H12O6/c7-1-2-3(8)4(9)5(10)6(11)12-2/h2-11H,1H2/t2-,3-,4+,5-,6+/m1/s1",
            cas_number="50-99-7",
            pubchem_cid="5793",
            unii="IY9XDZ35W2",
        ),
    ),
    (
        ("caffeine",),
        IdentifierSet(
            iupac_name="1,3,7-trimethylpurine-2,6-dione",
            smiles="CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
            inchi="InChI=1S/C8H10N4O2/c1-10-4-9-6-5(10)7(13)12(3)8(14)11(6)2/h4H,1-3H3",
            cas_number="58-08-2",
            pubchem_cid="2519",
            unii="3G6A5W338E",
        ),
    ),
    (
        ("aspirin", "acetylsalicylic acid"),
        IdentifierSet(
            iupac_name="2-acetoxybenzoic acid",
            smiles="CC(=O)OC1=CC=CC=C1C(=O)O",
            inchi="InChI=1S/C9H8O4/c1-6(10)13-8-5-3-2-4-7(8)9(11)12/h2-5H,1H3,(H,11,12)",
            cas_number="50-78-2",
            pubchem_cid="2244",
            unii="R16CO5Y76E",
        ),
    ),
)


class CompoundTable:
    """Read-only alias -> identifier set dictionary.

    Example:
        >>> table = CompoundTable()
        >>> table.lookup(IdentifierKind.CAS_NUMBER, "7732-18-5").smiles
        'O'
    """

    def __init__(self, compounds: Iterable[tuple[Iterable[str], IdentifierSet]] = DEFAULT_COMPOUNDS):
        aliases: dict[str, IdentifierSet] = {}
        records: list[IdentifierSet] = []
        for names, identifiers in compounds:
            records.append(identifiers)
            keys = list(names)
            if identifiers.cas_number:
                keys.append(identifiers.cas_number)
            for key in keys:
                aliases.setdefault(key.strip().lower(), identifiers)
        self._aliases = MappingProxyType(aliases)
        self._records = tuple(records)

    def lookup(self, kind: IdentifierKind, normalized: str) -> IdentifierSet | None:
        """Find a compound by alias, or by the requested kind's own field.

        Args:
            kind: Identifier kind of the value
            normalized: Normalized identifier value

        Returns:
            The compound's identifier set, or None if not in the table
        """
        key = normalized.strip().lower()
        identifiers = self._aliases.get(key)
        if identifiers is not None:
            return identifiers

        for record in self._records:
            value = record.get(kind)
            if value and value.lower() == key:
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)
