"""Identifier kinds and the partial identifier record shared by every component.

An ``IdentifierSet`` holds whatever is known about one compound: any subset of
the twelve supported identifier kinds. Sets from different sources are combined
with ``merged_with``, which only ever fills gaps and never replaces a value that
is already present.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


class IdentifierKind(str, Enum):
    """Supported ways to name a chemical compound."""

    IUPAC_NAME = "iupac_name"
    CAS_NUMBER = "cas_number"
    CHEMSPIDER = "chemspider"
    ECHA_INFO_CARD = "echa_info_card"
    EC_NUMBER = "ec_number"
    E_NUMBER = "e_number"
    PUBCHEM_CID = "pubchem_cid"
    RTECS_NUMBER = "rtecs_number"
    UNII = "unii"
    COMPTOX_DASHBOARD = "comptox_dashboard"
    INCHI = "inchi"
    SMILES = "smiles"

    @classmethod
    def parse(cls, text: str) -> IdentifierKind:
        """Parse a kind from its value or member name (case-insensitive).

        Args:
            text: e.g. "cas_number", "CAS_NUMBER", "cas-number"

        Returns:
            The matching IdentifierKind

        Raises:
            ValueError: If the text names no known kind
        """
        key = text.strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value == key:
                return kind
        raise ValueError(f"Unknown identifier kind: {text!r}")


# First non-empty field wins when choosing what to hand to a structure renderer.
RENDER_PRECEDENCE: tuple[IdentifierKind, ...] = (
    IdentifierKind.SMILES,
    IdentifierKind.INCHI,
    IdentifierKind.IUPAC_NAME,
    IdentifierKind.CAS_NUMBER,
    IdentifierKind.PUBCHEM_CID,
)


@dataclass(frozen=True)
class IdentifierSet:
    """Partial or full knowledge of one compound.

    Field names match ``IdentifierKind`` values. Every field is optional; an
    empty string is treated the same as ``None``.

    Attributes:
        iupac_name: Systematic or common name
        cas_number: CAS Registry Number (e.g., "7732-18-5")
        chemspider: ChemSpider ID
        echa_info_card: ECHA InfoCard number
        ec_number: EC (EINECS/ELINCS) number (e.g., "231-791-2")
        e_number: Food additive E number (e.g., "E300")
        pubchem_cid: PubChem Compound ID
        rtecs_number: RTECS number
        unii: FDA Unique Ingredient Identifier
        comptox_dashboard: EPA CompTox DTXSID
        inchi: InChI string
        smiles: SMILES string
    """

    iupac_name: str | None = None
    cas_number: str | None = None
    chemspider: str | None = None
    echa_info_card: str | None = None
    ec_number: str | None = None
    e_number: str | None = None
    pubchem_cid: str | None = None
    rtecs_number: str | None = None
    unii: str | None = None
    comptox_dashboard: str | None = None
    inchi: str | None = None
    smiles: str | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> IdentifierSet:
        """Build a set from a dict keyed by IdentifierKind or kind value.

        Blank and ``None`` values are dropped; non-string values are stringified.
        """
        values: dict[str, str] = {}
        for key, value in mapping.items():
            kind = key if isinstance(key, IdentifierKind) else IdentifierKind.parse(str(key))
            if value is None:
                continue
            text = str(value).strip()
            if text:
                values[kind.value] = text
        return cls(**values)

    def get(self, kind: IdentifierKind) -> str | None:
        """Return the value for a kind, or None if unset."""
        value: str | None = getattr(self, kind.value)
        return value or None

    def populated(self) -> list[IdentifierKind]:
        """Kinds with a non-empty value, in declaration order."""
        return [kind for kind in IdentifierKind if self.get(kind)]

    def is_empty(self) -> bool:
        return not self.populated()

    def with_value(self, kind: IdentifierKind, value: str | None) -> IdentifierSet:
        """Return a copy with one field replaced."""
        return replace(self, **{kind.value: value})

    def conflicts(self, other: IdentifierSet) -> list[IdentifierKind]:
        """Kinds set in both sets but with different values."""
        return [
            kind
            for kind in IdentifierKind
            if self.get(kind) and other.get(kind) and self.get(kind) != other.get(kind)
        ]

    def merged_with(self, other: IdentifierSet) -> IdentifierSet:
        """Fill unset fields from ``other``; fields already set here win."""
        updates = {kind.value: other.get(kind) for kind in IdentifierKind if not self.get(kind) and other.get(kind)}
        if not updates:
            return self
        return replace(self, **updates)

    def to_dict(self, include_empty: bool = False) -> dict[str, str | None]:
        """Convert to dictionary for serialization."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        if include_empty:
            return result
        return {key: value for key, value in result.items() if value}


def preferred_render_value(
    identifiers: IdentifierSet,
    precedence: Iterable[IdentifierKind] = RENDER_PRECEDENCE,
) -> tuple[IdentifierKind, str] | None:
    """Pick the identifier a structure renderer should consume.

    Args:
        identifiers: Resolved identifier set
        precedence: Kinds to try in order

    Returns:
        (kind, value) for the first populated kind, or None if none is set
    """
    for kind in precedence:
        value = identifiers.get(kind)
        if value:
            return kind, value
    return None
