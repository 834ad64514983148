"""Canonicalization of raw identifier input.

``normalize`` is pure and total: it never raises, and applying it twice gives
the same result as applying it once.
"""

import re

from chemresolve.identifiers import IdentifierKind

_BARE_CAS = re.compile(r"^\d{5,10}$")
_BARE_EC = re.compile(r"^\d{7}$")
_DATABASE_PREFIX = re.compile(r"^(?:CSID|CID)\s*:?\s*", re.IGNORECASE)
_INCHI_PREFIX = re.compile(r"^inchi=", re.IGNORECASE)
_COMPTOX_PREFIX = re.compile(r"^DTXSID:", re.IGNORECASE)


def normalize(kind: IdentifierKind, raw: str) -> str:
    """Canonicalize raw input for the given identifier kind.

    Args:
        kind: Identifier kind the value claims to be
        raw: User-supplied text

    Returns:
        Canonical string used for validation, caching and lookups

    Examples:
        >>> normalize(IdentifierKind.CAS_NUMBER, "7732185")
        '7732-18-5'
        >>> normalize(IdentifierKind.PUBCHEM_CID, "CID:962")
        '962'
        >>> normalize(IdentifierKind.INCHI, "1S/H2O/h1H2")
        'InChI=1S/H2O/h1H2'
    """
    value = raw.strip()

    if kind is IdentifierKind.CAS_NUMBER:
        # 7732185 -> 7732-18-5
        if _BARE_CAS.match(value):
            return f"{value[:-3]}-{value[-3:-1]}-{value[-1]}"
        return value
    elif kind is IdentifierKind.EC_NUMBER:
        if _BARE_EC.match(value):
            return f"{value[:3]}-{value[3:6]}-{value[6]}"
        return value
    elif kind in (IdentifierKind.PUBCHEM_CID, IdentifierKind.CHEMSPIDER):
        # Leading zeros are kept; only textual prefixes go
        while _DATABASE_PREFIX.match(value):
            value = _DATABASE_PREFIX.sub("", value, count=1).strip()
        return value
    elif kind is IdentifierKind.INCHI:
        if _INCHI_PREFIX.match(value):
            return "InChI=" + value[len("InChI=") :]
        return f"InChI={value}"
    elif kind is IdentifierKind.E_NUMBER:
        upper = value.upper()
        return upper if upper.startswith("E") else f"E{upper}"
    elif kind in (IdentifierKind.UNII, IdentifierKind.RTECS_NUMBER):
        return value.upper()
    elif kind is IdentifierKind.COMPTOX_DASHBOARD:
        return _COMPTOX_PREFIX.sub("DTXSID", value.upper())
    else:
        return value
