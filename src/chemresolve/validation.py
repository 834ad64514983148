"""Plausibility and format checks for identifier input.

Two independent passes run before any cache lookup or network call:

- ``is_plausible`` rejects obvious gibberish in the raw input (cheap heuristics)
- ``matches_format`` checks the normalized value against a per-kind pattern

Kinds without a pattern always pass the format check.
"""

import re

from chemresolve.identifiers import IdentifierKind

# Single letter tokens that are still meaningful input (element symbols)
ELEMENT_SYMBOL_WHITELIST = frozenset({"o", "c", "n", "h", "f", "cl", "br", "i", "s", "p"})

# Chemical shorthands that have no vowel but are valid names
VOWELLESS_NAMES = frozenset({"ch4", "nh3", "hcl", "h2o", "co2", "h2s", "hf", "hbr", "hi"})

_ONLY_PUNCTUATION = re.compile(r"^[^a-z0-9\-\[\]()=\s]+$", re.IGNORECASE)
_SHORT_LETTER_TOKEN = re.compile(r"^[a-z]{1,3}$", re.IGNORECASE)
_LETTER = re.compile(r"[a-z]", re.IGNORECASE)
_VOWEL = re.compile(r"[aeiouy]", re.IGNORECASE)
_CONSONANT_RUN = re.compile(r"[bcdfghjklmnpqrstvwxz]{5,}", re.IGNORECASE)
_ALPHANUMERIC = re.compile(r"[a-z0-9]", re.IGNORECASE)
_DIGITS = re.compile(r"^\d+$")

FORMAT_PATTERNS: dict[IdentifierKind, re.Pattern[str]] = {
    IdentifierKind.CAS_NUMBER: re.compile(r"^\d{2,7}-\d{2}-\d$"),
    IdentifierKind.PUBCHEM_CID: _DIGITS,
    IdentifierKind.CHEMSPIDER: _DIGITS,
    IdentifierKind.UNII: re.compile(r"^[A-Z0-9]{10}$"),
    IdentifierKind.EC_NUMBER: re.compile(r"^\d{3}-\d{3}-\d$"),
    IdentifierKind.E_NUMBER: re.compile(r"^E\d{3,4}[a-z]?$", re.IGNORECASE),
    IdentifierKind.SMILES: re.compile(r"^[A-Za-z0-9@+\-\[\]()=#$:.%\\/*]+$"),
    IdentifierKind.INCHI: re.compile(r"^InChI=1S?/"),
    IdentifierKind.RTECS_NUMBER: re.compile(r"^[A-Z]{2}\d{7}$"),
    IdentifierKind.COMPTOX_DASHBOARD: re.compile(r"^DTXSID\d{7,}$"),
}

# One known-valid value per patterned kind, used by the CLI `kinds` listing
FORMAT_EXAMPLES: dict[IdentifierKind, str] = {
    IdentifierKind.IUPAC_NAME: "ethanol",
    IdentifierKind.CAS_NUMBER: "7732-18-5",
    IdentifierKind.CHEMSPIDER: "937",
    IdentifierKind.ECHA_INFO_CARD: "100.028.902",
    IdentifierKind.EC_NUMBER: "231-791-2",
    IdentifierKind.E_NUMBER: "E300",
    IdentifierKind.PUBCHEM_CID: "962",
    IdentifierKind.RTECS_NUMBER: "ZC0110000",
    IdentifierKind.UNII: "059QF0KO0R",
    IdentifierKind.COMPTOX_DASHBOARD: "DTXSID6026296",
    IdentifierKind.INCHI: "InChI=1S/H2O/h1H2",
    IdentifierKind.SMILES: "CCO",
}


def is_plausible(kind: IdentifierKind, raw: str) -> bool:
    """Check whether raw input looks like a real identifier of this kind.

    Args:
        kind: Identifier kind
        raw: User-supplied text (not normalized)

    Returns:
        False for blank, too-short, punctuation-only or gibberish input
    """
    value = raw.strip().lower()
    # SMILES are legitimately short letter runs ("O", "CCO")
    line_notation = kind is IdentifierKind.SMILES

    if not value:
        return False
    if len(value) < 2 and not line_notation:
        return False
    if _ONLY_PUNCTUATION.match(value):
        return False
    if (
        not line_notation
        and _SHORT_LETTER_TOKEN.match(value)
        and value not in ELEMENT_SYMBOL_WHITELIST
        and value not in VOWELLESS_NAMES
    ):
        return False

    if kind is IdentifierKind.IUPAC_NAME:
        if not _LETTER.search(value):
            return False
        if value in ELEMENT_SYMBOL_WHITELIST:
            return True
        if len(value) >= 3:
            if not _VOWEL.search(value) and value not in VOWELLESS_NAMES:
                return False
            if _CONSONANT_RUN.search(value):
                return False
        return True
    else:
        return bool(_ALPHANUMERIC.search(value))


def matches_format(kind: IdentifierKind, normalized: str) -> bool:
    """Check a normalized value against the kind's format pattern.

    Args:
        kind: Identifier kind
        normalized: Output of ``normalize(kind, raw)``

    Returns:
        True if the value fits the pattern, or the kind has no pattern
    """
    pattern = FORMAT_PATTERNS.get(kind)
    if pattern is None:
        return True
    if not pattern.match(normalized):
        return False
    if kind in (IdentifierKind.PUBCHEM_CID, IdentifierKind.CHEMSPIDER):
        return int(normalized) > 0
    return True


def looks_like(kind: IdentifierKind, text: str) -> bool:
    """Check whether arbitrary text (e.g., a synonym) has the kind's format.

    Unlike ``matches_format``, kinds without a pattern never match.
    """
    pattern = FORMAT_PATTERNS.get(kind)
    return pattern is not None and bool(pattern.match(text.strip()))
