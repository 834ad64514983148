"""Confidence scoring for resolved identifier sets."""

from chemresolve.identifiers import IdentifierKind, IdentifierSet

# A set with this many populated fields is considered complete
FULL_SET_SIZE = 8
REQUESTED_FIELD_BOOST = 0.2
# Anything found at all scores at least this
MINIMUM_CONFIDENCE = 0.3

# Cache hits were validated when first stored; the local table is curated
CACHED_CONFIDENCE = 1.0
LOCAL_CONFIDENCE = 1.0


def score(identifiers: IdentifierSet, requested_kind: IdentifierKind) -> float:
    """Rate how complete and trustworthy a resolved set is.

    Args:
        identifiers: Identifiers returned by a source
        requested_kind: Kind of the identifier the caller supplied

    Returns:
        Confidence in [0, 1]; 0.0 only for an empty set
    """
    populated = identifiers.populated()
    if not populated:
        return 0.0

    confidence = min(len(populated) / FULL_SET_SIZE, 1.0)
    if identifiers.get(requested_kind):
        confidence = min(confidence + REQUESTED_FIELD_BOOST, 1.0)
    return max(confidence, MINIMUM_CONFIDENCE)
