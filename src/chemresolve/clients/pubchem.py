"""PubChem PUG-REST resolver.

Resolves any supported identifier to a PubChem CID, then collects the
compound's name, SMILES and InChI from the property table and harvests other
registry identifiers (CAS, UNII, EC, E number, RTECS, DTXSID) from its
synonym list.

References:
    - PUG-REST docs: https://pubchem.ncbi.nlm.nih.gov/docs/pug-rest
"""

import logging
from typing import Any
from urllib.parse import quote

from chemresolve.clients.base import HTTPClientBase, NotFound
from chemresolve.config import RemoteSourceConfig
from chemresolve.errors import ResolverError
from chemresolve.identifiers import IdentifierKind, IdentifierSet
from chemresolve.validation import looks_like

logger = logging.getLogger(__name__)

# PubChem rate limit: max 5 requests per second
# We use 0.25s delay to stay well under limit
DEFAULT_RATE_LIMIT_DELAY = 0.25

# Properties to fetch from PubChem
# See: https://pubchem.ncbi.nlm.nih.gov/docs/pug-rest#section=Compound-Property-Tables
COMPOUND_PROPERTIES = [
    "IUPACName",
    "Title",
    "CanonicalSMILES",
    "IsomericSMILES",
    "InChI",
]

# Identifier kinds recognisable in PubChem's free-text synonym list, in the
# order they are checked
SYNONYM_KINDS = (
    IdentifierKind.CAS_NUMBER,
    IdentifierKind.UNII,
    IdentifierKind.EC_NUMBER,
    IdentifierKind.E_NUMBER,
    IdentifierKind.RTECS_NUMBER,
    IdentifierKind.COMPTOX_DASHBOARD,
)

_SYNONYM_PREFIXES = ("UNII-", "EC ", "EINECS ")


def harvest_synonyms(synonyms: list[str]) -> dict[IdentifierKind, str]:
    """Pick the first synonym matching each registry identifier format.

    Args:
        synonyms: PubChem synonym strings for one compound

    Returns:
        Dict of kind -> first matching synonym

    Examples:
        >>> harvest_synonyms(["water", "7732-18-5", "UNII-059QF0KO0R"])
        {<IdentifierKind.CAS_NUMBER: 'cas_number'>: '7732-18-5', <IdentifierKind.UNII: 'unii'>: '059QF0KO0R'}
    """
    found: dict[IdentifierKind, str] = {}
    for synonym in synonyms:
        text = synonym.strip()
        for prefix in _SYNONYM_PREFIXES:
            if text.startswith(prefix):
                text = text[len(prefix) :].strip()
                break
        for kind in SYNONYM_KINDS:
            if kind not in found and looks_like(kind, text):
                found[kind] = text
                break
    return found


class PubChemResolver(HTTPClientBase):
    """Remote resolver backed by PubChem PUG-REST.

    Example:
        >>> from chemresolve.config import PUBCHEM_SOURCE
        >>> resolver = PubChemResolver()
        >>> result = resolver.resolve(IdentifierKind.IUPAC_NAME, "glucose", PUBCHEM_SOURCE)
        >>> result.pubchem_cid
        '5793'
    """

    name = "PubChem"
    # PUG-REST answers 400 for structures it cannot parse
    NOT_FOUND_STATUSES = (400, 404)

    def __init__(self, rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY, **kwargs: Any):
        super().__init__(rate_limit_delay=rate_limit_delay, **kwargs)

    def get_cid(self, kind: IdentifierKind, normalized: str, config: RemoteSourceConfig, deadline: float) -> str | None:
        """Look up the PubChem CID for an identifier.

        Args:
            kind: Identifier kind
            normalized: Normalized identifier value
            config: Source settings (base URL)
            deadline: Monotonic deadline for this attempt

        Returns:
            CID as a string, or None if PubChem has no match

        Raises:
            SourceTimeoutError, SourceTransportError: On transport failure
        """
        if kind is IdentifierKind.PUBCHEM_CID:
            return normalized

        base = config.base_url
        try:
            if kind is IdentifierKind.INCHI:
                # InChI contains slashes, so it goes in the POST body
                data = self._post_json(f"{base}/compound/inchi/cids/JSON", deadline, data={"inchi": normalized})
            elif kind is IdentifierKind.SMILES:
                data = self._get_json(f"{base}/compound/smiles/{quote(normalized, safe='')}/cids/JSON", deadline)
            else:
                # Registry numbers and codes are indexed as synonyms
                data = self._get_json(f"{base}/compound/name/{quote(normalized, safe='')}/cids/JSON", deadline)
        except NotFound:
            return None

        cids = data.get("IdentifierList", {}).get("CID") or []
        # PubChem answers CID 0 for structures it can parse but does not hold
        if not cids or not cids[0]:
            return None
        return str(cids[0])

    def get_properties(self, cid: str, config: RemoteSourceConfig, deadline: float) -> dict[str, Any]:
        """Fetch the property table row for a CID (empty dict if absent)."""
        properties = ",".join(COMPOUND_PROPERTIES)
        url = f"{config.base_url}/compound/cid/{cid}/property/{properties}/JSON"
        try:
            data = self._get_json(url, deadline)
        except NotFound:
            return {}
        rows = data.get("PropertyTable", {}).get("Properties") or [{}]
        row: dict[str, Any] = rows[0]
        return row

    def get_synonyms(self, cid: str, config: RemoteSourceConfig, deadline: float) -> list[str]:
        """Fetch all synonyms for a CID (empty list if absent)."""
        url = f"{config.base_url}/compound/cid/{cid}/synonyms/JSON"
        try:
            data = self._get_json(url, deadline)
        except NotFound:
            return []
        try:
            synonyms: list[str] = data["InformationList"]["Information"][0]["Synonym"]
            return synonyms
        except (KeyError, IndexError):
            return []

    def resolve(self, kind: IdentifierKind, normalized: str, config: RemoteSourceConfig) -> IdentifierSet:
        """Resolve an identifier to everything PubChem knows about it.

        Returns:
            IdentifierSet (empty if PubChem has no matching compound)

        Raises:
            SourceTimeoutError, SourceTransportError: On transport failure
        """
        deadline = self._deadline(config)
        cid = self.get_cid(kind, normalized, config, deadline)
        if cid is None:
            logger.debug(f"PubChem has no CID for {kind.value}={normalized}")
            return IdentifierSet()

        props = self.get_properties(cid, config, deadline)
        if not props:
            # A CID taken from the input is unchecked until its property row exists
            logger.debug(f"PubChem has no compound for CID {cid}")
            return IdentifierSet()
        # PubChem now reports canonical SMILES as "ConnectivitySMILES"
        smiles = props.get("ConnectivitySMILES") or props.get("CanonicalSMILES") or props.get("SMILES")
        values: dict[IdentifierKind, Any] = {
            IdentifierKind.PUBCHEM_CID: cid,
            IdentifierKind.IUPAC_NAME: props.get("IUPACName") or props.get("Title"),
            IdentifierKind.SMILES: smiles,
            IdentifierKind.INCHI: props.get("InChI"),
        }

        # Synonyms only add registry numbers; a failure here still leaves a
        # usable partial result
        try:
            synonyms = self.get_synonyms(cid, config, deadline)
        except ResolverError as e:
            logger.warning(f"PubChem synonyms unavailable for CID {cid}: {e}")
            synonyms = []
        for synonym_kind, value in harvest_synonyms(synonyms).items():
            values.setdefault(synonym_kind, value)

        return IdentifierSet.from_mapping(values)
