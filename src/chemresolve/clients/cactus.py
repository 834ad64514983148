"""NCI/CADD Chemical Identifier Resolver (CACTUS) client.

CACTUS converts between structure representations through plain-text URLs of
the form ``{base}/{identifier}/{representation}``. Each representation is a
separate request; one that answers 404 is simply skipped.

References:
    - CIR docs: https://cactus.nci.nih.gov/chemical/structure_documentation
"""

import logging
from typing import Any
from urllib.parse import quote

from chemresolve.clients.base import HTTPClientBase, NotFound
from chemresolve.config import RemoteSourceConfig
from chemresolve.errors import ResolverError
from chemresolve.identifiers import IdentifierKind, IdentifierSet

logger = logging.getLogger(__name__)

# Be conservative with a shared academic service
DEFAULT_RATE_LIMIT_DELAY = 0.5

# CACTUS representation name -> identifier kind it fills
REPRESENTATIONS: dict[str, IdentifierKind] = {
    "smiles": IdentifierKind.SMILES,
    "iupac_name": IdentifierKind.IUPAC_NAME,
    "cas": IdentifierKind.CAS_NUMBER,
    "stdinchi": IdentifierKind.INCHI,
}


def _first_line(text: str) -> str | None:
    """CACTUS lists multiple answers one per line; keep the first."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line
    return None


class CactusResolver(HTTPClientBase):
    """Remote resolver backed by the NCI/CADD Chemical Identifier Resolver.

    Example:
        >>> from chemresolve.config import CACTUS_SOURCE
        >>> resolver = CactusResolver()
        >>> resolver.resolve(IdentifierKind.SMILES, "CCO", CACTUS_SOURCE).cas_number
        '64-17-5'
    """

    name = "NCI/CACTUS"
    ACCEPT = "text/plain"

    def __init__(self, rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY, **kwargs: Any):
        super().__init__(rate_limit_delay=rate_limit_delay, **kwargs)

    def convert(self, identifier: str, representation: str, config: RemoteSourceConfig, deadline: float) -> str | None:
        """Convert an identifier to one representation.

        Returns:
            The converted value, or None if CACTUS cannot resolve it

        Raises:
            SourceTimeoutError, SourceTransportError: On transport failure
        """
        url = f"{config.base_url}/{quote(identifier, safe='')}/{representation}"
        try:
            response = self._get(url, deadline)
        except NotFound:
            return None
        text = response.text
        if "Page not found" in text:
            return None
        return _first_line(text)

    def resolve(self, kind: IdentifierKind, normalized: str, config: RemoteSourceConfig) -> IdentifierSet:
        """Collect every representation CACTUS can produce for an identifier.

        Returns:
            IdentifierSet (empty if CACTUS resolved nothing)

        Raises:
            ResolverError: If nothing was found and at least one request failed
                at the transport level (so the attempt is worth retrying)
        """
        deadline = self._deadline(config)
        values: dict[IdentifierKind, str] = {}
        last_error: ResolverError | None = None

        for representation, target in REPRESENTATIONS.items():
            try:
                value = self.convert(normalized, representation, config, deadline)
            except ResolverError as e:
                logger.warning(f"CACTUS conversion to {representation} failed: {e}")
                last_error = e
                continue
            if value:
                values[target] = value

        if not values and last_error is not None:
            raise last_error
        return IdentifierSet.from_mapping(values)
