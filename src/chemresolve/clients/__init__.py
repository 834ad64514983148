"""Remote resolvers for external chemical databases."""

from chemresolve.clients.base import HTTPClientBase, NotFound, RemoteResolver
from chemresolve.clients.cactus import CactusResolver
from chemresolve.clients.pubchem import PubChemResolver

__all__ = ["CactusResolver", "HTTPClientBase", "NotFound", "PubChemResolver", "RemoteResolver"]
