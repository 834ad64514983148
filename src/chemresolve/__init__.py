"""chemresolve: resolve one chemical identifier into every equivalent identifier."""

from chemresolve.errors import ErrorKind
from chemresolve.identifiers import RENDER_PRECEDENCE, IdentifierKind, IdentifierSet, preferred_render_value
from chemresolve.resolution import (
    ResolutionOrchestrator,
    ResolutionRequest,
    ResolutionResult,
    cache_size,
    clear_cache,
    resolve,
    sweep_expired,
)

__version__ = "0.1.0"

__all__ = [
    "RENDER_PRECEDENCE",
    "ErrorKind",
    "IdentifierKind",
    "IdentifierSet",
    "ResolutionOrchestrator",
    "ResolutionRequest",
    "ResolutionResult",
    "__version__",
    "cache_size",
    "clear_cache",
    "preferred_render_value",
    "resolve",
    "sweep_expired",
]
