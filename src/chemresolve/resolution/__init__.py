"""Identifier resolution: validation, caching, ordered remote fallback and scoring."""

from chemresolve.resolution.models import ResolutionRequest, ResolutionResult
from chemresolve.resolution.orchestrator import (
    RemoteSource,
    ResolutionContext,
    ResolutionOrchestrator,
    ResolutionState,
    build_default_sources,
    cache_size,
    clear_cache,
    get_default_orchestrator,
    resolve,
    sweep_expired,
)
from chemresolve.resolution.retry import backoff_delay, call_with_retries

__all__ = [
    "RemoteSource",
    "ResolutionContext",
    "ResolutionOrchestrator",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionState",
    "backoff_delay",
    "build_default_sources",
    "cache_size",
    "call_with_retries",
    "clear_cache",
    "get_default_orchestrator",
    "resolve",
    "sweep_expired",
]
