"""Resolution orchestrator: the single public resolve operation.

A resolution walks an explicit state machine::

    VALIDATING -> CACHE_CHECK -> LOCAL_LOOKUP -> REMOTE_ATTEMPT(i) -> SCORING -> DONE
         |                                              |
         +-------------------> ERROR <------------------+

Any non-terminal state moves to CANCELLED once the caller's cancel event is
set. Each state has a handler that returns the next state; side effects are
limited to cache writes, and no remote source is contacted after a cache or
local-table hit.

Per-source failures are logged and absorbed; the caller only ever sees the
aggregate ALL_SOURCES_EXHAUSTED error.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chemresolve.clients.base import RemoteResolver
from chemresolve.clients.cactus import CactusResolver
from chemresolve.clients.pubchem import PubChemResolver
from chemresolve.config import (
    CACTUS_SOURCE,
    PUBCHEM_SOURCE,
    RemoteSourceConfig,
    cache_ttl_from_env,
    load_source_configs,
)
from chemresolve.errors import ErrorKind, ResolutionCancelled, SourceExhaustedError
from chemresolve.identifiers import IdentifierKind, IdentifierSet
from chemresolve.local_table import CompoundTable
from chemresolve.normalize import normalize
from chemresolve.resolution.models import ResolutionRequest, ResolutionResult
from chemresolve.resolution.retry import DEFAULT_BASE_DELAY, call_with_retries
from chemresolve.scoring import CACHED_CONFIDENCE, LOCAL_CONFIDENCE, score
from chemresolve.store.identifier_cache import IdentifierCache
from chemresolve.validation import is_plausible, matches_format

logger = logging.getLogger(__name__)

LOCAL_SOURCE = "Local Database"
CACHED_SUFFIX = " (cached)"
DEFAULT_MAX_WORKERS = 4

# Source name -> resolver class for the built-in remote sources
RESOLVER_TYPES: dict[str, Callable[[], RemoteResolver]] = {
    PUBCHEM_SOURCE.name: PubChemResolver,
    CACTUS_SOURCE.name: CactusResolver,
}


class ResolutionState(str, Enum):
    """States of one resolution."""

    VALIDATING = "validating"
    CACHE_CHECK = "cache_check"
    LOCAL_LOOKUP = "local_lookup"
    REMOTE_ATTEMPT = "remote_attempt"
    SCORING = "scoring"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({ResolutionState.DONE, ResolutionState.ERROR, ResolutionState.CANCELLED})


@dataclass
class RemoteSource:
    """A configured remote resolver."""

    config: RemoteSourceConfig
    resolver: RemoteResolver


@dataclass
class ResolutionContext:
    """Working state of one resolution, threaded through the state handlers.

    Attributes:
        request: What the caller asked for
        normalized: Canonical form of the raw value (set while validating)
        found: Identifier set from the cache, local table or a remote source
        source: Label of whichever produced ``found``
        confidence: Preset for cache/local hits; computed while scoring otherwise
        source_index: Index of the next remote source to try
        history: States visited, in order
        result: Final result, set on entering a terminal state
    """

    request: ResolutionRequest
    normalized: str = ""
    found: IdentifierSet | None = None
    source: str | None = None
    confidence: float | None = None
    source_index: int = 0
    history: list[ResolutionState] = field(default_factory=list)
    result: ResolutionResult | None = None

    def fail(self, error_kind: ErrorKind, message: str) -> ResolutionState:
        self.result = ResolutionResult.failure(error_kind, message)
        return ResolutionState.CANCELLED if error_kind is ErrorKind.CANCELLED else ResolutionState.ERROR


def build_default_sources(configs: Iterable[RemoteSourceConfig] | None = None) -> list[RemoteSource]:
    """Pair each configured source with its built-in resolver.

    Args:
        configs: Source settings (defaults to ``load_source_configs()``)

    Returns:
        Remote sources for every config with a known resolver

    Raises:
        ValueError: If a config names a source with no built-in resolver
    """
    sources = []
    for config in configs if configs is not None else load_source_configs():
        resolver_type = RESOLVER_TYPES.get(config.name)
        if resolver_type is None:
            raise ValueError(f"No resolver available for source {config.name!r}")
        sources.append(RemoteSource(config=config, resolver=resolver_type()))
    return sources


class ResolutionOrchestrator:
    """Resolve one chemical identifier into the fullest available identifier set.

    Example:
        >>> orchestrator = ResolutionOrchestrator(sources=[])
        >>> result = orchestrator.resolve(IdentifierKind.CAS_NUMBER, "7732-18-5")
        >>> result.source, result.identifiers.smiles
        ('Local Database', 'O')
    """

    def __init__(
        self,
        sources: Iterable[RemoteSource] | None = None,
        cache: IdentifierCache | None = None,
        table: CompoundTable | None = None,
        sleep: Callable[[float], None] | None = None,
        base_delay: float = DEFAULT_BASE_DELAY,
        sweep_on_resolve: bool = True,
    ):
        """Initialize the orchestrator.

        Args:
            sources: Remote sources (defaults to the built-in PubChem and CACTUS
                resolvers with environment overrides applied)
            cache: Shared identifier cache (a fresh one if not provided)
            table: Local compound table (the built-in table if not provided)
            sleep: Replacement for the retry backoff wait (tests)
            base_delay: Seconds to wait before the first retry of a source
            sweep_on_resolve: Drop expired cache entries before each resolution
        """
        self.sources = list(sources) if sources is not None else build_default_sources()
        self.cache = cache if cache is not None else IdentifierCache()
        self.table = table if table is not None else CompoundTable()
        self._sleep = sleep
        self._base_delay = base_delay
        self._sweep_on_resolve = sweep_on_resolve

    def ordered_sources(self) -> list[RemoteSource]:
        """Remote sources by descending priority."""
        return sorted(self.sources, key=lambda s: s.config.priority, reverse=True)

    # -- public surface ---------------------------------------------------

    def resolve(
        self,
        kind: IdentifierKind,
        raw_value: str,
        cancel_event: threading.Event | None = None,
    ) -> ResolutionResult:
        """Resolve one identifier.

        Args:
            kind: Kind of identifier supplied
            raw_value: The identifier exactly as the user entered it
            cancel_event: Set to abandon the resolution; cache writes that
                already happened are kept

        Returns:
            ResolutionResult (never raises for bad input or source failures)
        """
        context = self.run(ResolutionRequest(kind=kind, raw_value=raw_value), cancel_event)
        assert context.result is not None
        return context.result

    def resolve_request(
        self, request: ResolutionRequest, cancel_event: threading.Event | None = None
    ) -> ResolutionResult:
        return self.resolve(request.kind, request.raw_value, cancel_event)

    def resolve_many(
        self,
        requests: Sequence[ResolutionRequest],
        max_workers: int = DEFAULT_MAX_WORKERS,
        cancel_event: threading.Event | None = None,
    ) -> list[ResolutionResult]:
        """Resolve independent requests in parallel.

        Identical keys are not deduplicated; the last cache write wins.

        Returns:
            Results in the same order as the requests
        """
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda r: self.resolve_request(r, cancel_event), requests))

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()

    def sweep_expired(self) -> int:
        return self.cache.sweep_expired()

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats()

    # -- state machine ----------------------------------------------------

    def run(self, request: ResolutionRequest, cancel_event: threading.Event | None = None) -> ResolutionContext:
        """Drive one request through the state machine.

        Returns:
            The final context; ``context.result`` is always set
        """
        if self._sweep_on_resolve:
            self.cache.sweep_expired()

        context = ResolutionContext(request=request)
        handlers: dict[ResolutionState, Callable[[ResolutionContext], ResolutionState]] = {
            ResolutionState.VALIDATING: self._validate,
            ResolutionState.CACHE_CHECK: self._check_cache,
            ResolutionState.LOCAL_LOOKUP: self._lookup_local,
            ResolutionState.REMOTE_ATTEMPT: lambda ctx: self._attempt_remote(ctx, cancel_event),
            ResolutionState.SCORING: self._score,
        }

        state = ResolutionState.VALIDATING
        while state not in TERMINAL_STATES:
            context.history.append(state)
            if cancel_event is not None and cancel_event.is_set():
                state = context.fail(ErrorKind.CANCELLED, f"Resolution of {request.kind.value} was cancelled")
                break
            state = handlers[state](context)

        context.history.append(state)
        return context

    def _validate(self, ctx: ResolutionContext) -> ResolutionState:
        kind, raw = ctx.request.kind, ctx.request.raw_value
        if not raw.strip():
            return ctx.fail(ErrorKind.EMPTY_INPUT, f"Empty {kind.value} provided")

        ctx.normalized = normalize(kind, raw)
        if not is_plausible(kind, raw):
            return ctx.fail(
                ErrorKind.IMPLAUSIBLE_INPUT,
                f"Invalid {kind.value}. Please enter a valid chemical identifier.",
            )
        if not matches_format(kind, ctx.normalized):
            return ctx.fail(ErrorKind.FORMAT_MISMATCH, f"Invalid format for {kind.value}: {raw}")
        return ResolutionState.CACHE_CHECK

    def _check_cache(self, ctx: ResolutionContext) -> ResolutionState:
        entry = self.cache.get_entry(ctx.request.kind, ctx.normalized)
        if entry is None:
            return ResolutionState.LOCAL_LOOKUP
        logger.debug(f"Cache hit for {ctx.request.kind.value}={ctx.normalized}")
        ctx.found = entry.identifiers
        ctx.source = f"{entry.source}{CACHED_SUFFIX}"
        ctx.confidence = CACHED_CONFIDENCE
        return ResolutionState.SCORING

    def _lookup_local(self, ctx: ResolutionContext) -> ResolutionState:
        identifiers = self.table.lookup(ctx.request.kind, ctx.normalized)
        if identifiers is None:
            return ResolutionState.REMOTE_ATTEMPT
        self.cache.put(ctx.request.kind, ctx.normalized, identifiers, LOCAL_SOURCE)
        ctx.found = identifiers
        ctx.source = LOCAL_SOURCE
        ctx.confidence = LOCAL_CONFIDENCE
        return ResolutionState.SCORING

    def _attempt_remote(self, ctx: ResolutionContext, cancel_event: threading.Event | None) -> ResolutionState:
        kind, normalized = ctx.request.kind, ctx.normalized
        sources = self.ordered_sources()
        if ctx.source_index >= len(sources):
            return ctx.fail(
                ErrorKind.ALL_SOURCES_EXHAUSTED,
                f'"{ctx.request.raw_value}" was not found in any source. '
                "Please check the spelling or try a different identifier type.",
            )

        source = sources[ctx.source_index]
        ctx.source_index += 1
        config = source.config

        try:
            identifiers = call_with_retries(
                config,
                lambda: source.resolver.resolve(kind, normalized, config),
                sleep=self._sleep,
                cancel_event=cancel_event,
                base_delay=self._base_delay,
            )
        except ResolutionCancelled:
            return ctx.fail(ErrorKind.CANCELLED, f"Resolution of {kind.value} was cancelled")
        except SourceExhaustedError as e:
            logger.warning(f"Source exhausted: {e}")
            return ResolutionState.REMOTE_ATTEMPT
        except Exception:
            logger.exception(f"Unexpected failure in source {config.name}")
            return ResolutionState.REMOTE_ATTEMPT

        if identifiers.is_empty():
            logger.debug(f"{config.name} has no match for {kind.value}={normalized}")
            return ResolutionState.REMOTE_ATTEMPT

        self.cache.put(kind, normalized, identifiers, config.name)
        logger.info(f"Resolved {kind.value}={normalized} via {config.name}")
        ctx.found = identifiers
        ctx.source = config.name
        return ResolutionState.SCORING

    def _score(self, ctx: ResolutionContext) -> ResolutionState:
        kind, raw = ctx.request.kind, ctx.request.raw_value
        found = ctx.found if ctx.found is not None else IdentifierSet()
        confidence = ctx.confidence if ctx.confidence is not None else score(found, kind)

        # The requested field is always the caller's own input
        pinned = IdentifierSet().with_value(kind, raw)
        conflicts = pinned.conflicts(found)
        if conflicts:
            logger.debug(f"{ctx.source} reported {kind.value}={found.get(kind)!r}; keeping input {raw!r}")

        ctx.result = ResolutionResult(
            success=True,
            identifiers=pinned.merged_with(found),
            source=ctx.source,
            confidence=confidence,
        )
        return ResolutionState.DONE


_default_orchestrator: ResolutionOrchestrator | None = None
_default_lock = threading.Lock()


def get_default_orchestrator() -> ResolutionOrchestrator:
    """Process-wide orchestrator built from environment configuration."""
    global _default_orchestrator
    with _default_lock:
        if _default_orchestrator is None:
            _default_orchestrator = ResolutionOrchestrator(cache=IdentifierCache(ttl=cache_ttl_from_env()))
        return _default_orchestrator


def resolve(kind: IdentifierKind, raw_value: str, cancel_event: threading.Event | None = None) -> ResolutionResult:
    """Resolve one identifier with the process-wide orchestrator."""
    return get_default_orchestrator().resolve(kind, raw_value, cancel_event)


def clear_cache() -> None:
    get_default_orchestrator().clear_cache()


def cache_size() -> int:
    return get_default_orchestrator().cache_size()


def sweep_expired() -> int:
    return get_default_orchestrator().sweep_expired()
