"""Request and result types for identifier resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chemresolve.errors import ErrorKind
from chemresolve.identifiers import IdentifierKind, IdentifierSet, preferred_render_value


@dataclass(frozen=True)
class ResolutionRequest:
    """One identifier to resolve, exactly as the caller supplied it."""

    kind: IdentifierKind
    raw_value: str


@dataclass
class ResolutionResult:
    """Outcome of resolving one identifier.

    Attributes:
        success: True if any identifiers were found
        identifiers: Resolved set (possibly partial; empty on failure)
        source: Where the set came from (e.g., "PubChem", "Local Database (cached)")
        confidence: Heuristic completeness/trust score in [0, 1]
        error_kind: Failure classification (None on success)
        error: User-facing error message (None on success)
    """

    success: bool
    identifiers: IdentifierSet = field(default_factory=IdentifierSet)
    source: str | None = None
    confidence: float = 0.0
    error_kind: ErrorKind | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> ResolutionResult:
        return cls(success=False, error_kind=error_kind, error=message)

    def render_value(self) -> tuple[IdentifierKind, str] | None:
        """The (kind, value) a structure renderer should consume, if any."""
        return preferred_render_value(self.identifiers)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "identifiers": self.identifiers.to_dict(),
            "source": self.source,
            "confidence": self.confidence,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
        }
