"""Error classification and remote source exceptions."""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a failed resolution."""

    EMPTY_INPUT = "empty_input"
    IMPLAUSIBLE_INPUT = "implausible_input"
    FORMAT_MISMATCH = "format_mismatch"
    SOURCE_TIMEOUT = "source_timeout"
    SOURCE_TRANSPORT_FAILURE = "source_transport_failure"
    ALL_SOURCES_EXHAUSTED = "all_sources_exhausted"
    CANCELLED = "cancelled"


class ResolverError(Exception):
    """Base class for failures talking to a remote source.

    Attributes:
        source: Name of the source that failed
        error_kind: Classification of the failure
    """

    error_kind = ErrorKind.SOURCE_TRANSPORT_FAILURE

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.source}: {message}" if self.source else message


class SourceTimeoutError(ResolverError):
    """A request to a source did not complete within its timeout."""

    error_kind = ErrorKind.SOURCE_TIMEOUT


class SourceTransportError(ResolverError):
    """A request to a source failed (connection, HTTP status, bad payload)."""

    error_kind = ErrorKind.SOURCE_TRANSPORT_FAILURE


class SourceExhaustedError(ResolverError):
    """Every attempt against a source failed.

    Attributes:
        last_error: The error from the final attempt
        attempts: Number of attempts made
    """

    def __init__(self, source: str, last_error: ResolverError, attempts: int):
        detail = last_error.args[0] if last_error.args else type(last_error).__name__
        super().__init__(f"failed after {attempts} attempt(s): {detail}", source=source)
        self.last_error = last_error
        self.attempts = attempts
        self.error_kind = last_error.error_kind


class ResolutionCancelled(Exception):
    """The caller abandoned the resolution (its cancel event was set)."""
