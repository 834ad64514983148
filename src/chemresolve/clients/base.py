"""Base HTTP client and the remote resolver interface.

Provides shared functionality for all remote resolvers:
- Rate limiting with configurable delay
- Session management with custom User-Agent
- GET/POST methods with a per-request timeout
- Translation of ``requests`` failures into resolver errors
- A per-attempt deadline spanning several HTTP calls

Concrete resolvers inherit from HTTPClientBase and implement ``resolve``.
"""

import logging
import threading
import time
from typing import Any, Protocol

import requests

from chemresolve.config import DEFAULT_USER_AGENT, RemoteSourceConfig
from chemresolve.errors import SourceTimeoutError, SourceTransportError
from chemresolve.identifiers import IdentifierKind, IdentifierSet

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_RATE_LIMIT_DELAY = 0.2  # seconds between requests


class RemoteResolver(Protocol):
    """Anything that can turn (kind, value) into a best-effort identifier set.

    ``resolve`` returns an empty IdentifierSet when the source definitively has
    no match, and raises SourceTimeoutError / SourceTransportError when the
    source could not be asked.
    """

    name: str

    def resolve(self, kind: IdentifierKind, normalized: str, config: RemoteSourceConfig) -> IdentifierSet: ...


class NotFound(Exception):
    """Raised when a source answers that it has no such compound."""


class HTTPClientBase:
    """Base class for HTTP resolvers with rate limiting.

    Subclasses should:
    - Set ``name`` to the source label used in configuration
    - Implement ``resolve(kind, normalized, config)``
    - Use ``_get``/``_get_json``/``_post_json`` with the attempt deadline

    Example:
        >>> class MyResolver(HTTPClientBase):
        ...     name = "Example"
        ...
        ...     def resolve(self, kind, normalized, config):
        ...         deadline = self._deadline(config)
        ...         data = self._get_json(f"{config.base_url}/{normalized}", deadline=deadline)
        ...         return IdentifierSet(iupac_name=data.get("name"))
    """

    name: str = ""
    # HTTP statuses meaning "the source has no such compound"
    NOT_FOUND_STATUSES: tuple[int, ...] = (404,)
    ACCEPT = "application/json"

    def __init__(
        self,
        rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Sessions are created per thread, since ``requests.Session`` is not
        documented as thread-safe. A session passed in is shared by every
        thread instead.

        Args:
            rate_limit_delay: Seconds to wait between requests
            user_agent: Custom User-Agent string (uses default if not provided)
            session: Pre-built session (mainly for tests)
        """
        self.rate_limit_delay = rate_limit_delay
        self._last_request_time: float = 0
        self._rate_lock = threading.Lock()
        self._headers = {
            "Accept": self.ACCEPT,
            "User-Agent": user_agent or DEFAULT_USER_AGENT,
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self._headers)
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def _session(self) -> requests.Session:
        """Session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _wait_for_rate_limit(self) -> None:
        """Wait if needed to respect rate limit.

        Each caller reserves the next free slot under the lock and sleeps
        outside it.
        """
        with self._rate_lock:
            now = time.time()
            slot = max(now, self._last_request_time + self.rate_limit_delay)
            self._last_request_time = slot
        if slot > now:
            time.sleep(slot - now)

    @staticmethod
    def _deadline(config: RemoteSourceConfig) -> float:
        """Monotonic deadline for one attempt against a source."""
        return time.monotonic() + config.timeout

    def _remaining(self, deadline: float) -> float:
        """Seconds left before the deadline.

        Raises:
            SourceTimeoutError: If the deadline has passed
        """
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise SourceTimeoutError("attempt deadline exceeded", source=self.name)
        return remaining

    def _request(self, method: str, url: str, deadline: float, **kwargs: Any) -> requests.Response:
        """Send a request, mapping transport failures to resolver errors.

        ``requests`` applies ``timeout`` to the connect and to each socket
        read, not to the whole transfer, so a server trickling bytes can hold
        a call past the deadline. Such a response is discarded as a timeout
        once it arrives.

        Returns:
            Response object with a 2xx status

        Raises:
            NotFound: On a status in NOT_FOUND_STATUSES
            SourceTimeoutError: On connect/read timeout or an expired deadline
            SourceTransportError: On any other network or HTTP error
        """
        self._wait_for_rate_limit()
        timeout = self._remaining(deadline)
        logger.debug(f"{method} {url} timeout={timeout:.1f}s")
        try:
            response = self._session.request(method, url, timeout=timeout, **kwargs)
        except requests.Timeout as e:
            raise SourceTimeoutError(str(e), source=self.name) from e
        except requests.RequestException as e:
            raise SourceTransportError(str(e), source=self.name) from e
        self._remaining(deadline)
        if response.status_code in self.NOT_FOUND_STATUSES:
            raise NotFound(url)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise SourceTransportError(str(e), source=self.name) from e
        return response

    def _get(self, url: str, deadline: float, params: dict[str, Any] | None = None) -> requests.Response:
        return self._request("GET", url, deadline, params=params)

    def _get_json(self, url: str, deadline: float, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make a GET request and return parsed JSON.

        Raises:
            SourceTransportError: If the response is not a JSON object
        """
        return self._parse_json(self._get(url, deadline, params))

    def _post_json(self, url: str, deadline: float, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make a form POST request and return parsed JSON."""
        return self._parse_json(self._request("POST", url, deadline, data=data))

    def _parse_json(self, response: requests.Response) -> dict[str, Any]:
        try:
            result = response.json()
        except ValueError as e:
            raise SourceTransportError(f"Failed to parse response: {e}", source=self.name) from e
        if not isinstance(result, dict):
            raise SourceTransportError("Unexpected response payload", source=self.name)
        return result

    def close(self) -> None:
        """Close every session this client opened."""
        if self._shared_session is not None:
            self._shared_session.close()
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def __enter__(self) -> "HTTPClientBase":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close session."""
        self.close()
