"""Tests for the shared HTTP client base."""

import threading
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from conftest import FakeClock

from chemresolve.clients import base
from chemresolve.clients.base import HTTPClientBase
from chemresolve.clients.cactus import CactusResolver
from chemresolve.errors import SourceTimeoutError

URL = "https://echo.test/compound"


class EchoClient(HTTPClientBase):
    name = "Echo"


def make_response(status: int = 200, body: bytes = b"{}") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.url = URL
    return response


def make_client(handler: Callable[..., requests.Response], rate_limit_delay: float = 0) -> tuple[EchoClient, MagicMock]:
    """Create a client whose session answers through ``handler``."""
    session = requests.Session()
    request = MagicMock(side_effect=handler)
    session.request = request  # type: ignore[method-assign]
    return EchoClient(rate_limit_delay=rate_limit_delay, session=session), request


@pytest.fixture
def frozen_time(monkeypatch: pytest.MonkeyPatch, fake_clock: FakeClock) -> FakeClock:
    """Drive the client's wall and monotonic clocks from one fake clock."""
    monkeypatch.setattr(
        base, "time", SimpleNamespace(time=fake_clock, monotonic=fake_clock, sleep=lambda delay: None)
    )
    return fake_clock


class TestRateLimit:
    """Tests for request spacing."""

    def test_slots_reserved_without_holding_lock(
        self, monkeypatch: pytest.MonkeyPatch, fake_clock: FakeClock
    ) -> None:
        """Test that callers get staggered slots and sleep with the lock released."""
        client = EchoClient(rate_limit_delay=0.5)
        sleeps: list[tuple[float, bool]] = []

        def sleep(delay: float) -> None:
            sleeps.append((delay, client._rate_lock.locked()))

        monkeypatch.setattr(base, "time", SimpleNamespace(time=fake_clock, monotonic=fake_clock, sleep=sleep))

        # Three back-to-back callers with the clock standing still
        client._wait_for_rate_limit()
        client._wait_for_rate_limit()
        client._wait_for_rate_limit()

        assert sleeps == [(0.5, False), (1.0, False)]

    def test_no_wait_after_delay_elapsed(self, monkeypatch: pytest.MonkeyPatch, fake_clock: FakeClock) -> None:
        """Test that a caller arriving after the delay goes straight through."""
        client = EchoClient(rate_limit_delay=0.5)
        sleeps: list[float] = []
        monkeypatch.setattr(base, "time", SimpleNamespace(time=fake_clock, monotonic=fake_clock, sleep=sleeps.append))

        client._wait_for_rate_limit()
        fake_clock.advance(1.0)
        client._wait_for_rate_limit()

        assert sleeps == []


class TestDeadline:
    """Tests for the per-attempt deadline."""

    def test_timeout_is_remaining_time(self, frozen_time: FakeClock) -> None:
        """Test that each request gets the time left before the deadline."""
        client, request = make_client(lambda method, url, **kwargs: make_response())

        client._get_json(URL, deadline=frozen_time() + 2.0)

        assert request.call_args.kwargs["timeout"] == 2.0

    def test_slow_response_past_deadline(self, frozen_time: FakeClock) -> None:
        """Test that a response finishing after the deadline counts as a timeout."""

        def trickle(method: str, url: str, **kwargs: Any) -> requests.Response:
            frozen_time.advance(5.0)
            return make_response()

        client, _ = make_client(trickle)

        with pytest.raises(SourceTimeoutError, match="deadline"):
            client._get_json(URL, deadline=frozen_time() + 2.0)


class TestSessions:
    """Tests for session handling across threads."""

    def test_session_per_thread(self) -> None:
        """Test that each thread gets its own configured session."""
        client = EchoClient(user_agent="chemresolve-test")
        here = client._session
        there: list[requests.Session] = []

        worker = threading.Thread(target=lambda: there.append(client._session))
        worker.start()
        worker.join()

        assert client._session is here
        assert there[0] is not here
        assert there[0].headers["User-Agent"] == "chemresolve-test"
        assert len(client._sessions) == 2

    def test_close_drops_sessions(self) -> None:
        """Test that close() releases every session and later calls start fresh."""
        client = EchoClient()
        first = client._session

        client.close()

        assert client._sessions == []
        assert client._session is not first

    def test_injected_session_is_shared(self) -> None:
        """Test that a session passed in is used by every thread."""
        session = requests.Session()
        client = EchoClient(session=session)
        there: list[requests.Session] = []

        worker = threading.Thread(target=lambda: there.append(client._session))
        worker.start()
        worker.join()

        assert client._session is session
        assert there == [session]

    def test_subclass_accept_header(self) -> None:
        """Test that thread sessions carry the resolver's Accept header."""
        assert CactusResolver()._session.headers["Accept"] == "text/plain"
