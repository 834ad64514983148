"""Pytest configuration for chemresolve tests.

This file is automatically loaded by pytest and sets up test fixtures
and configuration that are shared across all test modules.
"""

from collections.abc import Callable, Iterable

import pytest
from dotenv import load_dotenv

from chemresolve.config import RemoteSourceConfig
from chemresolve.identifiers import IdentifierKind, IdentifierSet
from chemresolve.resolution.orchestrator import RemoteSource

# Load .env file so integration tests can pick up source overrides
# This runs before any tests are collected
load_dotenv()


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedResolver:
    """Remote resolver that replays a script of outcomes.

    Each call consumes the next outcome; the last one repeats once the script
    runs out. An outcome is either an IdentifierSet to return or an exception
    to raise.
    """

    def __init__(self, name: str, outcomes: Iterable[IdentifierSet | Exception]):
        self.name = name
        self.outcomes = list(outcomes)
        self.calls: list[tuple[IdentifierKind, str]] = []

    def resolve(self, kind: IdentifierKind, normalized: str, config: RemoteSourceConfig) -> IdentifierSet:
        self.calls.append((kind, normalized))
        index = min(len(self.calls), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class SleepRecorder:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_source(
    name: str,
    priority: int,
    outcomes: Iterable[IdentifierSet | Exception],
    max_retries: int = 0,
) -> RemoteSource:
    """Build a RemoteSource backed by a ScriptedResolver."""
    config = RemoteSourceConfig(
        name=name,
        base_url=f"https://{name.lower()}.invalid",
        priority=priority,
        timeout=1.0,
        max_retries=max_retries,
    )
    return RemoteSource(config=config, resolver=ScriptedResolver(name, outcomes))


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """No-op sleep that records each delay."""
    return SleepRecorder()


@pytest.fixture
def scripted_source() -> Callable[..., RemoteSource]:
    """Factory for RemoteSources backed by ScriptedResolvers."""
    return make_source
