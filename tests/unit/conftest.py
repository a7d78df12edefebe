"""
Global fixtures for all unit tests.

Provides:
- Environment isolation (no real .env or repository/sheet overrides leak in)
- A controllable clock shared by cache and rate limiter
- An httpx.MockTransport route table so no test touches the network
"""

import pytest

from community_hub.common.config import get_settings
from community_hub.common.context import FetchContext

from .builders import FakeClock, MockRoutes, make_settings

ENV_VARS = [
    "INTERVIEW_REPO_OWNER",
    "INTERVIEW_REPO_NAME",
    "INTERVIEW_REPO_BRANCH",
    "NEXT_PUBLIC_INTERVIEW_REPO_OWNER",
    "NEXT_PUBLIC_INTERVIEW_REPO_NAME",
    "NEXT_PUBLIC_INTERVIEW_REPO_BRANCH",
    "JOBS_SHEET_URL",
    "CSV_CATEGORIES",
    "PARTIAL_FAILURE_POLICY",
    "COUNT_MISMATCH_POLICY",
    "STRICT_PARTITIONS",
    "ENVIRONMENT",
    "RETRY_ATTEMPTS",
]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Run every test from an empty directory with no hub env vars set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def routes():
    return MockRoutes()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def make_context(routes, clock):
    """Factory: FetchContext wired to the mock routes, fake clock and settings overrides."""

    def _make(**overrides) -> FetchContext:
        return FetchContext(make_settings(**overrides), clock=clock, transport=routes.transport())

    return _make


@pytest.fixture
def context(make_context):
    return make_context()
