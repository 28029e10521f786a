"""Pytest configuration and shared fixtures.

Usage Guide:
- Engine/workflow tests: build collaborators with the `calls` journal and the
  fake factories from tests.fakes
- GitHub client tests: patch `koshi.github.client.GitHub`
- jj adapter tests: patch `koshi.vcs.jujutsu.run_command`
"""

from collections.abc import Iterator

import pytest

from koshi.config import get_settings
from koshi.logging import reset_logging
from koshi.schemas import PullRequestRef
from tests.fakes import FakeConfig, FakePlatform, FakeUI, FakeVCS

DESCRIPTION = "Fix login bug\n\nSessions expired too early.\nNow they last a day.\n"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep developer environment variables out of settings."""
    for var in (
        "GITHUB_TOKEN",
        "CONFIG_PATH",
        "REMOTE",
        "LOG_LEVEL",
        "JJ_EXECUTABLE",
        "AICHAT_EXECUTABLE",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def calls() -> list[tuple[object, ...]]:
    """Shared journal of mutating calls across all fakes."""
    return []


@pytest.fixture
def vcs(calls: list[tuple[object, ...]]) -> FakeVCS:
    return FakeVCS(calls, description=DESCRIPTION)


@pytest.fixture
def platform(calls: list[tuple[object, ...]]) -> FakePlatform:
    return FakePlatform(calls)


@pytest.fixture
def existing_pr() -> PullRequestRef:
    return PullRequestRef(
        number=42,
        head="feat-x",
        base="main",
        title="Old title",
        body="Old body",
        url="https://github.com/acme/app/pull/42",
    )


@pytest.fixture
def config() -> FakeConfig:
    return FakeConfig(reviewers=["alice", "bob"])


@pytest.fixture
def ui(calls: list[tuple[object, ...]]) -> FakeUI:
    return FakeUI(calls)
