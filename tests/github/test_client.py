"""Tests for GitHubClient.

Tests cover:
- Token handling and authentication checks
- Finding the open PR for a bookmark
- Creating and updating PRs
- Requested reviewer management
- Error mapping from githubkit RequestFailed
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from githubkit.exception import RequestFailed

from koshi.github.client import GitHubClient
from koshi.github.exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubValidationError,
)
from koshi.schemas import PullRequestRef, RepositoryRef

REPO = RepositoryRef(owner="acme", name="app")


def make_pr_data(number: int = 42, head: str = "feat-x", base: str = "main", **overrides):
    """Plain dict shaped like a GitHub pull request response."""
    data = {
        "number": number,
        "html_url": f"https://github.com/acme/app/pull/{number}",
        "state": "open",
        "title": "Fix login bug",
        "body": "Sessions expired too early.",
        "head": {"ref": head},
        "base": {"ref": base},
        "requested_reviewers": [],
    }
    data.update(overrides)
    return data


def make_response(parsed_data):
    resp = MagicMock()
    resp.parsed_data = parsed_data
    return resp


def request_failed(status_code: int) -> RequestFailed:
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.headers = {}
    return RequestFailed(mock_response)


# -----------------------------------------------------------------------------
# Test Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_github():
    """Create a mock githubkit GitHub client."""
    with patch("koshi.github.client.GitHub") as mock_class:
        mock_instance = MagicMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def client(mock_github) -> GitHubClient:
    return GitHubClient(REPO, token="test-token")


@pytest.fixture
def pr() -> PullRequestRef:
    return PullRequestRef(number=42, head="feat-x", base="main")


# -----------------------------------------------------------------------------
# Test: Initialization
# -----------------------------------------------------------------------------
class TestGitHubClientInit:
    """Tests for GitHubClient initialization."""

    def test_init_with_token(self):
        client = GitHubClient(REPO, token="test-token")
        assert client._token == "test-token"
        assert client.repository == REPO

    def test_token_from_settings(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        client = GitHubClient(REPO)
        assert client._token == "env-token"

    async def test_request_without_token_raises(self):
        client = GitHubClient(REPO)
        with pytest.raises(GitHubAuthenticationError):
            await client.find_open_pr("feat-x")

    async def test_context_manager_closes(self, mock_github):
        async with GitHubClient(REPO, token="test-token") as client:
            assert client._github is mock_github
        assert client._client is None


# -----------------------------------------------------------------------------
# Test: Authentication
# -----------------------------------------------------------------------------
class TestIsAuthenticated:
    """Tests for the authentication check."""

    async def test_no_token(self):
        assert await GitHubClient(REPO).is_authenticated() is False

    async def test_valid_token(self, client, mock_github):
        user = MagicMock()
        user.login = "alice"
        mock_github.rest.users.async_get_authenticated = AsyncMock(
            return_value=make_response(user)
        )

        assert await client.is_authenticated() is True

    async def test_rejected_token(self, client, mock_github):
        mock_github.rest.users.async_get_authenticated = AsyncMock(
            side_effect=request_failed(401)
        )

        assert await client.is_authenticated() is False

    async def test_other_errors_propagate(self, client, mock_github):
        mock_github.rest.users.async_get_authenticated = AsyncMock(
            side_effect=request_failed(500)
        )

        with pytest.raises(GitHubClientError, match="500"):
            await client.is_authenticated()


# -----------------------------------------------------------------------------
# Test: Pull Requests
# -----------------------------------------------------------------------------
class TestFindOpenPr:
    """Tests for finding the open PR of a bookmark."""

    async def test_found(self, client, mock_github):
        mock_github.rest.pulls.async_list = AsyncMock(
            return_value=make_response([make_pr_data()])
        )

        pr = await client.find_open_pr("feat-x")

        assert pr == PullRequestRef(
            number=42,
            head="feat-x",
            base="main",
            title="Fix login bug",
            body="Sessions expired too early.",
            url="https://github.com/acme/app/pull/42",
        )
        mock_github.rest.pulls.async_list.assert_awaited_once_with(
            owner="acme", repo="app", state="open", head="acme:feat-x"
        )

    async def test_none_open(self, client, mock_github):
        mock_github.rest.pulls.async_list = AsyncMock(return_value=make_response([]))

        assert await client.find_open_pr("feat-x") is None

    async def test_ignores_other_heads(self, client, mock_github):
        mock_github.rest.pulls.async_list = AsyncMock(
            return_value=make_response([make_pr_data(head="feat-xy")])
        )

        assert await client.find_open_pr("feat-x") is None

    async def test_null_body(self, client, mock_github):
        mock_github.rest.pulls.async_list = AsyncMock(
            return_value=make_response([make_pr_data(body=None)])
        )

        pr = await client.find_open_pr("feat-x")

        assert pr is not None
        assert pr.body == ""


class TestCreatePr:
    """Tests for PR creation."""

    async def test_creates_and_requests_reviewers(self, client, mock_github):
        mock_github.rest.pulls.async_create = AsyncMock(
            return_value=make_response(make_pr_data(number=7))
        )
        mock_github.rest.pulls.async_request_reviewers = AsyncMock()

        pr = await client.create_pr("main", "feat-x", "Fix login bug", "body", ["bob", "alice"])

        assert pr.number == 7
        mock_github.rest.pulls.async_create.assert_awaited_once_with(
            owner="acme",
            repo="app",
            title="Fix login bug",
            head="feat-x",
            base="main",
            body="body",
        )
        mock_github.rest.pulls.async_request_reviewers.assert_awaited_once_with(
            owner="acme", repo="app", pull_number=7, reviewers=["alice", "bob"]
        )

    async def test_no_reviewers_skips_request(self, client, mock_github):
        mock_github.rest.pulls.async_create = AsyncMock(
            return_value=make_response(make_pr_data(number=7))
        )
        mock_github.rest.pulls.async_request_reviewers = AsyncMock()

        await client.create_pr("main", "feat-x", "Fix login bug", "body")

        mock_github.rest.pulls.async_request_reviewers.assert_not_awaited()

    async def test_validation_error(self, client, mock_github):
        mock_github.rest.pulls.async_create = AsyncMock(side_effect=request_failed(422))

        with pytest.raises(GitHubValidationError):
            await client.create_pr("main", "feat-x", "Fix login bug", "body")


class TestUpdatePr:
    """Tests for PR updates."""

    async def test_updates_fields(self, client, mock_github, pr):
        mock_github.rest.pulls.async_update = AsyncMock()

        await client.update_pr(pr, "release", "New title", "New body")

        mock_github.rest.pulls.async_update.assert_awaited_once_with(
            owner="acme",
            repo="app",
            pull_number=42,
            base="release",
            title="New title",
            body="New body",
        )

    async def test_not_found(self, client, mock_github, pr):
        mock_github.rest.pulls.async_update = AsyncMock(side_effect=request_failed(404))

        with pytest.raises(GitHubNotFoundError) as exc_info:
            await client.update_pr(pr, "main", "t", "b")

        assert "42" in str(exc_info.value)
        assert "acme/app" in str(exc_info.value)


# -----------------------------------------------------------------------------
# Test: Reviewers
# -----------------------------------------------------------------------------
class TestReviewers:
    """Tests for requested reviewer management."""

    async def test_current_review_requests(self, client, mock_github, pr):
        requested = MagicMock()
        requested.users = [{"login": "alice"}, {"login": "carol"}]
        mock_github.rest.pulls.async_list_requested_reviewers = AsyncMock(
            return_value=make_response(requested)
        )

        assert await client.current_review_requests(pr) == {"alice", "carol"}

    async def test_remove_reviewers_sorted(self, client, mock_github, pr):
        mock_github.rest.pulls.async_remove_requested_reviewers = AsyncMock()

        await client.remove_reviewers(pr, {"carol", "alice"})

        mock_github.rest.pulls.async_remove_requested_reviewers.assert_awaited_once_with(
            owner="acme", repo="app", pull_number=42, reviewers=["alice", "carol"]
        )

    async def test_empty_sets_make_no_requests(self, client, mock_github, pr):
        mock_github.rest.pulls.async_request_reviewers = AsyncMock()
        mock_github.rest.pulls.async_remove_requested_reviewers = AsyncMock()

        await client.add_reviewers(pr, [])
        await client.remove_reviewers(pr, frozenset())

        mock_github.rest.pulls.async_request_reviewers.assert_not_awaited()
        mock_github.rest.pulls.async_remove_requested_reviewers.assert_not_awaited()


# -----------------------------------------------------------------------------
# Test: Error Mapping
# -----------------------------------------------------------------------------
class TestErrorMapping:
    """githubkit failures become koshi GitHub errors."""

    @pytest.mark.parametrize(
        ("status", "error_type"),
        [
            (401, GitHubAuthenticationError),
            (403, GitHubClientError),
            (404, GitHubNotFoundError),
            (422, GitHubValidationError),
            (502, GitHubClientError),
        ],
    )
    async def test_add_reviewers_errors(self, client, mock_github, pr, status, error_type):
        mock_github.rest.pulls.async_request_reviewers = AsyncMock(
            side_effect=request_failed(status)
        )

        with pytest.raises(error_type):
            await client.add_reviewers(pr, ["alice"])
