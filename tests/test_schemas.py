"""Tests for repository, change and pull request schemas."""

import pytest
from pydantic import ValidationError

from koshi.schemas import (
    Bookmark,
    Change,
    GitHubPullRequest,
    PullRequestRef,
    RepositoryRef,
    parse_remote_url,
    parse_repo_string,
)


class TestRepositoryRef:
    """Tests for RepositoryRef."""

    def test_full_name(self):
        repo = RepositoryRef(owner="acme", name="app")
        assert repo.full_name == "acme/app"
        assert str(repo) == "acme/app"

    def test_empty_owner_rejected(self):
        with pytest.raises(ValidationError):
            RepositoryRef(owner="", name="app")

    def test_frozen(self):
        repo = RepositoryRef(owner="acme", name="app")
        with pytest.raises(ValidationError):
            repo.owner = "other"  # type: ignore[misc]


class TestParseRepoString:
    """Tests for owner/name parsing."""

    def test_valid(self):
        assert parse_repo_string("acme/app") == ("acme", "app")

    @pytest.mark.parametrize("repo", ["acme", "acme/", "/app", "acme/app/extra"])
    def test_invalid(self, repo):
        with pytest.raises(ValueError, match="owner/name"):
            parse_repo_string(repo)


class TestParseRemoteUrl:
    """Tests for reading the GitHub repository from a git remote URL."""

    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com:acme/app.git",
            "git@github.com:acme/app",
            "https://github.com/acme/app.git",
            "https://github.com/acme/app",
            "https://github.com/acme/app/",
            "ssh://git@github.com/acme/app.git",
            "https://user@github.com/acme/app.git",
        ],
    )
    def test_formats(self, url):
        assert parse_remote_url(url) == RepositoryRef(owner="acme", name="app")

    def test_dotted_repository_name(self):
        assert parse_remote_url("git@github.com:acme/app.js.git").name == "app.js"

    @pytest.mark.parametrize("url", ["", "not a url", "https://github.com/acme"])
    def test_invalid(self, url):
        with pytest.raises(ValueError, match="Cannot determine GitHub repository"):
            parse_remote_url(url)


class TestChange:
    """Tests for the Change and Bookmark schemas."""

    def test_short_id(self):
        assert Change(id="qpvuntsmwlqt").short_id == "qpvuntsm"

    def test_defaults(self):
        change = Change(id="qpvuntsmwlqt")
        assert change.description == ""
        assert not change.is_empty
        assert not Bookmark(name="feat-x").created

    def test_bookmark_name_required(self):
        with pytest.raises(ValidationError):
            Bookmark(name="")


class TestGitHubPullRequest:
    """Tests for mapping API pull requests."""

    def test_from_api_dict(self):
        pr = GitHubPullRequest.from_api(
            {
                "number": 42,
                "html_url": "https://github.com/acme/app/pull/42",
                "title": "Fix login bug",
                "body": None,
                "head": {"ref": "feat-x", "sha": "abc"},
                "base": {"ref": "main"},
                "requested_reviewers": [{"login": "alice", "id": 1}],
            }
        )

        assert pr.requested_reviewers[0].login == "alice"
        assert pr.to_ref() == PullRequestRef(
            number=42,
            head="feat-x",
            base="main",
            title="Fix login bug",
            body="",
            url="https://github.com/acme/app/pull/42",
        )

    def test_pull_request_number_positive(self):
        with pytest.raises(ValidationError):
            PullRequestRef(number=0, head="feat-x")
