"""Async GitHub API client wrapper using githubkit.

This module provides the pull request operations koshi needs: finding the
open PR for a bookmark, creating and updating it, and managing its requested
reviewers.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestFailed

from koshi.config import get_settings
from koshi.logging import get_logger
from koshi.schemas import GitHubPullRequest, GitHubUser, PullRequestRef, RepositoryRef

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubValidationError,
)

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub API client for a single repository.

    Usage:
        async with GitHubClient(RepositoryRef(owner="o", name="r")) as client:
            pr = await client.find_open_pr("push-qpvuntsm")
    """

    def __init__(self, repository: RepositoryRef, token: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            repository: Repository the PRs live in
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
        """
        self._repository = repository
        self._token = token or get_settings().github_token
        self._client: GitHub[Any] | None = None

    @property
    def repository(self) -> RepositoryRef:
        return self._repository

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            if not self._token:
                raise GitHubAuthenticationError(
                    "GitHub token required. Set GITHUB_TOKEN environment variable."
                )
            self._client = GitHub(self._token)
        return self._client

    @property
    def _owner(self) -> str:
        return self._repository.owner

    @property
    def _repo(self) -> str:
        return self._repository.name

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------
    async def is_authenticated(self) -> bool:
        """Check that a token is configured and accepted by GitHub."""
        if not self._token:
            return False
        try:
            resp = await self._github.rest.users.async_get_authenticated()
        except RequestFailed as e:
            if e.response.status_code == 401:
                return False
            raise self._handle_error(e) from e
        logger.debug("Authenticated as {login}", login=resp.parsed_data.login)
        return True

    # -------------------------------------------------------------------------
    # Pull Request Methods
    # -------------------------------------------------------------------------
    async def find_open_pr(self, bookmark: str) -> PullRequestRef | None:
        """Get the open PR whose head branch is bookmark, if any."""
        try:
            resp = await self._github.rest.pulls.async_list(
                owner=self._owner,
                repo=self._repo,
                state="open",
                head=f"{self._owner}:{bookmark}",
            )
        except RequestFailed as e:
            raise self._handle_error(e) from e

        for pr_data in resp.parsed_data:
            pr = GitHubPullRequest.from_api(pr_data)
            if pr.head.ref == bookmark:
                return pr.to_ref()
        return None

    async def create_pr(
        self,
        base: str,
        head: str,
        title: str,
        body: str,
        reviewers: Iterable[str] = (),
    ) -> PullRequestRef:
        """Create a PR from head into base and request reviewers on it."""
        try:
            resp = await self._github.rest.pulls.async_create(
                owner=self._owner,
                repo=self._repo,
                title=title,
                head=head,
                base=base,
                body=body,
            )
        except RequestFailed as e:
            raise self._handle_error(e) from e

        pr = GitHubPullRequest.from_api(resp.parsed_data).to_ref()
        logins = sorted(reviewers)
        if logins:
            await self.add_reviewers(pr, logins)
        return pr

    async def update_pr(self, pr: PullRequestRef, base: str, title: str, body: str) -> None:
        """Update base branch, title and body of an existing PR."""
        try:
            await self._github.rest.pulls.async_update(
                owner=self._owner,
                repo=self._repo,
                pull_number=pr.number,
                base=base,
                title=title,
                body=body,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(
                    f"PR #{pr.number} not found in {self._repository}"
                ) from e
            raise self._handle_error(e) from e

    # -------------------------------------------------------------------------
    # Reviewer Methods
    # -------------------------------------------------------------------------
    async def current_review_requests(self, pr: PullRequestRef) -> frozenset[str]:
        """Logins of users whose review is currently requested.

        Reviewers who already submitted a review are no longer "requested"
        and do not appear here.
        """
        try:
            resp = await self._github.rest.pulls.async_list_requested_reviewers(
                owner=self._owner,
                repo=self._repo,
                pull_number=pr.number,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(
                    f"PR #{pr.number} not found in {self._repository}"
                ) from e
            raise self._handle_error(e) from e

        return frozenset(GitHubUser.from_api(user).login for user in resp.parsed_data.users)

    async def add_reviewers(self, pr: PullRequestRef, logins: Iterable[str]) -> None:
        reviewers = sorted(logins)
        if not reviewers:
            return
        try:
            await self._github.rest.pulls.async_request_reviewers(
                owner=self._owner,
                repo=self._repo,
                pull_number=pr.number,
                reviewers=reviewers,
            )
        except RequestFailed as e:
            raise self._handle_error(e) from e

    async def remove_reviewers(self, pr: PullRequestRef, logins: Iterable[str]) -> None:
        reviewers = sorted(logins)
        if not reviewers:
            return
        try:
            await self._github.rest.pulls.async_remove_requested_reviewers(
                owner=self._owner,
                repo=self._repo,
                pull_number=pr.number,
                reviewers=reviewers,
            )
        except RequestFailed as e:
            raise self._handle_error(e) from e

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        elif status == 422:
            return GitHubValidationError(f"GitHub rejected the request: {error}")
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
