"""Pydantic schemas for GitHub pull requests.

These map the parts of the GitHub REST API response koshi needs.
See: https://docs.github.com/en/rest/pulls/pulls
"""

from pydantic import Field

from .base import SchemaBase


class GitHubUser(SchemaBase):
    """GitHub user object from API responses."""

    login: str = Field(description="GitHub username")


class GitHubBranchRef(SchemaBase):
    """Head or base branch of a pull request."""

    ref: str = Field(description="Branch name")


class GitHubPullRequest(SchemaBase):
    """GitHub Pull Request object from API.

    Maps to: GET /repos/{owner}/{repo}/pulls/{number}
    """

    number: int = Field(description="PR number")
    html_url: str = Field(default="", description="Web URL of the PR")
    state: str = Field(default="open", description="open or closed")
    title: str = Field(description="PR title")
    body: str | None = Field(default=None, description="PR body")
    head: GitHubBranchRef = Field(description="Head branch")
    base: GitHubBranchRef = Field(description="Base branch")
    requested_reviewers: list[GitHubUser] = Field(
        default_factory=list,
        description="Users whose review is requested",
    )

    def to_ref(self) -> "PullRequestRef":
        """Reduce to the handle the sync engine works with."""
        return PullRequestRef(
            number=self.number,
            head=self.head.ref,
            base=self.base.ref,
            title=self.title,
            body=self.body or "",
            url=self.html_url,
        )


class PullRequestRef(SchemaBase):
    """Handle of an open pull request, keyed by its head bookmark."""

    number: int = Field(gt=0, description="PR number")
    head: str = Field(description="Head branch (the change's bookmark)")
    base: str = Field(default="", description="Base branch")
    title: str = Field(default="", description="PR title")
    body: str = Field(default="", description="PR body")
    url: str = Field(default="", description="Web URL of the PR")
