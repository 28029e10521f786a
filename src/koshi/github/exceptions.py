"""GitHub client exceptions."""

from koshi.exceptions import RemoteOperationError


class GitHubClientError(RemoteOperationError):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401)."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass


class GitHubValidationError(GitHubClientError):
    """Raised when GitHub rejects a mutation (422).

    For example a PR already exists for the head branch, or a requested
    reviewer is not a collaborator.
    """

    pass
