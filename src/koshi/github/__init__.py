"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client implementing the code review platform
- Exceptions raised for failed API calls
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubValidationError,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubValidationError",
]
