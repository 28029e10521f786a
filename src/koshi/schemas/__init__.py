"""Pydantic schemas for koshi.

This module provides the models exchanged between the sync engine and its
collaborators.
"""

from .base import SchemaBase
from .change import Bookmark, Change
from .description import PRDescription
from .pull_request import GitHubBranchRef, GitHubPullRequest, GitHubUser, PullRequestRef
from .repository import RepositoryRef, parse_remote_url, parse_repo_string

__all__ = [
    # Base
    "SchemaBase",
    # Change
    "Bookmark",
    "Change",
    # Description
    "PRDescription",
    # GitHub API
    "GitHubBranchRef",
    "GitHubPullRequest",
    "GitHubUser",
    "PullRequestRef",
    # Repository
    "RepositoryRef",
    "parse_remote_url",
    "parse_repo_string",
]
