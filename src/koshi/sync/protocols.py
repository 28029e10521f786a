"""Interfaces of the collaborators the sync engine depends on.

Each external tool is reached through one narrow protocol so the decision
logic can run against fakes in tests. Methods that talk to a process or the
network are async; interactive prompts block the single control flow and are
plain methods.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol

from koshi.schemas import Bookmark, Change, PullRequestRef, RepositoryRef


class VersionControl(Protocol):
    """Local repository operations (jj)."""

    async def is_repository(self) -> bool: ...

    async def root(self) -> Path: ...

    async def current_change(self) -> Change: ...

    async def is_empty(self, change: Change) -> bool: ...

    async def diff(self, change: Change) -> str: ...

    async def diff_stat(self, change: Change) -> str: ...

    async def get_description(self, change: Change) -> str: ...

    async def set_description(self, change: Change, text: str) -> None: ...

    async def edit_description(self, change: Change) -> None: ...

    async def bookmark_of(self, change: Change) -> str | None: ...

    async def render_bookmark_name(self, change: Change) -> str: ...

    async def create_bookmark(self, change: Change, name: str) -> Bookmark: ...

    async def nearest_bookmarked_ancestor(self, change: Change) -> str | None: ...

    async def push(self, change: Change, bookmark: Bookmark) -> None: ...

    async def new_change(self) -> None: ...

    async def remote_repository(self) -> RepositoryRef: ...


class CodeReviewPlatform(Protocol):
    """Remote pull request operations (GitHub)."""

    async def is_authenticated(self) -> bool: ...

    async def find_open_pr(self, bookmark: str) -> PullRequestRef | None: ...

    async def create_pr(
        self,
        base: str,
        head: str,
        title: str,
        body: str,
        reviewers: Iterable[str] = (),
    ) -> PullRequestRef: ...

    async def update_pr(self, pr: PullRequestRef, base: str, title: str, body: str) -> None: ...

    async def current_review_requests(self, pr: PullRequestRef) -> frozenset[str]: ...

    async def add_reviewers(self, pr: PullRequestRef, logins: Iterable[str]) -> None: ...

    async def remove_reviewers(self, pr: PullRequestRef, logins: Iterable[str]) -> None: ...


class Conversationalist(Protocol):
    """AI conversation keyed by role; turn history is kept per session."""

    async def start_session(self, role: str, diff: str, instructions: str) -> str: ...

    async def continue_session(self, role: str, feedback: str) -> str: ...


class InteractionSurface(Protocol):
    """Terminal prompts. Every prompt raises Cancelled on user interrupt."""

    def confirm(self, prompt: str, *, default: bool) -> bool: ...

    def prompt_text(self, placeholder: str) -> str: ...

    def multi_select(
        self,
        header: str,
        options: Sequence[str],
        *,
        preselected: Iterable[str] = (),
        max_picks: int,
    ) -> list[str]: ...

    def show_description(self, title: str, text: str) -> None: ...

    def show_text(self, text: str) -> None: ...

    def spinner(self, title: str) -> AbstractContextManager[object]: ...


class ConfigStore(Protocol):
    """Read-only access to per-project configuration."""

    def reviewers_for(self, project_path: Path | str) -> frozenset[str]: ...

    def role_for(self, project_path: Path | str) -> str | None: ...
