"""Result objects for sync operations.

Structured results provide consistent interfaces for logging and CLI output.
"""

from dataclasses import dataclass, field

from koshi.schemas import Bookmark, PullRequestRef

from .enums import RefinementState


@dataclass(frozen=True)
class ReviewerPlan:
    """Reviewer mutations needed to turn the current set into the desired one."""

    to_add: frozenset[str] = frozenset()
    to_remove: frozenset[str] = frozenset()

    @property
    def is_noop(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(frozen=True)
class RefinementOutcome:
    """Final state of a refinement loop run."""

    state: RefinementState
    description: str | None = None
    """Accepted description; None when cancelled."""

    rounds: int = 0
    """Number of refinement turns after the first draft."""

    @property
    def accepted(self) -> bool:
        return self.state is RefinementState.ACCEPTED


@dataclass
class SyncResult:
    """Result of synchronizing a change with its pull request.

    Captures which branch was pushed, whether a PR was created or updated,
    and which reviewer requests changed.
    """

    bookmark: Bookmark
    base: str
    pr: PullRequestRef | None = None
    """The PR (None if the user declined creating one)."""

    created: bool = False
    """True if a new PR was created."""

    updated: bool = False
    """True if an existing PR was updated."""

    declined: bool = False
    """True if the user declined the create/update confirmation."""

    reviewers: frozenset[str] = frozenset()
    """Reviewers requested on a new PR."""

    plan: ReviewerPlan = field(default_factory=ReviewerPlan)
    """Reviewer changes applied to an existing PR."""

    @property
    def action(self) -> str:
        """Get human-readable description of action taken.

        Returns one of "created", "updated", "declined" or "pushed".
        """
        if self.created:
            return "created"
        if self.updated:
            return "updated"
        if self.declined:
            return "declined"
        return "pushed"

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, object] = {
            "action": self.action,
            "bookmark": self.bookmark.name,
            "bookmark_created": self.bookmark.created,
            "base": self.base,
            "created": self.created,
            "updated": self.updated,
            "declined": self.declined,
        }

        if self.pr:
            result["pr_number"] = self.pr.number
            result["pr_url"] = self.pr.url

        if self.created:
            result["reviewers"] = sorted(self.reviewers)
        if self.updated:
            result["reviewers_added"] = sorted(self.plan.to_add)
            result["reviewers_removed"] = sorted(self.plan.to_remove)

        return result

    @classmethod
    def from_created(
        cls, bookmark: Bookmark, base: str, pr: PullRequestRef, reviewers: frozenset[str]
    ) -> "SyncResult":
        return cls(bookmark=bookmark, base=base, pr=pr, created=True, reviewers=reviewers)

    @classmethod
    def from_updated(
        cls, bookmark: Bookmark, base: str, pr: PullRequestRef, plan: ReviewerPlan
    ) -> "SyncResult":
        return cls(bookmark=bookmark, base=base, pr=pr, updated=True, plan=plan)

    @classmethod
    def from_declined(
        cls, bookmark: Bookmark, base: str, pr: PullRequestRef | None = None
    ) -> "SyncResult":
        return cls(bookmark=bookmark, base=base, pr=pr, declined=True)
