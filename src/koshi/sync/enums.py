"""Enums for sync operations."""

from enum import Enum


class RefinementState(str, Enum):
    """States of the description refinement loop."""

    DRAFTING = "drafting"
    """Waiting for the first generated description."""

    REVIEWING = "reviewing"
    """Description shown to the user, waiting for feedback."""

    REFINING = "refining"
    """Feedback sent, waiting for the updated description."""

    ACCEPTED = "accepted"
    """User accepted the description with an empty reply. Terminal."""

    CANCELLED = "cancelled"
    """User interrupted a prompt. Terminal."""

    @property
    def is_terminal(self) -> bool:
        return self in (RefinementState.ACCEPTED, RefinementState.CANCELLED)


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
