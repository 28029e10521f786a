"""Splitting change descriptions into PR title and body.

A description follows commit message convention: a title line, a blank
separator line, then the body. The second line is always dropped, even when
it is not blank, so descriptions written before koshi keep producing the
same PR body.
"""

from pydantic import Field

from koshi.exceptions import PreconditionError

from .base import SchemaBase

MIN_DESCRIPTION_LINES = 3


def parse(text: str) -> tuple[str, str]:
    """Split a description into (title, body)."""
    lines = text.split("\n")
    return lines[0], "\n".join(lines[2:])


def serialize(title: str, body: str) -> str:
    """Join a title and body into a description."""
    return f"{title}\n\n{body}"


def line_count(text: str) -> int:
    """Lines as parse sees them; one trailing newline does not start a line."""
    return len(text.removesuffix("\n").split("\n"))


def validate(text: str) -> None:
    """Reject descriptions that cannot produce a PR title and body.

    Raises:
        PreconditionError: If the description has fewer than 3 lines
    """
    if line_count(text) < MIN_DESCRIPTION_LINES:
        raise PreconditionError(
            f"description must have at least {MIN_DESCRIPTION_LINES} lines"
        )


class PRDescription(SchemaBase):
    """Title and body of a pull request derived from a change description."""

    title: str = Field(description="First line of the description")
    body: str = Field(default="", description="Lines 3 onward")

    @classmethod
    def from_text(cls, text: str, *, strict: bool = True) -> "PRDescription":
        """Parse a description, validating its length first when strict."""
        if strict:
            validate(text)
        title, body = parse(text)
        return cls(title=title, body=body)

    def to_text(self) -> str:
        return serialize(self.title, self.body)
