"""Schemas for the local jj change and its bookmark."""

from pydantic import Field

from .base import SchemaBase


class Change(SchemaBase):
    """The working change (@) of a jj repository."""

    id: str = Field(description="jj change id")
    description: str = Field(default="", description="Full change description")
    is_empty: bool = Field(default=False, description="True if the change has no diff")

    @property
    def short_id(self) -> str:
        return self.id[:8]


class Bookmark(SchemaBase):
    """A jj bookmark pointing at a change."""

    name: str = Field(min_length=1, description="Bookmark (branch) name")
    created: bool = Field(
        default=False,
        description="True if koshi created the bookmark during this invocation",
    )
