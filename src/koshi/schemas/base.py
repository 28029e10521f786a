"""Base schema class with a factory for githubkit response models."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for all koshi schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
    )

    @classmethod
    def from_api(cls, data: Any) -> Self:
        """
        Factory method to create a schema instance from a githubkit model.

        githubkit returns its own pydantic models; dumping them first keeps
        our schemas independent of githubkit's generated classes.

        Args:
            data: githubkit model instance or plain dict

        Returns:
            Schema instance
        """
        if hasattr(data, "model_dump"):
            data = data.model_dump()
        return cls.model_validate(data)
