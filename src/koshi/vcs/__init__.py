"""Version control adapters."""

from .jujutsu import DEFAULT_BOOKMARK_TEMPLATE, JujutsuRepository

__all__ = ["DEFAULT_BOOKMARK_TEMPLATE", "JujutsuRepository"]
