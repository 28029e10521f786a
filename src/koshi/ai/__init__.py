"""AI conversationalist adapters."""

from .aichat import AIChatConversationalist

__all__ = ["AIChatConversationalist"]
