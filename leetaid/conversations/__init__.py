"""Conversation messages, persistence and content formatting."""

from .formatting import ContentSegment, code_language, split_content
from .models import Message, Role
from .store import ConversationStore

__all__ = [
    "ContentSegment",
    "ConversationStore",
    "Message",
    "Role",
    "code_language",
    "split_content",
]
