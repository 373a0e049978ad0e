"""Conversation session controller and its state."""

from .controller import GENERIC_ERROR_MESSAGE, ConversationSession, Listener
from .state import ConversationState, ConversationView

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "ConversationSession",
    "ConversationState",
    "ConversationView",
    "Listener",
]
