"""
Conversation State

In-memory state owned by the session controller and the immutable view of
it handed to listeners.
"""

from dataclasses import dataclass, field

from leetaid.conversations.models import Message


@dataclass
class ConversationState:
    """
    Mutable state for the current session.

    Tracks:
    - History: every turn, in insertion order
    - Draft input: text typed but not yet submitted (never persisted)
    - Pending flag: true while the single allowed request is in flight
    - Last error: user-facing failure text, cleared on each submission
    """

    history: list[Message] = field(default_factory=list)
    draft_input: str = ""
    is_pending: bool = False
    last_error: str | None = None

    def snapshot(self) -> "ConversationView":
        return ConversationView(
            messages=tuple(self.history),
            draft=self.draft_input,
            is_pending=self.is_pending,
            last_error=self.last_error,
        )


@dataclass(frozen=True)
class ConversationView:
    """Read-only view-model consumed by the rendering layer."""

    messages: tuple[Message, ...] = ()
    draft: str = ""
    is_pending: bool = False
    last_error: str | None = None

    @property
    def can_submit(self) -> bool:
        """Whether the submit action should be enabled."""
        return not self.is_pending and bool(self.draft.strip())
