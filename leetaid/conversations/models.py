"""
Conversation Models

Pydantic models for the turns that make up a conversation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """Single turn in a conversation."""

    role: Role = Field(
        ...,
        description="Who contributed the turn"
    )
    content: str = Field(
        ...,
        description="Turn text, may embed fenced code regions"
    )

    model_config = ConfigDict(frozen=True)


MessageList = TypeAdapter(list[Message])


def to_records(history: list[Message]) -> list[dict[str, str]]:
    """Convert messages to plain ``{role, content}`` records."""
    return [{"role": message.role, "content": message.content} for message in history]
