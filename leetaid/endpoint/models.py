"""
Endpoint Request and Response Models

Pydantic models for the wire format spoken by the inference endpoint.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from leetaid.conversations.models import Message


class InferenceRequest(BaseModel):
    """Body POSTed to the inference endpoint."""

    user_input: str = Field(
        ...,
        alias="userInput",
        description="Text the user is submitting now",
    )
    conversation_history: list[Message] = Field(
        default_factory=list,
        alias="conversationHistory",
        description="All turns prior to user_input",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class InferenceResponse(BaseModel):
    """Successful endpoint reply; only ``response`` is read."""

    response: str = Field(
        ...,
        description="Assistant reply, used verbatim"
    )

    model_config = ConfigDict(extra="ignore", strict=True)


class EndpointError(Exception):
    """
    Raised when a submission cannot be completed.

    Covers every failure uniformly: unreachable endpoint, non-success status,
    non-JSON body and missing or mistyped ``response`` field.

    Attributes:
        message: Error description (for logs, not for the user)
        status_code: HTTP status when a response was received
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message
