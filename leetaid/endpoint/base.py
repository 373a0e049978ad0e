"""
Base Inference Client

Abstract base class for clients of the remote inference endpoint.
"""

import logging
from abc import ABC, abstractmethod

from leetaid.conversations.models import Message

logger = logging.getLogger(__name__)


class BaseInferenceClient(ABC):
    """
    Abstract base class for inference endpoint clients.

    The session controller only depends on this interface, so transports can
    be swapped (or faked in tests) without touching conversation logic.
    """

    @abstractmethod
    async def send(self, user_input: str, history: list[Message]) -> str:
        """
        Submit one user turn and return the assistant reply.

        Args:
            user_input: Text the user is submitting now
            history: Every turn that precedes ``user_input``

        Returns:
            Assistant reply text, verbatim

        Raises:
            EndpointError: On any transport or payload failure
        """
        pass  # pragma: no cover - abstract method

    async def aclose(self) -> None:
        """Release transport resources."""
        return None

    def _log_request(self, user_input: str, history: list[Message]) -> None:
        """Log request details for debugging."""
        logger.debug(
            "Inference request",
            extra={
                "client": type(self).__name__,
                "input_chars": len(user_input),
                "history_length": len(history),
            },
        )
