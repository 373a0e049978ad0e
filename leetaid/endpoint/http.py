"""
HTTP Inference Client

Implementation of BaseInferenceClient that POSTs the conversation as JSON.
"""

import logging

import httpx

from leetaid.conversations.models import Message
from leetaid.endpoint.base import BaseInferenceClient
from leetaid.endpoint.models import EndpointError, InferenceRequest, InferenceResponse

logger = logging.getLogger(__name__)


class HttpInferenceClient(BaseInferenceClient):
    """
    Inference client backed by ``httpx.AsyncClient``.

    Sends ``{userInput, conversationHistory}`` and reads ``{response}`` back.
    Every failure is reported as EndpointError.
    """

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            url: Endpoint URL the conversation is POSTed to
            timeout: Request timeout in seconds (None = no timeout)
            client: Pre-built httpx client (tests, custom transports)
        """
        self.url = url
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

        logger.info(
            f"Inference client initialized for {url}",
            extra={"url": url, "timeout": timeout},
        )

    async def send(self, user_input: str, history: list[Message]) -> str:
        self._log_request(user_input, history)
        payload = InferenceRequest(
            user_input=user_input,
            conversation_history=list(history),
        ).to_payload()

        try:
            response = await self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise EndpointError(
                f"Request to inference endpoint failed: {e}",
                context={"url": self.url, "error_type": type(e).__name__},
            ) from e
        except Exception as e:
            # The transport stack can raise outside httpx's hierarchy,
            # e.g. an OverflowError for an out-of-range port.
            raise EndpointError(
                f"Unexpected transport failure: {e}",
                context={"url": self.url, "error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            raise EndpointError(
                "Inference endpoint returned a non-success status",
                status_code=response.status_code,
                context={"url": self.url},
            )

        try:
            reply = InferenceResponse.model_validate(response.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError both land here
            raise EndpointError(
                "Inference endpoint returned a malformed body",
                status_code=response.status_code,
                context={"url": self.url, "error_type": type(e).__name__},
            ) from e

        logger.debug(
            "Inference response",
            extra={"status_code": response.status_code, "reply_chars": len(reply.response)},
        )
        return reply.response

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
