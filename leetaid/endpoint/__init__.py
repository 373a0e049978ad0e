"""Clients for the remote inference endpoint."""

from .base import BaseInferenceClient
from .http import HttpInferenceClient
from .models import EndpointError, InferenceRequest, InferenceResponse

__all__ = [
    "BaseInferenceClient",
    "EndpointError",
    "HttpInferenceClient",
    "InferenceRequest",
    "InferenceResponse",
]
