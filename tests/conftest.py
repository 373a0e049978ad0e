"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging

import pytest

from leetaid.conversations.models import Message
from leetaid.conversations.store import ConversationStore
from leetaid.endpoint.base import BaseInferenceClient

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Configure logging for tests.

    Sets up log capture and configures log levels.
    This fixture runs automatically for all tests.
    """
    caplog.set_level(logging.DEBUG)
    yield


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """
    Keep settings and storage away from the real environment.

    Ignores the project .env, points storage at a temp file and clears
    the settings cache around every test.
    """
    from leetaid.config import get_settings

    get_settings.cache_clear()
    monkeypatch.setenv("LEETAID_ENV_SOURCE", "environment")
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "storage.json"))
    monkeypatch.delenv("ENDPOINT_URL", raising=False)
    monkeypatch.delenv("ENDPOINT_TIMEOUT", raising=False)
    yield
    get_settings.cache_clear()


# ============================================================================
# Conversation Fixtures
# ============================================================================


@pytest.fixture
def storage_path(tmp_path):
    """Path of the JSON storage file used by the store fixture."""
    return tmp_path / "leetaid" / "storage.json"


@pytest.fixture
def store(storage_path) -> ConversationStore:
    """Conversation store backed by a temp file."""
    return ConversationStore(storage_path)


@pytest.fixture
def sample_history() -> list[Message]:
    """Two completed turns."""
    return [
        Message(role="user", content="def f(): pass"),
        Message(role="assistant", content="Consider a base case."),
    ]


class FakeInferenceClient(BaseInferenceClient):
    """
    Scriptable inference client.

    Replies are consumed in order; an exception instance in the queue is
    raised instead of returned. Every call is recorded.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls: list[tuple[str, list[Message]]] = []
        self.closed = False

    async def send(self, user_input: str, history: list[Message]) -> str:
        self.calls.append((user_input, list(history)))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client():
    """
    Factory for scripted inference clients.

    Usage:
        def test_something(fake_client):
            client = fake_client("Consider a base case.")
    """

    def _create(*replies):
        return FakeInferenceClient(replies)

    return _create
