"""
Conversation Session Controller

Owns the conversation state, runs the request/response cycle against the
inference endpoint and writes every history change through to the store.

Usage:
    session = ConversationSession(client=client, store=store)
    session.subscribe(render)
    session.initialize()

    session.set_draft("def f(): pass")
    await session.submit()
"""

import logging
from collections.abc import Callable

from leetaid.conversations.models import Message
from leetaid.conversations.store import ConversationStore
from leetaid.endpoint.base import BaseInferenceClient
from leetaid.endpoint.models import EndpointError
from leetaid.session.state import ConversationState, ConversationView

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again."

Listener = Callable[[ConversationView], None]


class ConversationSession:
    """
    Single-session conversation controller.

    Submissions are admitted one at a time: while a request is in flight
    ``submit()`` is a no-op, but the draft can still be edited. Listeners are
    notified with a fresh ConversationView after every mutation.
    """

    def __init__(self, client: BaseInferenceClient, store: ConversationStore):
        """
        Initialize session controller.

        Args:
            client: Inference endpoint client
            store: Persistent conversation store
        """
        self._client = client
        self._store = store
        self._state = ConversationState()
        self._listeners: list[Listener] = []

    @property
    def view(self) -> ConversationView:
        """Current view-model."""
        return self._state.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def initialize(self) -> None:
        """Hydrate history from the store and reset transient state."""
        self._state = ConversationState(history=self._store.load())
        logger.info(
            f"Session initialized with {len(self._state.history)} stored message(s)",
            extra={"messages": len(self._state.history)},
        )
        self._notify()

    def set_draft(self, text: str) -> None:
        """Replace the draft input verbatim."""
        self._state.draft_input = text
        self._notify()

    async def submit(self) -> bool:
        """
        Submit the current draft to the inference endpoint.

        The user turn is appended and persisted before the request goes out;
        the endpoint receives the history as it stood before that append. A
        failed request leaves the user turn in place and sets ``last_error``.

        Returns:
            True if the submission was admitted, False if it was a no-op
            (blank draft or a request already in flight)
        """
        state = self._state
        user_input = state.draft_input.strip()
        if not user_input or state.is_pending:
            return False

        prior_history = list(state.history)
        state.history.append(Message(role="user", content=user_input))
        state.draft_input = ""
        state.is_pending = True
        state.last_error = None
        try:
            self._store.save(state.history)
            self._notify()
            reply = await self._client.send(user_input, prior_history)
        except EndpointError as e:
            logger.warning(
                f"Submission failed: {e}",
                extra={"status_code": e.status_code, "context": e.context},
            )
            state.last_error = GENERIC_ERROR_MESSAGE
        except Exception as e:
            logger.warning(f"Submission failed unexpectedly: {e}", exc_info=True)
            state.last_error = GENERIC_ERROR_MESSAGE
        else:
            state.history.append(Message(role="assistant", content=reply))
            self._store.save(state.history)
        finally:
            state.is_pending = False

        self._notify()
        return True

    def clear(self) -> None:
        """Empty the history, drop the last error and purge the store."""
        self._state.history = []
        self._state.last_error = None
        self._store.clear()
        logger.info("Conversation cleared")
        self._notify()

    def _notify(self) -> None:
        view = self._state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception as e:
                logger.warning(f"Failed to notify listener {listener!r}: {e}", exc_info=True)
