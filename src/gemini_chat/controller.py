"""Conversation controller: the send cycle and its reconciliation."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Protocol

from .exceptions import GeminiChatError
from .message_store import Author, ChatEntry
from .state import ConversationState, SendPhase

LOGGER = logging.getLogger(__name__)

GREETING = "Hi! I'm your Gemini assistant. How can I help?"
APOLOGY = "Sorry, I couldn't reach Gemini. Check your connection or API key."
CONFIGURATION_NOTICE = (
    "API key not found. Set GEMINI_API_KEY or gemini.api_key in config.toml."
)

StateListener = Callable[[ConversationState], None]


class CompletionClient(Protocol):
    """Anything that turns one prompt into one reply."""

    @property
    def has_credential(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


class ConversationController:
    """Drive IDLE -> SENDING -> (RESOLVED | FAILED) -> IDLE over a ConversationState."""

    def __init__(
        self,
        client: CompletionClient,
        state: ConversationState | None = None,
        greeting: str = GREETING,
        apology: str = APOLOGY,
    ) -> None:
        self.client = client
        self.apology = apology
        self._listeners: list[StateListener] = []
        if state is None:
            state = ConversationState()
            state.store.append(
                ChatEntry(
                    id=state.store.next_id(), text=greeting, author=Author.ASSISTANT
                )
            )
        self.state = state

    def on_change(self, callback: StateListener) -> None:
        """Register a callback invoked after every state mutation."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback(self.state)

    def _transition(self, new_phase: SendPhase) -> None:
        old_phase = self.state.phase
        self.state.phase = new_phase
        LOGGER.info(
            "app.state.transition",
            extra={
                "event": "app.state.transition",
                "from_state": old_phase.value,
                "to_state": new_phase.value,
            },
        )

    def configuration_notice(self) -> str | None:
        """Return the blocking notice text when no credential is configured."""
        if self.client.has_credential:
            return None
        return CONFIGURATION_NOTICE

    def update_draft(self, text: str) -> None:
        """Record the text being composed. Ignored while a send is outstanding."""
        if self.state.is_sending:
            return
        if text == self.state.input_draft:
            return
        self.state.input_draft = text
        self._notify()

    def begin_send(self) -> str | None:
        """Accept the current draft and enter SENDING.

        Returns the trimmed prompt, or ``None`` when the draft is blank or a
        request is already in flight. Nothing is mutated in the latter case.
        """
        if self.state.is_sending:
            LOGGER.debug(
                "chat.send.rejected",
                extra={"event": "chat.send.rejected", "reason": "busy"},
            )
            return None
        prompt = self.state.input_draft.strip()
        if not prompt:
            return None

        store = self.state.store
        store.append(ChatEntry(id=store.next_id(), text=prompt, author=Author.USER))
        self.state.input_draft = ""
        store.append(
            ChatEntry(
                id=store.next_id(), text="", author=Author.ASSISTANT, pending=True
            )
        )
        self._transition(SendPhase.SENDING)
        self._notify()
        return prompt

    async def submit_draft(self, text: str | None = None) -> bool:
        """Send the draft (or ``text``) and reconcile the outcome.

        Returns True when the send was accepted. Client failures never
        propagate; they become an apology entry instead. Only cancellation
        escapes, after the pending entry is removed.
        """
        if text is not None:
            self.update_draft(text)
        prompt = self.begin_send()
        if prompt is None:
            return False

        reply: str | None = None
        try:
            reply = await self.client.complete(prompt)
            self._transition(SendPhase.RESOLVED)
        except GeminiChatError as exc:
            LOGGER.warning(
                "chat.request.failed",
                extra={
                    "event": "chat.request.failed",
                    "error_type": type(exc).__name__,
                    "status_code": getattr(exc, "status_code", None),
                },
                exc_info=exc,
            )
            self._transition(SendPhase.FAILED)
        except Exception as exc:  # noqa: BLE001 - any client failure becomes an apology.
            LOGGER.error(
                "chat.request.failed",
                extra={
                    "event": "chat.request.failed",
                    "error_type": type(exc).__name__,
                    "status_code": None,
                },
                exc_info=exc,
            )
            self._transition(SendPhase.FAILED)
        finally:
            self._finish(reply)
        return True

    def _finish(self, reply: str | None) -> None:
        store = self.state.store
        pending = store.pending_entry
        if pending is not None:
            store.remove_by_id(pending.id)
        if self.state.phase is SendPhase.RESOLVED and reply is not None:
            store.append(
                ChatEntry(id=store.next_id(), text=reply, author=Author.ASSISTANT)
            )
        elif self.state.phase is SendPhase.FAILED:
            store.append(
                ChatEntry(id=store.next_id(), text=self.apology, author=Author.ASSISTANT)
            )
        self._transition(SendPhase.IDLE)
        self._notify()
