"""Send-cycle state machine and the conversation state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .message_store import ChatEntry, MessageStore


class SendPhase(str, Enum):
    """Finite state machine for a single send cycle."""

    IDLE = "IDLE"
    SENDING = "SENDING"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"


@dataclass
class ConversationState:
    """Everything the view needs to render one conversation.

    Owned and mutated by the controller; widgets only read it.
    """

    store: MessageStore = field(default_factory=MessageStore)
    input_draft: str = ""
    phase: SendPhase = SendPhase.IDLE

    @property
    def entries(self) -> tuple[ChatEntry, ...]:
        return self.store.all()

    @property
    def is_sending(self) -> bool:
        return self.phase is SendPhase.SENDING

    def can_send(self) -> bool:
        """Return True when the current draft may be submitted."""
        return not self.is_sending and bool(self.input_draft.strip())
