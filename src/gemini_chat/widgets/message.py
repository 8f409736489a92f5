"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import LoadingIndicator, Static

from ..message_store import Author, ChatEntry

PENDING_CAPTION = "Gemini is thinking..."


class MessageBubble(Vertical):
    """Render a single chat entry; pending entries show a spinner and caption."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        width: 1fr;
        padding: 0 2;
        border: round $panel;
    }
    MessageBubble.role-user {
        margin: 1 0 1 12;
        background: $primary;
    }
    MessageBubble.role-assistant {
        margin: 1 12 1 0;
        background: $surface;
    }
    MessageBubble > #header-block {
        text-style: bold;
    }
    MessageBubble > #content-block {
        height: auto;
    }
    MessageBubble > #pending-row {
        height: 1;
    }
    MessageBubble #pending-spinner {
        width: 4;
        height: 1;
        min-height: 1;
    }
    MessageBubble #pending-caption {
        margin-left: 1;
        color: $text-muted;
        text-style: italic;
    }
    """

    def __init__(self, entry: ChatEntry, **kwargs: Any) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.entry = entry
        self.add_class(f"role-{entry.author.value}")
        if entry.pending:
            self.add_class("pending")

    @property
    def entry_id(self) -> int:
        return self.entry.id

    @property
    def is_user(self) -> bool:
        return self.entry.author is Author.USER

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return "You" if self.is_user else "Gemini"

    def compose(self) -> ComposeResult:
        yield Static(self.role_prefix, id="header-block")
        if self.entry.pending:
            with Horizontal(id="pending-row"):
                yield LoadingIndicator(id="pending-spinner")
                yield Static(PENDING_CAPTION, id="pending-caption")
        else:
            yield Static(Markdown(self.entry.text.rstrip()), id="content-block")
