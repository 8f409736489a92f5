"""Status bar widget for model and conversation telemetry."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import Label, Static


class StatusBar(Static):
    """Render compact runtime status information.

    Segments (left to right):
        Model: gemini-1.5-flash  |  Messages: 4  |  idle
    """

    DEFAULT_CSS = """
    StatusBar {
        layout: horizontal;
        height: auto;
    }
    StatusBar Label {
        margin-right: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("Model: -", id="status_model")
        yield Label("|", id="status_sep1")
        yield Label("Messages: 0", id="status_messages")
        yield Label("|", id="status_sep2")
        yield Label("idle", id="status_phase")

    def set_status(self, *, model: str, message_count: int, sending: bool) -> None:
        """Update all status segment labels."""
        self.query_one("#status_model", Label).update(f"Model: {model}")
        self.query_one("#status_messages", Label).update(f"Messages: {message_count}")
        self.query_one("#status_phase", Label).update("sending" if sending else "idle")
