"""Input row containing the message field and send button."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Input

INPUT_PLACEHOLDER = "Type a message..."


class InputBox(Horizontal):
    """Text entry control; disabled while a request is outstanding."""

    DEFAULT_CSS = """
    InputBox {
        height: auto;
    }
    InputBox #message_input {
        width: 1fr;
    }
    InputBox #send_button {
        margin-left: 1;
        min-width: 12;
    }
    """

    def compose(self) -> ComposeResult:
        yield Input(placeholder=INPUT_PLACEHOLDER, id="message_input")
        yield Button("Send", id="send_button", variant="primary")

    def set_sending(self, sending: bool) -> None:
        """Toggle the busy state of the input and button."""
        input_widget = self.query_one("#message_input", Input)
        send_button = self.query_one("#send_button", Button)
        input_widget.disabled = sending
        send_button.disabled = sending
        send_button.label = "Sending" if sending else "Send"
