"""Modal screens."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class NoticeScreen(ModalScreen[None]):
    """Blocking modal that shows a titled notice and closes on Escape/Enter/OK."""

    CSS = """
    NoticeScreen {
        align: center middle;
    }

    #notice-dialog {
        width: 70;
        height: auto;
        max-height: 20;
        padding: 1 2;
        border: round $error;
        background: $surface;
    }

    #notice-title {
        text-style: bold;
        padding-bottom: 1;
    }

    #notice-body {
        height: auto;
    }

    #notice-actions {
        height: 3;
        align: right middle;
    }
    """

    def __init__(self, text: str, title: str = "Error") -> None:
        super().__init__()
        self._title = title
        self._text = text

    def compose(self) -> ComposeResult:
        with Container(id="notice-dialog"):
            yield Static(self._title, id="notice-title")
            yield Static(self._text, id="notice-body")
            with Container(id="notice-actions"):
                yield Button("OK", id="notice-ok", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "notice-ok":
            event.stop()
            self.dismiss(None)

    def on_key(self, event: Any) -> None:  # noqa: ANN401
        key = str(getattr(event, "key", "")).lower()
        if key in {"escape", "enter"}:
            event.stop()
            self.dismiss(None)
