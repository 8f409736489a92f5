"""Main Textual application for chatting with Gemini."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Button, Footer, Header, Input

from .client import GeminiClient
from .config import load_config, resolve_api_key
from .controller import CompletionClient, ConversationController
from .logging_utils import configure_logging
from .screens import NoticeScreen
from .state import ConversationState
from .task_manager import TaskManager
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox
from .widgets.message import MessageBubble
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)

ACTIVE_SEND = "active_send"


class GeminiChatApp(App[None]):
    """Chat-bubble TUI that relays each prompt to the Gemini API."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #conversation {
        height: 1fr;
        padding: 0 1;
    }

    InputBox {
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }

    #status_bar {
        padding: 0 1;
        border-top: solid $panel;
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "send_message": "Send",
        "quit": "Quit",
        "scroll_up": "Scroll Up",
        "scroll_down": "Scroll Down",
        "copy_last_message": "Copy Last",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        client: CompletionClient | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.window_title = str(self.config["app"]["title"])
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )

        gemini_cfg = self.config["gemini"]
        self.model_name = str(gemini_cfg["model"])
        if client is None:
            client = GeminiClient(
                api_key=resolve_api_key(self.config),
                model=self.model_name,
                base_url=str(gemini_cfg["base_url"]),
                temperature=float(gemini_cfg["temperature"]),
                max_output_tokens=int(gemini_cfg["max_output_tokens"]),
                timeout=float(gemini_cfg["timeout"]),
            )
        self.client = client
        self.controller = ConversationController(self.client)
        self.controller.on_change(self._on_state_changed)
        self._task_manager = TaskManager()
        self._binding_specs = self._binding_specs_from_config(self.config)

        self._w_input: Input | None = None
        self._w_input_box: InputBox | None = None
        self._w_status: StatusBar | None = None
        self._w_conversation: ConversationView | None = None
        super().__init__()

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        yield Header()
        with Container(id="app-root"):
            yield ConversationView(id="conversation")
            yield InputBox()
            yield StatusBar(id="status_bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Cache widgets, register keybindings, render the greeting."""
        self.title = self.window_title
        self.sub_title = f"Model: {self.model_name}"
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )

        self._w_input = self.query_one("#message_input", Input)
        self._w_input_box = self.query_one(InputBox)
        self._w_status = self.query_one("#status_bar", StatusBar)
        self._w_conversation = self.query_one(ConversationView)

        await self._refresh_view()
        self._w_input.focus()

        notice = self.controller.configuration_notice()
        if notice is not None:
            LOGGER.warning(
                "app.config.missing_api_key",
                extra={"event": "app.config.missing_api_key"},
            )
            self.push_screen(NoticeScreen(notice, title="Configuration error"))

    def _on_state_changed(self, state: ConversationState) -> None:
        # The sent text must leave the input before the cycle can finish.
        if state.is_sending and self._w_input is not None:
            self._w_input.value = ""
        # Listener runs inside the send task; render on the app's message loop.
        self.call_later(self._refresh_view)

    async def _refresh_view(self) -> None:
        """Re-render the conversation and the input controls from state."""
        state = self.controller.state
        conversation = self._w_conversation or self.query_one(ConversationView)
        await conversation.sync_entries(state.entries)
        self._apply_bubble_colors(conversation)

        input_box = self._w_input_box or self.query_one(InputBox)
        input_box.set_sending(state.is_sending)
        if not state.is_sending:
            input_widget = self._w_input or self.query_one("#message_input", Input)
            input_widget.focus()
        self._update_status_bar()

    def _apply_bubble_colors(self, conversation: ConversationView) -> None:
        """Apply user-configured colours and border to every bubble."""
        ui_cfg = self.config["ui"]
        for bubble in conversation.bubbles:
            self._style_bubble(bubble, ui_cfg)

    @staticmethod
    def _style_bubble(bubble: MessageBubble, ui_cfg: dict[str, Any]) -> None:
        if bubble.is_user:
            bubble.styles.background = str(ui_cfg["user_message_color"])
        else:
            bubble.styles.background = str(ui_cfg["assistant_message_color"])
        bubble.styles.border = ("round", str(ui_cfg["border_color"]))

    def _update_status_bar(self) -> None:
        state = self.controller.state
        status_widget = self._w_status or self.query_one("#status_bar", StatusBar)
        status_widget.set_status(
            model=self.model_name,
            message_count=sum(1 for entry in state.entries if not entry.pending),
            sending=state.is_sending,
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        """Forward every edit to the controller as the live draft."""
        if event.input.id == "message_input":
            self.controller.update_draft(event.value)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            event.stop()
            self.start_send(event.value)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send_button":
            event.stop()
            input_widget = self._w_input or self.query_one("#message_input", Input)
            self.start_send(input_widget.value)

    async def action_send_message(self) -> None:
        """Action invoked by keybinding for sending a message."""
        input_widget = self._w_input or self.query_one("#message_input", Input)
        self.start_send(input_widget.value)

    def start_send(self, text: str) -> asyncio.Task[bool] | None:
        """Run one send cycle in the background so the UI keeps rendering.

        Returns the task, or ``None`` when a request is already in flight.
        """
        if self.controller.state.is_sending or self._task_manager.is_running(
            ACTIVE_SEND
        ):
            self.sub_title = "Busy. Wait for the current reply."
            return None
        task = asyncio.create_task(self.controller.submit_draft(text))
        self._task_manager.add(task, name=ACTIVE_SEND)
        return task

    async def wait_for_reply(self) -> None:
        """Wait until the in-flight send cycle (if any) has finished."""
        await self._task_manager.wait(ACTIVE_SEND)

    def action_scroll_up(self) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        conversation.scroll_page_up(animate=False)

    def action_scroll_down(self) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        conversation.scroll_page_down(animate=False)

    async def action_copy_last_message(self) -> None:
        """Copy the newest assistant reply to the clipboard."""
        content = self.controller.state.store.last_reply()
        if content is None:
            self.sub_title = "No assistant message available to copy."
            return
        self.copy_to_clipboard(content)
        self.sub_title = "Copied latest assistant message."

    async def on_unmount(self) -> None:
        """Cancel the in-flight request and release the HTTP client."""
        await self._task_manager.cancel_all()
        aclose = getattr(self.client, "aclose", None)
        if aclose is not None:
            await aclose()
