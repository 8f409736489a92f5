"""Tests for the Textual app wiring around the conversation controller."""

from __future__ import annotations

import asyncio
from copy import deepcopy
import logging
import unittest

from gemini_chat.config import DEFAULT_CONFIG
from gemini_chat.controller import APOLOGY, CONFIGURATION_NOTICE
from gemini_chat.exceptions import ConfigurationError, TransportError

try:
    from textual.widgets import Button, Input

    from gemini_chat.app import GeminiChatApp
    from gemini_chat.screens import NoticeScreen
    from gemini_chat.widgets.conversation import ConversationView
except ModuleNotFoundError:
    GeminiChatApp = None  # type: ignore[assignment,misc]


class FakeClient:
    """Completion client that can be held open to observe the pending state."""

    def __init__(
        self,
        reply: str = "Hi there!",
        error: Exception | None = None,
        has_credential: bool = True,
    ) -> None:
        self.reply = reply
        self.error = error
        self.has_credential = has_credential
        self.prompts: list[str] = []
        self.release = asyncio.Event()
        self.release.set()
        self.started = asyncio.Event()
        self.closed = False

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed = True


def _config() -> dict:
    config = deepcopy(DEFAULT_CONFIG)
    config["logging"]["structured"] = False
    return config


@unittest.skipIf(GeminiChatApp is None, "textual is not installed")
class AppBindingTests(unittest.TestCase):
    """Validate binding derivation from config."""

    def test_binding_specs_created_from_keybinds(self) -> None:
        bindings = GeminiChatApp._binding_specs_from_config(DEFAULT_CONFIG)  # type: ignore[union-attr]
        self.assertEqual(
            len(bindings), len(GeminiChatApp.DEFAULT_ACTION_DESCRIPTIONS)  # type: ignore[union-attr]
        )
        self.assertEqual(bindings[0].action, "send_message")
        self.assertEqual(bindings[0].key, "ctrl+enter")

    def test_blank_keybind_is_not_registered(self) -> None:
        config = _config()
        config["keybinds"]["copy_last_message"] = " "
        bindings = GeminiChatApp._binding_specs_from_config(config)  # type: ignore[union-attr]
        actions = {binding.action for binding in bindings}
        self.assertNotIn("copy_last_message", actions)


@unittest.skipIf(GeminiChatApp is None, "textual is not installed")
class AppRuntimeTests(unittest.IsolatedAsyncioTestCase):
    """Drive the app through a pilot and inspect rendered bubbles."""

    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    async def _type_and_submit(self, app, pilot, text: str) -> None:
        input_widget = app.query_one("#message_input", Input)
        input_widget.focus()
        input_widget.value = text
        await pilot.pause()
        await pilot.press("enter")
        await pilot.pause()

    async def test_greeting_rendered_on_mount(self) -> None:
        app = GeminiChatApp(config=_config(), client=FakeClient())
        async with app.run_test() as pilot:
            await pilot.pause()
            view = app.query_one(ConversationView)
            self.assertEqual(len(view.bubbles), 1)
            self.assertFalse(isinstance(app.screen, NoticeScreen))

    async def test_submit_renders_user_and_reply(self) -> None:
        client = FakeClient()
        app = GeminiChatApp(config=_config(), client=client)
        async with app.run_test() as pilot:
            await self._type_and_submit(app, pilot, "Hello")
            await app.wait_for_reply()
            await pilot.pause()

            self.assertEqual(client.prompts, ["Hello"])
            view = app.query_one(ConversationView)
            entries = app.controller.state.entries
            self.assertEqual(view.rendered_ids(), [entry.id for entry in entries])
            self.assertEqual(entries[-1].text, "Hi there!")
            self.assertEqual(app.query_one("#message_input", Input).value, "")
            self.assertFalse(app.query_one("#message_input", Input).disabled)

    async def test_pending_state_disables_input(self) -> None:
        client = FakeClient()
        client.release.clear()
        app = GeminiChatApp(config=_config(), client=client)
        async with app.run_test() as pilot:
            await self._type_and_submit(app, pilot, "Hello")
            await client.started.wait()
            await pilot.pause()

            view = app.query_one(ConversationView)
            self.assertEqual(len(view.bubbles), 3)
            self.assertIn("pending", view.bubbles[-1].classes)
            self.assertTrue(app.query_one("#message_input", Input).disabled)
            button = app.query_one("#send_button", Button)
            self.assertTrue(button.disabled)
            self.assertIsNone(app.start_send("again"))

            client.release.set()
            await app.wait_for_reply()
            await pilot.pause()
            self.assertNotIn("pending", view.bubbles[-1].classes)
            self.assertFalse(button.disabled)
            self.assertEqual(client.prompts, ["Hello"])

    async def test_failure_renders_apology(self) -> None:
        client = FakeClient(error=TransportError("down", status_code=500))
        app = GeminiChatApp(config=_config(), client=client)
        async with app.run_test() as pilot:
            await self._type_and_submit(app, pilot, "Hello")
            await app.wait_for_reply()
            await pilot.pause()
            self.assertEqual(app.controller.state.entries[-1].text, APOLOGY)
            self.assertEqual(len(app.query_one(ConversationView).bubbles), 3)

    async def test_fast_failure_clears_input_and_enter_does_not_resend(self) -> None:
        client = FakeClient(error=ConfigurationError("no key"))
        app = GeminiChatApp(config=_config(), client=client)
        async with app.run_test() as pilot:
            await self._type_and_submit(app, pilot, "Hello")
            await app.wait_for_reply()
            await pilot.pause()
            input_widget = app.query_one("#message_input", Input)
            self.assertEqual(input_widget.value, "")
            self.assertEqual(app.controller.state.input_draft, "")

            await pilot.press("enter")
            await pilot.pause()
            await app.wait_for_reply()
            await pilot.pause()
            self.assertEqual(client.prompts, ["Hello"])
            self.assertEqual(len(app.controller.state.entries), 3)

    async def test_missing_credential_shows_blocking_notice(self) -> None:
        client = FakeClient(has_credential=False)
        app = GeminiChatApp(config=_config(), client=client)
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertIsInstance(app.screen, NoticeScreen)
            self.assertEqual(app.controller.configuration_notice(), CONFIGURATION_NOTICE)
            self.assertEqual(client.prompts, [])


if __name__ == "__main__":
    unittest.main()
