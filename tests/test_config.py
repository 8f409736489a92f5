"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from gemini_chat.config import (
    API_KEY_ENV_VAR,
    DEFAULT_CONFIG,
    load_config,
    resolve_api_key,
)


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config = load_config(config_path=config_path)
            self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])
            self.assertEqual(config["gemini"]["model"], "gemini-1.5-flash")
            self.assertEqual(config["gemini"]["temperature"], 0.7)
            self.assertEqual(config["gemini"]["max_output_tokens"], 500)
            self.assertEqual(config["gemini"]["api_key"], "")
            self.assertEqual(
                config["keybinds"]["send_message"],
                DEFAULT_CONFIG["keybinds"]["send_message"],
            )
            self.assertEqual(
                config["logging"]["level"], DEFAULT_CONFIG["logging"]["level"]
            )

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[gemini]
model = "gemini-2.0-flash"
api_key = "  abc123  "

[ui]
user_message_color = "#112233"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["gemini"]["model"], "gemini-2.0-flash")
            self.assertEqual(config["gemini"]["api_key"], "abc123")
            self.assertEqual(config["ui"]["user_message_color"], "#112233")
            self.assertEqual(
                config["gemini"]["base_url"], DEFAULT_CONFIG["gemini"]["base_url"]
            )

    def test_invalid_values_fallback_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[gemini]
temperature = 7.5
base_url = "ftp://example.com"

[ui]
border_color = "blue"
                """.strip(),
                encoding="utf-8",
            )
            with self.assertLogs("gemini_chat.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_unparseable_toml_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[gemini\nmodel = ", encoding="utf-8")
            with self.assertLogs("gemini_chat.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_blank_keybind_is_kept_as_unbound(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                '[keybinds]\ncopy_last_message = "  "\n', encoding="utf-8"
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["keybinds"]["copy_last_message"], "")


class ResolveApiKeyTests(unittest.TestCase):
    """Credential precedence: environment first, then config."""

    def test_environment_wins(self) -> None:
        config = {"gemini": {"api_key": "from-config"}}
        key = resolve_api_key(config, environ={API_KEY_ENV_VAR: " from-env "})
        self.assertEqual(key, "from-env")

    def test_config_used_when_environment_blank(self) -> None:
        config = {"gemini": {"api_key": "from-config"}}
        self.assertEqual(
            resolve_api_key(config, environ={API_KEY_ENV_VAR: ""}), "from-config"
        )

    def test_absent_everywhere_is_empty(self) -> None:
        self.assertEqual(resolve_api_key({"gemini": {}}, environ={}), "")
        self.assertEqual(resolve_api_key({}, environ={}), "")


if __name__ == "__main__":
    unittest.main()
