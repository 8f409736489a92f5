"""Top-level package for gemini-chat-tui."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import GeminiChatApp
    from .client import GeminiClient
    from .config import ensure_config_dir, load_config
    from .controller import ConversationController
    from .exceptions import (
        ConfigurationError,
        ConfigValidationError,
        GeminiChatError,
        MalformedResponseError,
        TransportError,
    )
    from .message_store import Author, ChatEntry, MessageStore
    from .state import ConversationState, SendPhase

__all__ = [
    "Author",
    "ChatEntry",
    "ConfigValidationError",
    "ConfigurationError",
    "ConversationController",
    "ConversationState",
    "GeminiChatApp",
    "GeminiChatError",
    "GeminiClient",
    "MalformedResponseError",
    "MessageStore",
    "SendPhase",
    "TransportError",
    "ensure_config_dir",
    "load_config",
]

_LAZY_MODULES: dict[str, str] = {
    "Author": ".message_store",
    "ChatEntry": ".message_store",
    "MessageStore": ".message_store",
    "ConversationState": ".state",
    "SendPhase": ".state",
    "GeminiClient": ".client",
    "ConversationController": ".controller",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ConfigValidationError": ".exceptions",
    "ConfigurationError": ".exceptions",
    "GeminiChatError": ".exceptions",
    "MalformedResponseError": ".exceptions",
    "TransportError": ".exceptions",
    "GeminiChatApp": ".app",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep UI dependencies optional at import time."""
    module_name = _LAZY_MODULES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
