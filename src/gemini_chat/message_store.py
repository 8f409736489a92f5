"""Ordered in-memory storage for chat entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import itertools


class Author(str, Enum):
    """Who wrote a chat entry."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatEntry:
    """One message bubble's worth of data."""

    id: int
    text: str
    author: Author
    pending: bool = False


class MessageStore:
    """Keep chat entries in display order (oldest first)."""

    def __init__(self) -> None:
        self._entries: list[ChatEntry] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    def next_id(self) -> int:
        """Allocate an id that no entry in this store has used."""
        return next(self._ids)

    def append(self, entry: ChatEntry) -> None:
        """Append an entry; a duplicate id is a programming error."""
        if any(existing.id == entry.id for existing in self._entries):
            raise ValueError(f"Duplicate chat entry id: {entry.id}")
        self._entries.append(entry)

    def remove_by_id(self, entry_id: int) -> bool:
        """Remove the entry with ``entry_id``; return True when one was removed."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                return True
        return False

    def all(self) -> tuple[ChatEntry, ...]:
        """Return a read-only snapshot of every entry."""
        return tuple(self._entries)

    @property
    def pending_entry(self) -> ChatEntry | None:
        for entry in self._entries:
            if entry.pending:
                return entry
        return None

    def last_reply(self) -> str | None:
        """Return the text of the newest settled assistant entry."""
        for entry in reversed(self._entries):
            if entry.author is Author.ASSISTANT and not entry.pending:
                return entry.text
        return None
