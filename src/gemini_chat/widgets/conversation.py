"""Scrollable conversation view widget."""

from __future__ import annotations

from collections.abc import Sequence

from textual.containers import VerticalScroll

from ..message_store import ChatEntry
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that mirrors an ordered sequence of entries."""

    @property
    def bubbles(self) -> list[MessageBubble]:
        return list(self.query(MessageBubble))

    def rendered_ids(self) -> list[int]:
        """Return the entry ids currently on screen, top to bottom."""
        return [bubble.entry_id for bubble in self.bubbles]

    async def sync_entries(self, entries: Sequence[ChatEntry]) -> None:
        """Make the mounted bubbles match ``entries``.

        Bubbles are keyed by entry id, so calling this again with the same
        entries leaves the view untouched. Scrolls to the newest entry whenever
        a bubble was added or removed, including a pending bubble swapped
        for its reply.
        """
        wanted = {entry.id for entry in entries}
        before = self.rendered_ids()

        for bubble in self.bubbles:
            if bubble.entry_id not in wanted:
                await bubble.remove()

        present = set(self.rendered_ids())
        new_bubbles = [
            MessageBubble(entry, id=f"entry-{entry.id}")
            for entry in entries
            if entry.id not in present
        ]
        if new_bubbles:
            await self.mount_all(new_bubbles)

        if self.rendered_ids() != before:
            self.scroll_end(animate=True)
