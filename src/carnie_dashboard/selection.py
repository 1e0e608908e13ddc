"""Cursor and scroll tracking for one drawer list.

The cursor is remembered by issue id, never by row number: each refresh
yields a brand new ordered list, so the only way to keep the user on "the
issue they were looking at" is to look that id up again.
"""

from dataclasses import dataclass
from typing import List, Optional

from .entries import Entry, index_of


@dataclass
class ListSelection:
    selected_id: str = ""
    offset: int = 0

    def reset(self):
        # type: () -> None
        self.selected_id = ""
        self.offset = 0

    def copy(self):
        # type: () -> ListSelection
        return ListSelection(selected_id=self.selected_id, offset=self.offset)

    def index_in(self, entries):
        # type: (List[Entry]) -> int
        idx = index_of(entries, self.selected_id)
        return idx if idx is not None else 0

    def selected_entry(self, entries):
        # type: (List[Entry]) -> Optional[Entry]
        if not entries:
            return None
        return entries[self.index_in(entries)]

    def move(self, entries, delta):
        # type: (List[Entry], int) -> None
        if not entries:
            self.reset()
            return
        target = self.index_in(entries) + delta
        target = max(0, min(target, len(entries) - 1))
        self.selected_id = entries[target].issue.id

    def relocate(self, entries):
        # type: (List[Entry]) -> None
        """Re-find the selected id in a rebuilt entry list.

        Falls back to the first row (and the top of the list) when the id
        vanished, either because the issue is gone or because it is now
        folded away.
        """
        if not entries:
            self.reset()
            return
        if index_of(entries, self.selected_id) is None:
            self.selected_id = entries[0].issue.id
            self.offset = 0

    def ensure_visible(self, entries, height):
        # type: (List[Entry], int) -> None
        if not entries:
            self.reset()
            return
        height = max(1, height)
        idx = self.index_in(entries)
        self.selected_id = entries[idx].issue.id
        if idx < self.offset:
            self.offset = idx
        if idx >= self.offset + height:
            self.offset = idx - height + 1
        self.offset = max(0, min(self.offset, len(entries) - 1))
