"""Cursor into the current page's items."""

from typing import Optional


class SelectionCursor:
    """Index into a list of `length` items, always clamped to bounds.

    `index` is None when there are no items.
    """

    def __init__(self, length: int = 0) -> None:
        self._length = max(0, length)
        self._cursor = 0

    @property
    def length(self) -> int:
        return self._length

    @property
    def index(self) -> Optional[int]:
        if self._length == 0:
            return None
        return self._cursor

    def _move_to(self, position: int) -> bool:
        if self._length == 0:
            return False
        position = max(0, min(position, self._length - 1))
        changed = position != self._cursor
        self._cursor = position
        return changed

    def move_down(self) -> bool:
        return self._move_to(self._cursor + 1)

    def move_up(self) -> bool:
        return self._move_to(self._cursor - 1)

    def first(self) -> bool:
        if self._length == 0:
            self._cursor = 0
            return False
        return self._move_to(0)

    def last(self) -> bool:
        return self._move_to(self._length - 1)

    def reconcile(self, new_length: int) -> None:
        """Adopt a new collection size, pulling the cursor back if it fell off the end."""
        self._length = max(0, new_length)
        if self._cursor >= self._length:
            self._cursor = max(0, self._length - 1)

    def __repr__(self) -> str:
        return f"SelectionCursor(index={self.index}, length={self._length})"
