"""Editable single-line text buffer with a character cursor."""

from __future__ import annotations


class LineBuffer:
    """Text plus a cursor offset in ``[0, len(text)]``.

    Every editing operation returns True when it changed the text or the
    cursor, so callers can skip redraws for no-op keys.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def set(self, text: str) -> None:
        """Replace the contents and move the cursor to the end."""
        self._text = text
        self._cursor = len(text)

    # -------------------------------------------------------------------------
    # Insertion and deletion
    # -------------------------------------------------------------------------

    def insert(self, chars: str) -> bool:
        if not chars:
            return False
        self._text = self._text[: self._cursor] + chars + self._text[self._cursor :]
        self._cursor += len(chars)
        return True

    def delete_backward(self) -> bool:
        if self._cursor == 0:
            return False
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self._cursor -= 1
        return True

    def delete_forward(self) -> bool:
        if self._cursor >= len(self._text):
            return False
        self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]
        return True

    def kill_word_backward(self) -> bool:
        """Delete from the start of the previous word to the cursor."""
        start = self._word_start_before(self._cursor)
        if start == self._cursor:
            return False
        self._text = self._text[:start] + self._text[self._cursor :]
        self._cursor = start
        return True

    def kill_word_forward(self) -> bool:
        """Delete from the cursor to the end of the next word."""
        end = self._word_end_after(self._cursor)
        if end == self._cursor:
            return False
        self._text = self._text[: self._cursor] + self._text[end:]
        return True

    def kill_to_start(self) -> bool:
        if self._cursor == 0:
            return False
        self._text = self._text[self._cursor :]
        self._cursor = 0
        return True

    def kill_to_end(self) -> bool:
        if self._cursor >= len(self._text):
            return False
        self._text = self._text[: self._cursor]
        return True

    # -------------------------------------------------------------------------
    # Cursor movement
    # -------------------------------------------------------------------------

    def move_left(self) -> bool:
        if self._cursor == 0:
            return False
        self._cursor -= 1
        return True

    def move_right(self) -> bool:
        if self._cursor >= len(self._text):
            return False
        self._cursor += 1
        return True

    def move_home(self) -> bool:
        if self._cursor == 0:
            return False
        self._cursor = 0
        return True

    def move_end(self) -> bool:
        if self._cursor == len(self._text):
            return False
        self._cursor = len(self._text)
        return True

    def _word_start_before(self, pos: int) -> int:
        while pos > 0 and self._text[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not self._text[pos - 1].isspace():
            pos -= 1
        return pos

    def _word_end_after(self, pos: int) -> int:
        end = len(self._text)
        while pos < end and self._text[pos].isspace():
            pos += 1
        while pos < end and not self._text[pos].isspace():
            pos += 1
        return pos

    def __repr__(self) -> str:
        return f"LineBuffer(text={self._text!r}, cursor={self._cursor})"
