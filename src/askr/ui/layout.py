"""Text layout and the relative-redraw screen used by the editors.

The screen never takes over the whole terminal. Each frame is drawn below
the line the prompt started on, and the next frame repaints exactly the
rows the previous one occupied.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text

MAX_ERROR_LINES = 10


class LayoutManager:
    """Width-aware text measurement and wrapping.

    Attributes:
        width: Columns available.
        height: Rows available.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)

    def wrap_text(self, text: str, max_width: int | None = None) -> list[str]:
        """Word-wrap ``text`` to ``max_width`` cells.

        Words wider than the limit are split across lines. An empty input
        yields a single empty line.

        Args:
            text: Text to wrap (whitespace is collapsed).
            max_width: Cell limit; defaults to the layout width.

        Returns:
            Wrapped lines, each at most ``max_width`` cells wide.
        """
        limit = max(1, max_width or self.width)
        lines: list[str] = []
        current = ""

        for word in text.split():
            while cell_len(word) > limit:
                if current:
                    lines.append(current)
                    current = ""
                head, word = _split_cells(word, limit)
                lines.append(head)
            if not word:
                continue
            if not current:
                current = word
            elif cell_len(current) + 1 + cell_len(word) <= limit:
                current = f"{current} {word}"
            else:
                lines.append(current)
                current = word

        if current:
            lines.append(current)
        return lines or [""]

    def rows_for(self, cells: int) -> int:
        """Physical rows a line of ``cells`` cells occupies."""
        return max(1, -(-cells // self.width))

    def cursor_cell(self, cells: int) -> tuple[int, int]:
        """Translate a cell offset within a line to (row, column)."""
        return divmod(cells, self.width)


def _split_cells(word: str, limit: int) -> tuple[str, str]:
    total = 0
    for i, ch in enumerate(word):
        total += cell_len(ch)
        if total > limit:
            # Keep at least one character per line
            cut = max(i, 1)
            return word[:cut], word[cut:]
    return word, ""


class Screen:
    """Repaints a multi-line frame in place.

    ``draw`` moves the cursor back to the top of the previous frame (it
    knows how many rows below the top it left the cursor), clears every
    row that frame used, writes the new rows and parks the cursor where
    requested.

    Rows are counted at the console's own width, where the terminal wraps
    long lines. A narrower ``--width`` only affects how callers wrap text.
    """

    def __init__(self, console: Console) -> None:
        self.console = console
        self._rows_drawn = 0
        self._cursor_row = 0

    @property
    def physical(self) -> LayoutManager:
        """Layout matching the terminal's real size."""
        return LayoutManager(self.console.width, self.console.height)

    @property
    def rows_drawn(self) -> int:
        return self._rows_drawn

    def draw(
        self,
        lines: Sequence[Text | str],
        cursor: tuple[int, int] | None = None,
    ) -> None:
        """Replace the previous frame with ``lines``.

        Args:
            lines: Logical lines of the frame; long lines wrap.
            cursor: (line index, cell offset) to leave the cursor at.
                Defaults to the end of the last line.
        """
        texts = [line if isinstance(line, Text) else Text(line) for line in lines] or [Text()]
        if cursor is None:
            cursor = (len(texts) - 1, texts[-1].cell_len)
        cursor_line, cursor_cells = cursor

        # A cursor parked past the text needs its row to exist
        target = texts[cursor_line]
        if cursor_cells >= target.cell_len:
            texts[cursor_line] = target + Text(" " * (cursor_cells - target.cell_len + 1))

        physical = self.physical
        row_counts = [physical.rows_for(text.cell_len) for text in texts]
        total_rows = sum(row_counts)

        with self.console:
            self._clear_previous()
            for i, text in enumerate(texts):
                self.console.print(
                    text,
                    end="\n" if i < len(texts) - 1 else "",
                    soft_wrap=True,
                    highlight=False,
                )

            cursor_row_in_line, cursor_col = physical.cursor_cell(cursor_cells)
            cursor_row = sum(row_counts[:cursor_line]) + cursor_row_in_line
            up = total_rows - 1 - cursor_row
            if up > 0:
                self.console.control(Control.move(0, -up))
            self.console.control(Control.move_to_column(cursor_col))

        self._rows_drawn = total_rows
        self._cursor_row = cursor_row

    def finish(self) -> None:
        """Leave the current frame in place and move below it."""
        if self._rows_drawn == 0:
            return
        with self.console:
            down = self._rows_drawn - 1 - self._cursor_row
            if down > 0:
                self.console.control(Control.move(0, down))
            self.console.control(Control(ControlType.CARRIAGE_RETURN))
            self.console.out("", end="\n", highlight=False)
        self._rows_drawn = 0
        self._cursor_row = 0

    def clear(self) -> None:
        """Erase the current frame and leave the cursor where it started."""
        if self._rows_drawn == 0:
            return
        with self.console:
            self._clear_previous()
        self._rows_drawn = 0
        self._cursor_row = 0

    def _clear_previous(self) -> None:
        if self._cursor_row > 0:
            self.console.control(Control.move(0, -self._cursor_row))
        self.console.control(Control(ControlType.CARRIAGE_RETURN))
        if self._rows_drawn == 0:
            return
        for row in range(self._rows_drawn):
            self.console.control(Control((ControlType.ERASE_IN_LINE, 2)))
            if row < self._rows_drawn - 1:
                self.console.control(Control.move(0, 1))
        if self._rows_drawn > 1:
            self.console.control(Control.move(0, -(self._rows_drawn - 1)))
        self.console.control(Control(ControlType.CARRIAGE_RETURN))
