"""Key events and the decoder that turns terminal input into them.

Escape sequences are matched with a trie covering the common terminal
variants (xterm, rxvt, tmux, application mode). An ESC that is not followed
by more input within a short delay is reported as the Escape key; ESC
followed by an unrelated character is reported as Alt plus that character.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

# Seconds to wait after a lone ESC before treating it as the Escape key
ESCAPE_DELAY = 0.025


class Key:
    """Named constants for keys."""

    CHAR = "char"
    ENTER = "enter"
    TAB = "tab"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


@dataclass(frozen=True)
class KeyEvent:
    """A single decoded key press.

    Attributes:
        key: One of the ``Key`` constants.
        char: The character for ``Key.CHAR`` events (lowercase letter for
            control combinations).
        ctrl: Control modifier.
        alt: Alt/Meta modifier.
    """

    key: str
    char: str | None = None
    ctrl: bool = False
    alt: bool = False

    @classmethod
    def of_char(cls, char: str) -> KeyEvent:
        return cls(Key.CHAR, char=char)

    @classmethod
    def ctrl_char(cls, letter: str) -> KeyEvent:
        return cls(Key.CHAR, char=letter.lower(), ctrl=True)

    @classmethod
    def alt_char(cls, char: str) -> KeyEvent:
        return cls(Key.CHAR, char=char, alt=True)

    @property
    def is_printable(self) -> bool:
        """True for plain characters that belong in the input buffer."""
        return (
            self.key == Key.CHAR
            and not self.ctrl
            and not self.alt
            and self.char is not None
            and self.char.isprintable()
        )

    def is_ctrl(self, letter: str) -> bool:
        return self.key == Key.CHAR and self.ctrl and self.char == letter


# -----------------------------------------------------------------------------
# Escape sequence trie
# -----------------------------------------------------------------------------

ESCAPE_SEQUENCES = {
    # Arrow keys
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    # Page Up / Page Down
    "\x1b[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN,
    # Home
    "\x1b[H": Key.HOME,
    "\x1bOH": Key.HOME,
    "\x1b[1~": Key.HOME,
    "\x1b[7~": Key.HOME,
    # End
    "\x1b[F": Key.END,
    "\x1bOF": Key.END,
    "\x1b[4~": Key.END,
    "\x1b[8~": Key.END,
    # Delete
    "\x1b[3~": Key.DELETE,
}


def build_trie(sequences: dict[str, str]) -> dict:
    """Build a trie (nested dicts) from an escape sequence table."""
    root: dict = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq[:-1]:
            node = node.setdefault(ch, {})
        node[seq[-1]] = key
    return root


_ESCAPE_TRIE = build_trie(ESCAPE_SEQUENCES)


def _is_csi_final(ch: str) -> bool:
    return "\x40" <= ch <= "\x7e"


class KeyDecoder:
    """Incremental decoder from raw terminal input to ``KeyEvent`` values.

    Feed it bytes (or already-decoded text) as they arrive. Events are
    returned in arrival order. A trailing lone ESC stays pending until more
    input arrives or ``flush()`` is called.

    Example:
        >>> decoder = KeyDecoder()
        >>> decoder.feed(b"a\\x1b[D")
        [KeyEvent(key='char', char='a', ...), KeyEvent(key='left', ...)]
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._esc_buf: list[str] = []
        self._esc_node: dict | None = None
        self._skip_csi = False

    @property
    def pending(self) -> bool:
        """True while a partial escape sequence is buffered."""
        return bool(self._esc_buf)

    def feed(self, data: bytes | str) -> list[KeyEvent]:
        """Decode a chunk of input.

        Args:
            data: Raw bytes from the terminal, or text.

        Returns:
            Complete key events, in order.
        """
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        events: list[KeyEvent] = []
        for ch in text:
            events.extend(self._feed_char(ch))
        return events

    def flush(self) -> list[KeyEvent]:
        """Resolve a pending escape prefix once no more input is coming."""
        if not self._esc_buf:
            return []
        buffered = "".join(self._esc_buf)
        self._reset_escape()
        if buffered == "\x1b":
            return [KeyEvent(Key.ESCAPE)]
        # ESC [ or ESC O with nothing after it
        return [KeyEvent.alt_char(buffered[1])]

    def _reset_escape(self) -> None:
        self._esc_buf = []
        self._esc_node = None

    def _feed_char(self, ch: str) -> list[KeyEvent]:
        if self._skip_csi:
            # Unknown CSI sequence: drop everything through its final byte
            if _is_csi_final(ch):
                self._skip_csi = False
            return []

        if self._esc_node is None:
            return self._plain_char(ch)

        value = self._esc_node.get(ch)
        if isinstance(value, dict):
            self._esc_buf.append(ch)
            self._esc_node = value
            return []
        if value is not None:
            self._reset_escape()
            return [KeyEvent(value)]

        # Dead end in the trie
        buffered = "".join(self._esc_buf)
        self._reset_escape()
        if buffered == "\x1b":
            if ch == "\x1b":
                return [KeyEvent(Key.ESCAPE)] + self._plain_char(ch)
            if ch in "\x7f\x08":
                return [KeyEvent(Key.BACKSPACE, alt=True)]
            return [KeyEvent.alt_char(ch)]
        if buffered.startswith("\x1b["):
            if not _is_csi_final(ch):
                self._skip_csi = True
            return []
        # ESC O followed by something unknown
        return [KeyEvent.alt_char("O")] + self._plain_char(ch)

    def _plain_char(self, ch: str) -> list[KeyEvent]:
        if ch == "\x1b":
            self._esc_buf = [ch]
            self._esc_node = _ESCAPE_TRIE["\x1b"]
            return []
        if ch in "\r\n":
            return [KeyEvent(Key.ENTER)]
        if ch == "\t":
            return [KeyEvent(Key.TAB)]
        if ch in "\x7f\x08":
            return [KeyEvent(Key.BACKSPACE)]
        code = ord(ch)
        if code == 0:
            return [KeyEvent.ctrl_char(" ")]
        if code < 0x20:
            return [KeyEvent.ctrl_char(chr(code + 0x60))]
        return [KeyEvent.of_char(ch)]
