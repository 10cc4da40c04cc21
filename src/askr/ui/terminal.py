"""Terminal capability probe, raw mode and key input.

Raw mode is cbreak without signal generation, so Ctrl-C reaches the editor
as a key press instead of raising KeyboardInterrupt. The guard returned by
``Terminal.raw_mode()`` restores the saved settings on every exit path.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console

from askr.errors import TerminalError
from askr.ui.keys import ESCAPE_DELAY, KeyDecoder, KeyEvent

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import termios

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24


class UiMode(Enum):
    """How much of the interactive UI the terminal can carry."""

    FULL = "full"
    NO_COLOR = "no_color"
    SIMPLE = "simple"


def _isatty(stream: TextIO | None) -> bool:
    if stream is None:
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True)
class TerminalCapabilities:
    """What the attached terminal supports.

    Attributes:
        colors_supported: Styled output will be rendered.
        cursor_control: Raw mode and cursor movement are available.
        unicode_support: The output encoding can carry non-ASCII glyphs.
        width: Columns available for rendering.
        height: Rows available for rendering.
    """

    colors_supported: bool = False
    cursor_control: bool = False
    unicode_support: bool = True
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    @classmethod
    def detect(
        cls,
        console: Console,
        width_override: int | None = None,
        no_color: bool = False,
        stdin: TextIO | None = None,
    ) -> TerminalCapabilities:
        """Probe the terminal behind ``console``.

        Args:
            console: Console the UI renders to (normally stderr).
            width_override: Fixed rendering width, if configured.
            no_color: Disable styling regardless of terminal support.
            stdin: Input stream; defaults to ``sys.stdin``.

        Returns:
            Detected capabilities.
        """
        stdin = stdin if stdin is not None else sys.stdin
        cursor_control = (
            not _IS_WINDOWS
            and _isatty(stdin)
            and console.is_terminal
            and not console.is_dumb_terminal
        )
        colors = (
            cursor_control
            and not no_color
            and not console.no_color
            and console.color_system is not None
        )
        size = console.size
        width = width_override if width_override else size.width
        return cls(
            colors_supported=colors,
            cursor_control=cursor_control,
            unicode_support=console.encoding.lower().startswith("utf"),
            width=max(1, width or DEFAULT_WIDTH),
            height=max(1, size.height or DEFAULT_HEIGHT),
        )

    @property
    def ui_mode(self) -> UiMode:
        if not self.cursor_control:
            return UiMode.SIMPLE
        if not self.colors_supported:
            return UiMode.NO_COLOR
        return UiMode.FULL


class RawModeGuard:
    """Scoped raw-mode acquisition for one file descriptor.

    Use as a context manager. ``release()`` may be called any number of
    times; only the first call restores the terminal.
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._saved: list | None = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def acquire(self) -> RawModeGuard:
        """Switch the terminal to raw mode, saving the current settings.

        Raises:
            TerminalError: If the descriptor is not a configurable terminal.
        """
        if self.active:
            return self
        if _IS_WINDOWS:
            raise TerminalError("Raw mode is not supported on this platform")
        try:
            saved = termios.tcgetattr(self._fd)
            raw = termios.tcgetattr(self._fd)
            # LFLAG: no canonical mode, no echo, no signals from Ctrl-C/Ctrl-Z
            raw[3] &= ~(termios.ICANON | termios.ECHO | termios.IEXTEN | termios.ISIG)
            # IFLAG: no flow control, no CR/NL translation
            raw[1] &= ~(termios.IXON | termios.ICRNL | termios.INLCR | termios.IGNCR)
            raw[6][termios.VMIN] = 1
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(self._fd, termios.TCSANOW, raw)
        except (termios.error, OSError) as e:
            raise TerminalError(f"Failed to enter raw mode: {e}") from e
        self._saved = saved
        logger.debug("Entered raw mode on fd %d", self._fd)
        return self

    def release(self) -> None:
        """Restore the saved terminal settings (idempotent)."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as e:
            logger.warning("Failed to restore terminal settings: %s", e)
            return
        logger.debug("Left raw mode on fd %d", self._fd)

    def __enter__(self) -> RawModeGuard:
        return self.acquire()

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class Terminal:
    """Interactive terminal: capabilities, raw mode and key reading.

    Attributes:
        console: Console the UI renders to.
        capabilities: Result of the capability probe.
    """

    def __init__(
        self,
        console: Console,
        capabilities: TerminalCapabilities | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self.console = console
        self._stdin = stdin if stdin is not None else sys.stdin
        self.capabilities = capabilities or TerminalCapabilities.detect(
            console, stdin=self._stdin
        )
        self._decoder = KeyDecoder()
        self._queue: deque[KeyEvent] = deque()

    def raw_mode(self) -> RawModeGuard:
        return RawModeGuard(self._stdin.fileno())

    def read_key(self, timeout: float | None = None) -> KeyEvent | None:
        """Return the next key event.

        Events decoded from one read are queued and handed out in arrival
        order. End of input is reported as Ctrl-D.

        Args:
            timeout: Seconds to wait for input; None waits forever.

        Returns:
            The key event, or None if ``timeout`` elapsed without input.

        Raises:
            TerminalError: If reading from the terminal fails.
        """
        if self._queue:
            return self._queue.popleft()

        deadline = None if timeout is None else time.monotonic() + timeout
        fd = self._stdin.fileno()
        try:
            while not self._queue:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                if not self._wait_readable(fd, remaining):
                    if self._decoder.pending:
                        self._queue.extend(self._decoder.flush())
                        continue
                    return None

                data = os.read(fd, 1024)
                if not data:
                    self._queue.append(KeyEvent.ctrl_char("d"))
                    break
                self._queue.extend(self._decoder.feed(data))

                if self._decoder.pending and not self._wait_readable(fd, ESCAPE_DELAY):
                    self._queue.extend(self._decoder.flush())
        except OSError as e:
            raise TerminalError(f"Failed to read from terminal: {e}") from e

        return self._queue.popleft()

    @staticmethod
    def _wait_readable(fd: int, timeout: float | None) -> bool:
        readable, _, _ = select.select([fd], [], [], timeout)
        return bool(readable)
