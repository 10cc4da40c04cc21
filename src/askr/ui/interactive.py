"""Raw-mode line editor with live validation feedback.

Each key press mutates the buffer, re-runs the cheap partial validation to
highlight the first bad character, and repaints the frame. Submitting runs
the full validation, which gates acceptance.
"""

from __future__ import annotations

import logging
from enum import Enum

from rich.cells import cell_len
from rich.text import Text

from askr.config import DEFAULT_PROMPT, InteractionConfig, UiConfig
from askr.errors import MaxAttemptsExceeded, PromptCancelled, PromptTimeout
from askr.ui.colors import Colorizer
from askr.ui.keys import Key, KeyEvent
from askr.ui.layout import MAX_ERROR_LINES, LayoutManager, Screen
from askr.ui.line_buffer import LineBuffer
from askr.ui.terminal import Terminal
from askr.validation.engine import ValidationEngine
from askr.validation.result import ValidationSummary

logger = logging.getLogger(__name__)


class EditorState(Enum):
    EDITING = "editing"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    MAX_ATTEMPTS_EXCEEDED = "max_attempts_exceeded"


class InteractivePrompt:
    """Single-line editor bound to a validation engine.

    Attributes:
        buffer: The text being edited.
        state: Current editor state.
        attempts: Number of submits so far.
        failed_attempts: Number of rejected submits so far.
        last_summary: Summary of the most recent submit, if any.
    """

    def __init__(
        self,
        terminal: Terminal,
        engine: ValidationEngine,
        prompt_text: str = DEFAULT_PROMPT,
        interaction: InteractionConfig | None = None,
        ui: UiConfig | None = None,
        colorizer: Colorizer | None = None,
    ) -> None:
        self.terminal = terminal
        self.engine = engine
        self.prompt_text = prompt_text
        self.interaction = interaction or InteractionConfig()
        self.ui = ui or UiConfig()

        capabilities = terminal.capabilities
        self.colorizer = colorizer or Colorizer(
            no_color=self.ui.no_color or not capabilities.colors_supported
        )
        self.layout = LayoutManager(self.ui.width or capabilities.width, capabilities.height)
        self.screen = Screen(terminal.console)

        self.buffer = LineBuffer()
        self.state = EditorState.EDITING
        self.attempts = 0
        self.failed_attempts = 0
        self.last_summary: ValidationSummary | None = None
        self._edited = False
        self._rejected = False

    def prompt(self) -> str:
        """Run the editor until the value is accepted or the session ends.

        Returns:
            The accepted value.

        Raises:
            PromptCancelled: On Ctrl-C or Ctrl-D.
            PromptTimeout: When no key arrives within the timeout.
            MaxAttemptsExceeded: When the rejected-submit ceiling is reached.
            TerminalError: On terminal I/O failure (raw mode is released first).
        """
        with self.terminal.raw_mode():
            try:
                self.render()
                while self.state is EditorState.EDITING:
                    event = self.terminal.read_key(self.interaction.timeout)
                    if event is None:
                        self.state = EditorState.TIMED_OUT
                        break
                    if self.handle_key(event):
                        self.render()
            finally:
                self.screen.finish()

        logger.debug("Editor finished in state %s", self.state.value)
        if self.state is EditorState.SUBMITTED:
            return self.buffer.text
        if self.state is EditorState.CANCELLED:
            raise PromptCancelled()
        if self.state is EditorState.TIMED_OUT:
            raise PromptTimeout(self.interaction.timeout or 0)
        raise MaxAttemptsExceeded(self.failed_attempts)

    # -------------------------------------------------------------------------
    # Key handling
    # -------------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply one key press.

        Args:
            event: The decoded key.

        Returns:
            True when the frame needs to be repainted.
        """
        if self.state is not EditorState.EDITING:
            return False

        if event.is_ctrl("c") or event.is_ctrl("d"):
            self.state = EditorState.CANCELLED
            return False

        if event.key == Key.ENTER:
            self.submit()
            return True

        changed = self._edit(event)
        if changed:
            self._edited = True
        return changed

    def _edit(self, event: KeyEvent) -> bool:
        buffer = self.buffer
        if event.is_printable:
            return buffer.insert(event.char or "")

        key = event.key
        if key == Key.LEFT or event.is_ctrl("b"):
            return buffer.move_left()
        if key == Key.RIGHT or event.is_ctrl("f"):
            return buffer.move_right()
        if key == Key.HOME or event.is_ctrl("a"):
            return buffer.move_home()
        if key == Key.END or event.is_ctrl("e"):
            return buffer.move_end()
        if key == Key.BACKSPACE:
            return buffer.kill_word_backward() if event.alt else buffer.delete_backward()
        if event.is_ctrl("h"):
            return buffer.delete_backward()
        if key == Key.DELETE:
            return buffer.delete_forward()
        if event.is_ctrl("w"):
            return buffer.kill_word_backward()
        if key == Key.CHAR and event.alt and event.char == "d":
            return buffer.kill_word_forward()
        if event.is_ctrl("u"):
            return buffer.kill_to_start()
        if event.is_ctrl("k"):
            return buffer.kill_to_end()
        return False

    def submit(self) -> None:
        """Validate the buffer and accept it, or count a rejected attempt."""
        default = self.interaction.default_value
        if not self.buffer.text and default is not None:
            self.buffer.set(default)

        self.attempts += 1
        summary = self.engine.validate(self.buffer.text).with_attempts(self.attempts)
        self.last_summary = summary
        if summary.valid:
            self.state = EditorState.SUBMITTED
            return

        self.failed_attempts += 1
        self._rejected = True
        limit = self.interaction.max_attempts
        logger.debug("Submit rejected (%d/%s): %s", self.failed_attempts, limit, summary.error)
        if limit is not None and self.failed_attempts >= limit:
            self.state = EditorState.MAX_ATTEMPTS_EXCEEDED

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> None:
        lines, cursor = self.build_frame()
        self.screen.draw(lines, cursor)

    def build_frame(self) -> tuple[list[Text], tuple[int, int]]:
        """Compose the frame for the current state.

        Returns:
            Tuple of (lines, cursor) where cursor is (line index, cell offset).
        """
        text = self.buffer.text
        masked = self.interaction.mask_input
        default = self.interaction.default_value

        prefix = self.colorizer.prompt(self.prompt_text)
        if default is not None and not masked:
            prefix.append_text(self.colorizer.help(f" [{default}]"))
        prefix.append(" ")

        if masked:
            display = "*" * len(text)
            rendered = self.colorizer.valid(display)
        else:
            display = text
            partial = self.engine.partial_validate(text, self.buffer.cursor)
            rendered = self.colorizer.input_text(display, partial.first_error_pos)

        first_line = prefix.copy()
        first_line.append_text(rendered)
        lines = [first_line]
        cursor = (0, prefix.cell_len + cell_len(display[: self.buffer.cursor]))

        if self._errors_visible():
            lines.extend(self._error_lines(text))

        limit = self.interaction.max_attempts
        if self._rejected and limit is not None and self.state is EditorState.EDITING:
            lines.append(self.colorizer.help(f"Attempt {self.failed_attempts + 1} of {limit}"))

        if self.ui.help_text:
            for line in self.layout.wrap_text(self.ui.help_text):
                lines.append(self.colorizer.help(line))

        return lines, cursor

    def _errors_visible(self) -> bool:
        # Masked input only reveals errors once a submit was rejected
        if self.interaction.mask_input:
            return self._rejected
        return self._edited or self._rejected

    def _error_lines(self, text: str) -> list[Text]:
        lines: list[Text] = []
        for result in self.engine.get_display_errors(text, max_errors=MAX_ERROR_LINES):
            message = self.colorizer.result_message(result)
            for wrapped in self.layout.wrap_text(message.plain):
                lines.append(Text(wrapped, style=message.style))
        return lines[:MAX_ERROR_LINES]
