"""Arrow-key selection menu for choosing 1..N items from a fixed list."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from rich.text import Text

from askr.config import DEFAULT_PROMPT, DEFAULT_TIMEOUT
from askr.errors import ConfigurationError, PromptCancelled, PromptTimeout
from askr.ui.colors import Colorizer
from askr.ui.keys import Key, KeyEvent
from askr.ui.layout import LayoutManager, Screen
from askr.ui.terminal import Terminal

logger = logging.getLogger(__name__)

MULTI_INSTRUCTIONS = "Use ↑↓ to navigate, SPACE to toggle, ENTER to submit:"
SINGLE_INSTRUCTIONS = "Use ↑↓ to navigate, ENTER to select:"

# Rows reserved for the prompt, the instructions and the constraint message
_RESERVED_ROWS = 3


class MenuState(Enum):
    NAVIGATING = "navigating"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"


class ChoiceMenu:
    """Selection list navigated with the arrow keys.

    With ``max_choices == 1`` the menu is single-select: Enter picks the
    highlighted item. Otherwise Space toggles items and Enter submits once
    the selection count is within ``[min_choices, max_choices]``.

    Attributes:
        choices: The options, in display order.
        selected: Selection flag per option.
        index: Highlighted option.
        state: Current menu state.
        message: Constraint violation from the last rejected submit.
    """

    def __init__(
        self,
        terminal: Terminal,
        choices: Sequence[str],
        *,
        min_choices: int = 1,
        max_choices: int = 1,
        prompt_text: str = DEFAULT_PROMPT,
        timeout: float | None = DEFAULT_TIMEOUT,
        no_color: bool = False,
        width: int | None = None,
        colorizer: Colorizer | None = None,
    ) -> None:
        if not choices:
            raise ConfigurationError("Choice menu needs at least one option")
        if max_choices < 1 or min_choices > max_choices:
            raise ConfigurationError(
                f"Invalid selection bounds: min={min_choices}, max={max_choices}"
            )

        self.terminal = terminal
        self.choices = list(choices)
        self.min_choices = min_choices
        self.max_choices = max_choices
        self.prompt_text = prompt_text
        self.timeout = timeout

        capabilities = terminal.capabilities
        self.colorizer = colorizer or Colorizer(
            no_color=no_color or not capabilities.colors_supported
        )
        self.layout = LayoutManager(width or capabilities.width, capabilities.height)
        self.screen = Screen(terminal.console)

        self.selected = [False] * len(self.choices)
        self.index = 0
        self.offset = 0
        self.state = MenuState.NAVIGATING
        self.message: str | None = None

    @property
    def multi_select(self) -> bool:
        return self.max_choices > 1

    @property
    def selection(self) -> list[str]:
        """Selected options, in list order."""
        return [choice for choice, chosen in zip(self.choices, self.selected) if chosen]

    def show(self) -> list[str]:
        """Run the menu until a selection is submitted.

        Returns:
            The selected options, in list order.

        Raises:
            PromptCancelled: On Ctrl-C or Ctrl-D.
            PromptTimeout: When no key arrives within the timeout.
        """
        console = self.terminal.console
        with self.terminal.raw_mode():
            console.show_cursor(False)
            try:
                self.render()
                while self.state is MenuState.NAVIGATING:
                    event = self.terminal.read_key(self.timeout)
                    if event is None:
                        self.state = MenuState.TIMED_OUT
                        break
                    if self.handle_key(event):
                        self.render()
            finally:
                self.screen.finish()
                console.show_cursor(True)

        logger.debug("Menu finished in state %s", self.state.value)
        if self.state is MenuState.SUBMITTED:
            return self.selection
        if self.state is MenuState.CANCELLED:
            raise PromptCancelled()
        raise PromptTimeout(self.timeout or 0)

    # -------------------------------------------------------------------------
    # Key handling
    # -------------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply one key press; return True when the frame must be repainted."""
        if self.state is not MenuState.NAVIGATING:
            return False

        if event.is_ctrl("c") or event.is_ctrl("d"):
            self.state = MenuState.CANCELLED
            return False

        key = event.key
        last = len(self.choices) - 1
        if key == Key.UP or event.is_ctrl("p"):
            return self._move_to(max(0, self.index - 1))
        if key == Key.DOWN or event.is_ctrl("n"):
            return self._move_to(min(last, self.index + 1))
        if key == Key.HOME:
            return self._move_to(0)
        if key == Key.END:
            return self._move_to(last)
        if key == Key.PAGE_UP:
            return self._move_to(max(0, self.index - self._visible_rows()))
        if key == Key.PAGE_DOWN:
            return self._move_to(min(last, self.index + self._visible_rows()))
        if key == Key.CHAR and event.char == " " and not event.ctrl and not event.alt:
            return self.toggle()
        if key == Key.ENTER:
            self.submit()
            return True
        return False

    def toggle(self) -> bool:
        """Flip the highlighted item (multi-select only)."""
        if not self.multi_select:
            return False
        self.selected[self.index] = not self.selected[self.index]
        self.message = None
        return True

    def submit(self) -> None:
        if not self.multi_select:
            self.selected = [False] * len(self.choices)
            self.selected[self.index] = True
            self.state = MenuState.SUBMITTED
            return

        count = sum(self.selected)
        if count < self.min_choices:
            self.message = f"At least {self.min_choices} required"
        elif count > self.max_choices:
            self.message = f"At most {self.max_choices} allowed"
        else:
            self.message = None
            self.state = MenuState.SUBMITTED

    def _move_to(self, index: int) -> bool:
        if index == self.index:
            return False
        self.index = index
        return True

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> None:
        lines, cursor = self.build_frame()
        self.screen.draw(lines, cursor)

    def build_frame(self) -> tuple[list[Text], tuple[int, int]]:
        prompt = self.colorizer.prompt(self.prompt_text)
        instructions = MULTI_INSTRUCTIONS if self.multi_select else SINGLE_INSTRUCTIONS
        lines: list[Text] = [prompt, self.colorizer.help(instructions)]

        start, end = self._window()
        if start > 0:
            lines.append(self.colorizer.help(f"… {start} more"))
        for i in range(start, end):
            lines.append(self._choice_line(i))
        if end < len(self.choices):
            lines.append(self.colorizer.help(f"… {len(self.choices) - end} more"))

        if self.message:
            lines.append(self.colorizer.error_message(self.message))

        return lines, (0, prompt.cell_len)

    def _choice_line(self, i: int) -> Text:
        if self.multi_select:
            marker = "[x]" if self.selected[i] else "[ ]"
        else:
            marker = ">" if i == self.index else " "
        label = f"{marker} {self.choices[i]}"
        if i == self.index:
            return self.colorizer.highlighted(label)
        return self.colorizer.valid(label)

    def _visible_rows(self) -> int:
        available = self.layout.height - _RESERVED_ROWS
        if len(self.choices) <= available:
            return len(self.choices)
        # Two rows go to the "more" markers
        return max(1, available - 2)

    def _window(self) -> tuple[int, int]:
        visible = self._visible_rows()
        if self.index < self.offset:
            self.offset = self.index
        elif self.index >= self.offset + visible:
            self.offset = self.index - visible + 1
        self.offset = max(0, min(self.offset, len(self.choices) - visible))
        return self.offset, self.offset + visible
