"""Tests for the arrow-key choice menu."""

from __future__ import annotations

import pytest
from conftest import CTRL_C, DOWN, ENTER, SPACE, UP

from askr.errors import ConfigurationError, PromptCancelled, PromptTimeout
from askr.ui.choice_menu import MULTI_INSTRUCTIONS, SINGLE_INSTRUCTIONS, ChoiceMenu, MenuState
from askr.ui.keys import Key, KeyEvent

FOUR = ["alpha", "beta", "gamma", "delta"]


def frame_text(menu: ChoiceMenu) -> list[str]:
    lines, _ = menu.build_frame()
    return [line.plain for line in lines]


class TestMultiSelect:
    """Tests for multi-select menus."""

    def test_min_bound_enforced_then_submitted(self, make_terminal) -> None:
        terminal = make_terminal([SPACE, ENTER, DOWN, SPACE, ENTER])
        menu = ChoiceMenu(terminal, FOUR, min_choices=2, max_choices=3, prompt_text="Pick:")
        assert menu.show() == ["alpha", "beta"]
        assert menu.state is MenuState.SUBMITTED
        assert (terminal.raw_entered, terminal.raw_exited) == (1, 1)

    def test_rejected_submit_sets_message(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR, min_choices=2, max_choices=3)
        menu.handle_key(SPACE)
        menu.handle_key(ENTER)
        assert menu.state is MenuState.NAVIGATING
        assert menu.message == "At least 2 required"
        assert frame_text(menu)[-1] == "[ERROR] At least 2 required"

    def test_toggle_clears_message(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR, min_choices=2, max_choices=3)
        menu.handle_key(ENTER)
        assert menu.message is not None
        menu.handle_key(SPACE)
        assert menu.message is None

    def test_max_bound_enforced(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR, min_choices=1, max_choices=2)
        for event in [SPACE, DOWN, SPACE, DOWN, SPACE, ENTER]:
            menu.handle_key(event)
        assert menu.message == "At most 2 allowed"
        assert menu.state is MenuState.NAVIGATING

    def test_toggle_twice_deselects(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR, max_choices=4)
        menu.handle_key(SPACE)
        menu.handle_key(SPACE)
        assert menu.selection == []

    def test_frame(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR, max_choices=4, prompt_text="Pick:")
        menu.handle_key(DOWN)
        menu.handle_key(SPACE)
        lines, cursor = menu.build_frame()
        assert [line.plain for line in lines] == [
            "Pick:",
            MULTI_INSTRUCTIONS,
            "[ ] alpha",
            "[x] beta",
            "[ ] gamma",
            "[ ] delta",
        ]
        assert cursor == (0, len("Pick:"))


class TestSingleSelect:
    """Tests for single-select menus."""

    def test_enter_picks_highlighted(self, make_terminal) -> None:
        terminal = make_terminal([DOWN, DOWN, UP, DOWN, ENTER])
        assert ChoiceMenu(terminal, FOUR).show() == ["gamma"]

    def test_space_does_nothing(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR)
        assert not menu.handle_key(SPACE)
        assert menu.selection == []

    def test_frame_marks_highlighted_row(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), ["a", "b"], prompt_text="Pick:")
        assert frame_text(menu) == ["Pick:", SINGLE_INSTRUCTIONS, "> a", "  b"]


class TestNavigation:
    """Tests for cursor movement in the list."""

    def test_bounds(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR)
        assert not menu.handle_key(UP)
        assert menu.handle_key(KeyEvent(Key.END))
        assert menu.index == 3
        assert not menu.handle_key(DOWN)
        assert menu.handle_key(KeyEvent(Key.HOME))
        assert menu.index == 0

    def test_emacs_bindings(self, make_terminal) -> None:
        menu = ChoiceMenu(make_terminal(), FOUR)
        menu.handle_key(KeyEvent.ctrl_char("n"))
        menu.handle_key(KeyEvent.ctrl_char("n"))
        menu.handle_key(KeyEvent.ctrl_char("p"))
        assert menu.index == 1

    def test_scrolling_window(self, make_terminal) -> None:
        choices = [f"item{i}" for i in range(10)]
        menu = ChoiceMenu(make_terminal(height=8), choices, prompt_text="Pick:")
        assert frame_text(menu)[2:] == ["> item0", "  item1", "  item2", "… 7 more"]

        menu.handle_key(KeyEvent(Key.END))
        assert frame_text(menu)[2:] == ["… 7 more", "  item7", "  item8", "> item9"]

    def test_page_down(self, make_terminal) -> None:
        choices = [f"item{i}" for i in range(10)]
        menu = ChoiceMenu(make_terminal(height=8), choices)
        menu.handle_key(KeyEvent(Key.PAGE_DOWN))
        assert menu.index == 3
        menu.handle_key(KeyEvent(Key.PAGE_UP))
        assert menu.index == 0


class TestMenuOutcomes:
    """Tests for cancellation, timeout and configuration errors."""

    def test_cancel(self, make_terminal) -> None:
        terminal = make_terminal([DOWN, CTRL_C])
        with pytest.raises(PromptCancelled):
            ChoiceMenu(terminal, FOUR).show()
        assert terminal.raw_exited == 1

    def test_timeout(self, make_terminal) -> None:
        terminal = make_terminal()
        with pytest.raises(PromptTimeout):
            ChoiceMenu(terminal, FOUR, timeout=2).show()
        assert terminal.timeouts == [2]

    def test_invalid_configuration(self, make_terminal) -> None:
        with pytest.raises(ConfigurationError):
            ChoiceMenu(make_terminal(), [])
        with pytest.raises(ConfigurationError):
            ChoiceMenu(make_terminal(), FOUR, min_choices=3, max_choices=2)
