"""Interactive terminal UI: key input, rendering, line editor and choice menu."""

from __future__ import annotations

from askr.ui.choice_menu import ChoiceMenu, MenuState
from askr.ui.colors import ColorScheme, Colorizer
from askr.ui.interactive import EditorState, InteractivePrompt
from askr.ui.keys import Key, KeyDecoder, KeyEvent
from askr.ui.layout import LayoutManager, Screen
from askr.ui.line_buffer import LineBuffer
from askr.ui.terminal import RawModeGuard, Terminal, TerminalCapabilities, UiMode

__all__ = [
    # Input
    "Key",
    "KeyDecoder",
    "KeyEvent",
    # Terminal
    "RawModeGuard",
    "Terminal",
    "TerminalCapabilities",
    "UiMode",
    # Rendering
    "ColorScheme",
    "Colorizer",
    "LayoutManager",
    "Screen",
    # Editors
    "ChoiceMenu",
    "EditorState",
    "InteractivePrompt",
    "LineBuffer",
    "MenuState",
]
