"""Terminal input and status-line output for playback sessions."""

import sys
import termios
from contextlib import ExitStack
from typing import Optional, Protocol, TextIO

from blessed import Terminal
from blessed.keyboard import Keystroke
from loguru import logger

from termplay.domain.playback.exceptions import TerminalModeError


class TerminalFacility(Protocol):
    """What the control handler and input reader need from the terminal."""

    def enable_raw_mode(self) -> None: ...

    def disable_raw_mode(self) -> None: ...

    def read_event(self) -> Keystroke: ...

    def write_message(self, text: str) -> None: ...

    def write_action(self, text: str) -> None: ...

    def write_error(self, text: str) -> None: ...

    def finish_line(self) -> None: ...


class BlessedTerminal:
    """Terminal facility built on blessed.

    Output is line based: a message stays on screen, an action (volume,
    pause, ...) is overwritten by whatever is written next.
    """

    def __init__(self, term: Optional[Terminal] = None, stream: Optional[TextIO] = None):
        self.term = term or Terminal()
        self.stream = stream or sys.stdout
        self._raw_mode: Optional[ExitStack] = None
        self._last_out_was_action = False

    def _keyboard_attached(self) -> bool:
        try:
            return sys.stdin.isatty()
        except ValueError:  # stdin closed
            return False

    def enable_raw_mode(self) -> None:
        """Switch to key-at-a-time input without echo.

        Raises:
            TerminalModeError: If stdin is not a terminal or the mode change fails.
        """
        if self._raw_mode is not None:
            return
        if not self._keyboard_attached():
            raise TerminalModeError("Error enabling raw mode: stdin is not a terminal")

        stack = ExitStack()
        try:
            stack.enter_context(self.term.cbreak())
        except (OSError, termios.error) as e:
            stack.close()
            raise TerminalModeError("Error enabling raw mode", e) from e
        self._raw_mode = stack
        logger.debug("Terminal raw mode enabled")

    def disable_raw_mode(self) -> None:
        if self._raw_mode is None:
            return
        stack, self._raw_mode = self._raw_mode, None
        stack.close()
        logger.debug("Terminal raw mode disabled")

    def read_event(self) -> Keystroke:
        """Block until a key is pressed.

        Raises:
            OSError: If no keyboard is attached or reading fails.
        """
        if not self._keyboard_attached():
            raise OSError("No keyboard input available")
        while True:
            key = self.term.inkey()
            if key:
                return key

    def _write_line(self, text: str) -> None:
        if self._last_out_was_action:
            prefix = self.term.move_x(0) + self.term.clear_eol
        else:
            prefix = "\n" + self.term.move_x(0)
        self.stream.write(prefix + text)
        self.stream.flush()

    def write_message(self, text: str) -> None:
        """Write a line that stays on screen."""
        self._write_line(text)
        self._last_out_was_action = False

    def write_action(self, text: str) -> None:
        """Write a line that the next output replaces."""
        self._write_line(text)
        self._last_out_was_action = True

    def write_error(self, text: str) -> None:
        self._write_line(self.term.red(text))
        self._last_out_was_action = False

    def finish_line(self) -> None:
        """Leave the cursor at the start of a fresh line."""
        self.stream.write("\n" + self.term.move_x(0))
        self.stream.flush()
        self._last_out_was_action = False
