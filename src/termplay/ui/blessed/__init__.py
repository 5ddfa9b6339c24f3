"""Blessed terminal UI for playback sessions.

- terminal: raw mode, key reading and status-line output
- keys: key bindings
- input_reader: thread forwarding key presses
- controls: thread applying controls and rendering status
"""

from .controls import ControlHandler, abort_playback, stop_playback
from .input_reader import InputReader
from .keys import HELP_TEXT, ControlAction, action_for_key
from .terminal import BlessedTerminal, TerminalFacility

__all__ = [
    "BlessedTerminal",
    "ControlAction",
    "ControlHandler",
    "HELP_TEXT",
    "InputReader",
    "TerminalFacility",
    "abort_playback",
    "action_for_key",
    "stop_playback",
]
