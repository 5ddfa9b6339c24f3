"""Key bindings for the playback controls."""

from enum import Enum
from typing import Optional

from blessed.keyboard import Keystroke


class ControlAction(Enum):
    QUIT = "quit"
    HELP = "help"
    TOGGLE_PAUSE = "toggle_pause"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    NEXT = "next"
    SAVE = "save"


HELP_TEXT = "Exit: q, Help: h, Play/Pause: space, Volume: ↑/↓, Next: →, Save: s"

_CHAR_BINDINGS = {
    "q": ControlAction.QUIT,
    "h": ControlAction.HELP,
    " ": ControlAction.TOGGLE_PAUSE,
    "s": ControlAction.SAVE,
}

_NAMED_BINDINGS = {
    "KEY_UP": ControlAction.VOLUME_UP,
    "KEY_DOWN": ControlAction.VOLUME_DOWN,
    "KEY_RIGHT": ControlAction.NEXT,
}


def action_for_key(key: Keystroke) -> Optional[ControlAction]:
    """
    Map a keystroke to a control action.

    Args:
        key: blessed Keystroke

    Returns:
        The bound action, or None for unbound keys
    """
    if key.is_sequence:
        return _NAMED_BINDINGS.get(key.name)
    return _CHAR_BINDINGS.get(str(key))
