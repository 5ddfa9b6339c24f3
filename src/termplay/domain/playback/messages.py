"""
Messages sent to the control handler.

One queue carries every message. The playback driver and the input reader
put, the control handler is the only consumer and handles messages in
arrival order.
"""

import queue
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True)
class Terminate:
    """Playback is over. Always the last message, sent once by the driver."""


@dataclass(frozen=True)
class SongStarted:
    """The song at `index` is about to start streaming."""

    index: int


@dataclass(frozen=True)
class RecoverableError:
    """A song was skipped or the engine reported a non-fatal problem."""

    text: str


@dataclass(frozen=True)
class KeyEvent:
    """A key press read from the terminal."""

    key: Any


ControlMessage: TypeAlias = Terminate | SongStarted | RecoverableError | KeyEvent
ControlChannel: TypeAlias = "queue.Queue[ControlMessage]"


def make_channel() -> ControlChannel:
    """Create the unbounded channel for one playback session."""
    return queue.Queue()
