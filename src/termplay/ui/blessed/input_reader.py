"""Input reader thread - forwards key presses to the control handler."""

import threading
from typing import Callable, Optional

from loguru import logger

from termplay.domain.playback.messages import ControlChannel, KeyEvent

from .terminal import TerminalFacility


class InputReader:
    """Blocks on terminal input in a background thread.

    The thread is a daemon: it spends its life inside a blocking read and is
    never joined. A read failure ends the thread and calls on_failure.
    """

    def __init__(
        self,
        terminal: TerminalFacility,
        channel: ControlChannel,
        on_failure: Callable[[], None],
    ):
        self.terminal = terminal
        self.channel = channel
        self.on_failure = on_failure
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self.thread = threading.Thread(target=self._run, daemon=True, name="InputReader")
        self.thread.start()

    def _run(self) -> None:
        while True:
            try:
                key = self.terminal.read_event()
            except (OSError, ValueError) as e:
                logger.error(f"Error reading input: {e}")
                self.on_failure()
                return
            self.channel.put(KeyEvent(key))
