"""Control handler thread - keyboard controls and status output for a session.

The handler owns the terminal while playback runs. It consumes the control
channel in arrival order until Terminate, and applies key presses to the
shared playback state and the audio engine.
"""

import threading
from typing import Optional

from loguru import logger

from termplay.domain.playback.exceptions import ControlThreadCrashError, TerminalModeError
from termplay.domain.playback.messages import (
    ControlChannel,
    ControlMessage,
    KeyEvent,
    RecoverableError,
    SongStarted,
    Terminate,
)
from termplay.domain.playback.player import AudioEngine
from termplay.domain.playback.state import SharedPlaybackState
from termplay.domain.playlists.exceptions import PlaylistStoreError
from termplay.domain.playlists.store import save_playlist

from .keys import HELP_TEXT, ControlAction, action_for_key
from .terminal import TerminalFacility


def stop_playback(shared: SharedPlaybackState, engine: AudioEngine) -> None:
    """Stop the session and cut the current song short."""
    shared.stop()
    engine.clear()


def abort_playback(shared: SharedPlaybackState, engine: AudioEngine) -> None:
    """Stop the session because the controls failed."""
    shared.abort()
    engine.clear()


class ControlHandler:
    """Consumes control messages on its own thread."""

    def __init__(
        self,
        shared: SharedPlaybackState,
        engine: AudioEngine,
        terminal: TerminalFacility,
        channel: ControlChannel,
    ):
        self.shared = shared
        self.engine = engine
        self.terminal = terminal
        self.channel = channel
        self.song_index = 0
        self.thread: Optional[threading.Thread] = None
        self._crash: Optional[BaseException] = None

    def start(self) -> None:
        self.thread = threading.Thread(target=self._run_guarded, name="ControlHandler")
        self.thread.start()

    def join(self) -> None:
        """Wait for the handler to finish.

        Raises:
            ControlThreadCrashError: If the handler died from an unexpected error.
        """
        if self.thread is not None:
            self.thread.join()
        if self._crash is not None:
            raise ControlThreadCrashError(self._crash)

    def _run_guarded(self) -> None:
        try:
            self.run()
        except Exception as e:
            logger.exception("Control handler crashed")
            self._crash = e
            abort_playback(self.shared, self.engine)

    def run(self) -> None:
        """Enable raw mode, handle messages until Terminate, restore the terminal."""
        logger.info("Control handler started")
        try:
            self.terminal.enable_raw_mode()
        except TerminalModeError as e:
            logger.error(str(e))
            abort_playback(self.shared, self.engine)
            return

        try:
            self.control_loop()
        except OSError as e:
            logger.error(f"Unexpected terminal error: {e}")
            abort_playback(self.shared, self.engine)
        finally:
            self.terminal.disable_raw_mode()
            self.terminal.finish_line()
            logger.info("Control handler stopped")

    def control_loop(self) -> None:
        self.terminal.write_message(HELP_TEXT)

        while True:
            message = self.channel.get()
            if not self.handle_message(message):
                break

    def handle_message(self, message: ControlMessage) -> bool:
        """Handle one message; returns False once the loop should end."""
        match message:
            case Terminate():
                return False
            case KeyEvent(key=key):
                action = action_for_key(key)
                if action is not None:
                    self.handle_action(action)
            case SongStarted(index=index):
                self.song_index = index
                self.terminal.write_message(f"Playing {self.shared.song_label(index)}")
            case RecoverableError(text=text):
                self.terminal.write_error(text)
        return True

    def handle_action(self, action: ControlAction) -> None:
        logger.debug(f"Control action: {action.value}")
        match action:
            case ControlAction.QUIT:
                stop_playback(self.shared, self.engine)
            case ControlAction.HELP:
                self.terminal.write_action(HELP_TEXT)
            case ControlAction.TOGGLE_PAUSE:
                self.toggle_pause()
            case ControlAction.VOLUME_UP:
                self.adjust_volume(increase=True)
            case ControlAction.VOLUME_DOWN:
                self.adjust_volume(increase=False)
            case ControlAction.NEXT:
                self.engine.clear()
                self.engine.resume()
            case ControlAction.SAVE:
                self.save()

    def toggle_pause(self) -> None:
        if self.engine.is_paused():
            self.engine.resume()
            self.terminal.write_action("Play")
        else:
            self.engine.pause()
            self.terminal.write_action("Pause")

    def adjust_volume(self, increase: bool) -> None:
        volume, gain = self.shared.adjust_song_volume(self.song_index, increase)
        self.terminal.write_action(f"Volume {volume * 100:.0f}%")
        self.engine.set_gain(gain)

    def save(self) -> None:
        save_path, playlist = self.shared.save_request()
        if save_path is None:
            self.terminal.write_error("Unable to save: Direct play mode.")
            return

        try:
            save_playlist(playlist, save_path)
        except PlaylistStoreError as e:
            logger.error(str(e))
            self.terminal.write_error(f"Unable to save to {save_path}, error: {e.cause}")
            return
        self.terminal.write_action(f"Successfully saved to {save_path}")
