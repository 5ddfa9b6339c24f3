"""
Playback driver - walks the play order and hands songs to the audio engine.

Runs on the main thread. Each song is announced to the control handler with
SongStarted before it streams; songs that fail to open are reported with
RecoverableError and skipped.
"""

import random
from typing import Optional

from loguru import logger

from termplay.domain.playlists.models import RandomMode

from .exceptions import SongOpenError
from .messages import ControlChannel, RecoverableError, SongStarted
from .order import pass_order, random_pick
from .player import AudioEngine
from .state import SharedPlaybackState


class PlaybackDriver:
    """Plays passes over the shared playlist until done or stopped."""

    def __init__(
        self,
        shared: SharedPlaybackState,
        engine: AudioEngine,
        channel: ControlChannel,
        rng: Optional[random.Random] = None,
    ):
        self.shared = shared
        self.engine = engine
        self.channel = channel
        self.rng = rng or random.Random()

    def run(self, repeat: bool) -> None:
        """Play one pass, or keep playing until stopped when repeat is set.

        With repeat and TRUE random mode every song is an independent pick;
        without repeat TRUE plays one shuffled pass like SHUFFLE.
        """
        if not repeat:
            self.play_pass()
            return

        while not self.shared.is_stopped():
            _, mode = self.shared.pass_inputs()
            if mode is RandomMode.TRUE:
                self.play_random_pick()
            else:
                self.play_pass()

    def play_pass(self) -> None:
        count, mode = self.shared.pass_inputs()
        order = pass_order(count, mode, self.rng)
        logger.debug(f"Starting pass: mode={mode}, order={order}")

        for index in order:
            if self.shared.is_stopped():
                logger.info("Playback stopped, abandoning pass")
                break
            self.play_song(index)

    def play_random_pick(self) -> None:
        count, _ = self.shared.pass_inputs()
        self.play_song(random_pick(count, self.rng))

    def play_song(self, index: int) -> None:
        """Announce and play one song; a song that cannot be played is skipped."""
        song, gain = self.shared.snapshot(index)
        self.channel.put(SongStarted(index))

        try:
            source = self.engine.open(song.path)
            self.engine.play(source, gain)
        except SongOpenError as e:
            logger.warning(f"Skipping {song.path}: {e}")
            self.channel.put(RecoverableError(e.message))
