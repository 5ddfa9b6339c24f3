"""
Playback session state shared between the playback driver and the controls.

Every access goes through SharedPlaybackState, which holds the lock only
long enough to read or update the state. Callers get copies back and do
their I/O (audio engine, terminal, disk) after the lock is released.
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from termplay.domain.playlists.models import Playlist, RandomMode, Song

from .volume import adjust_volume


@dataclass
class PlaybackState:
    """Mutable state of one play session.

    Attributes:
        save_path: Where the save key writes the playlist; None in direct play
        playlist: Songs and settings being played
        stopped: Set once the session should wind down; never reset
        had_error: Set when the controls failed and forced a stop
    """

    save_path: Optional[Path]
    playlist: Playlist
    stopped: bool = False
    had_error: bool = False


class SharedPlaybackState:
    """Lock-guarded access to a PlaybackState."""

    def __init__(self, state: PlaybackState):
        self._state = state
        self._lock = threading.Lock()

    def is_stopped(self) -> bool:
        with self._lock:
            return self._state.stopped

    def had_error(self) -> bool:
        with self._lock:
            return self._state.had_error

    def stop(self) -> None:
        with self._lock:
            self._state.stopped = True
        logger.info("Playback stop requested")

    def abort(self) -> None:
        """Mark the session as failed and stop it."""
        with self._lock:
            self._state.had_error = True
            self._state.stopped = True
        logger.warning("Playback aborted by controls")

    def pass_inputs(self) -> tuple[int, RandomMode]:
        """Song count and random mode needed to plan the next pass."""
        with self._lock:
            playlist = self._state.playlist
            return playlist.song_count(), playlist.config.random

    def snapshot(self, index: int) -> tuple[Song, float]:
        """Copy of the song at index and its current effective gain."""
        with self._lock:
            playlist = self._state.playlist
            return playlist.song(index).copy(), playlist.effective_gain(index)

    def song_label(self, index: int) -> str:
        with self._lock:
            return str(self._state.playlist.song(index))

    def adjust_song_volume(self, index: int, increase: bool) -> tuple[float, float]:
        """Step the volume of one song.

        Returns:
            Tuple of (new song volume, new effective gain)
        """
        with self._lock:
            playlist = self._state.playlist
            song = playlist.song(index)
            song.config.volume = adjust_volume(song.config.volume, increase)
            return song.config.volume, playlist.effective_gain(index)

    def save_request(self) -> tuple[Optional[Path], Playlist]:
        """Save path and a copy of the playlist to write outside the lock."""
        with self._lock:
            return self._state.save_path, self._state.playlist.copy()
