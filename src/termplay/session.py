"""
Play session orchestration for termplay

Builds the session state, starts the control handler and input reader
threads, runs the playback driver on the calling thread and shuts
everything down in order.
"""

import random
from pathlib import Path
from typing import Optional

from loguru import logger

from termplay.core.config import Config
from termplay.domain import playlists
from termplay.domain.playback import (
    EmptyPlaylistError,
    MpvEngine,
    PlaybackAbortedError,
    PlaybackDriver,
    PlaybackState,
    SharedPlaybackState,
    Terminate,
    make_channel,
)
from termplay.domain.playback.player import AudioEngine
from termplay.ui.blessed import (
    BlessedTerminal,
    ControlHandler,
    InputReader,
    TerminalFacility,
    abort_playback,
)


def prepare_playback(
    file: Path,
    as_playlist: bool,
    volume: Optional[float] = None,
    config: Optional[Config] = None,
) -> PlaybackState:
    """Load or build the playlist for a play session.

    Args:
        file: Playlist document, or a song file / directory of songs
        as_playlist: Treat file as a playlist document (enables saving)
        volume: Overrides the playlist volume for this session
        config: Application configuration

    Raises:
        PlaylistStoreError: If the playlist or path cannot be read
        EmptyPlaylistError: If there is nothing to play
    """
    config = config or Config()
    save_path = None

    if as_playlist:
        save_path = file
        playlist = playlists.load_playlist(file)
    else:
        playlist = playlists.make_playlist_from_path(file, config.library)

    if volume is not None:
        playlist.config.volume = volume
    if playlist.song_count() == 0:
        raise EmptyPlaylistError()

    return PlaybackState(save_path=save_path, playlist=playlist)


def run_session(
    state: PlaybackState,
    engine: AudioEngine,
    terminal: TerminalFacility,
    repeat: bool = False,
    rng: Optional[random.Random] = None,
) -> None:
    """Play a session to completion with live controls.

    Raises:
        EmptyPlaylistError: If the playlist has no songs; no thread is started
        ControlThreadCrashError: If the control handler died
        PlaybackAbortedError: If the controls failed and forced a stop
    """
    if state.playlist.song_count() == 0:
        raise EmptyPlaylistError()

    shared = SharedPlaybackState(state)
    channel = make_channel()

    handler = ControlHandler(shared, engine, terminal, channel)
    handler.start()

    reader = InputReader(terminal, channel, on_failure=lambda: abort_playback(shared, engine))
    reader.start()

    driver = PlaybackDriver(shared, engine, channel, rng)
    logger.info(
        f"Session started: {state.playlist.song_count()} songs, "
        f"mode={state.playlist.config.random}, repeat={repeat}"
    )
    try:
        driver.run(repeat)
    finally:
        # Tell the controls we are done and wait for them to clean up
        channel.put(Terminate())
        handler.join()

    if shared.had_error():
        raise PlaybackAbortedError()
    logger.info("Session finished")


def play(
    file: Path,
    as_playlist: bool = False,
    repeat: bool = False,
    volume: Optional[float] = None,
    config: Optional[Config] = None,
) -> None:
    """Run the play command against mpv and the real terminal."""
    config = config or Config()
    state = prepare_playback(file, as_playlist, volume, config)

    with MpvEngine(config.player) as engine:
        run_session(state, engine, BlessedTerminal(), repeat)
