"""
Playlist editing operations used by the edit command.
"""

from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from termplay.core.config import LibraryConfig
from termplay.core.output import log

from .models import Playlist, RandomMode, Song
from .store import add_songs, load_songs


def add_path_to_playlist(
    playlist: Playlist, path: Path, library: Optional[LibraryConfig] = None
) -> int:
    """Add a file or every file of a directory to a playlist.

    Duplicates are reported and skipped.

    Returns:
        Number of songs added

    Raises:
        PlaylistStoreError: If the path is neither a file nor a directory.
    """
    added = add_songs(playlist, load_songs(path, library))
    logger.info(f"Added {added} songs from {path}")
    return added


def validate_playlist(playlist: Playlist, is_valid_audio: Callable[[Path], bool]) -> int:
    """Drop songs the audio engine cannot decode.

    Returns:
        Number of songs removed
    """

    def keep(song: Song) -> bool:
        valid = is_valid_audio(song.path)
        if not valid:
            log(f"Filtered invalid audio file: {song}", level="warning")
        return valid

    before = playlist.song_count()
    playlist.validate_songs(keep)
    return before - playlist.song_count()


def edit_playlist(
    playlist: Playlist,
    file: Optional[Path] = None,
    volume: Optional[float] = None,
    random: Optional[RandomMode] = None,
    validate: bool = False,
    library: Optional[LibraryConfig] = None,
    is_valid_audio: Optional[Callable[[Path], bool]] = None,
) -> Playlist:
    """Apply the edit command's options to a playlist.

    Songs are added before validation so freshly added files are checked too.

    Raises:
        PlaylistStoreError: If file is neither a file nor a directory.
    """
    if file is not None:
        add_path_to_playlist(playlist, file, library)
    if volume is not None:
        playlist.config.volume = volume
    if random is not None:
        playlist.config.random = random
    if validate:
        if is_valid_audio is None:
            from termplay.domain.playback.player import is_valid_audio_file

            is_valid_audio = is_valid_audio_file
        validate_playlist(playlist, is_valid_audio)
    return playlist
