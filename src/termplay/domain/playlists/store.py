"""
Playlist persistence and song discovery.

Playlists are stored as JSON documents. Plain files and directories can be
turned into songs without a playlist document for direct play.
"""

import json
from pathlib import Path
from typing import Optional

from loguru import logger

from termplay.core.config import LibraryConfig
from termplay.core.output import log

from .exceptions import DuplicateSongError, PlaylistStoreError
from .models import Playlist, Song


def load_playlist(path: Path) -> Playlist:
    """Read a playlist document.

    Raises:
        PlaylistStoreError: If the file cannot be read or is not a playlist.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        playlist = Playlist.from_dict(data)
    except OSError as e:
        raise PlaylistStoreError(f"Unable to read playlist {path}", e) from e
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise PlaylistStoreError(f"Invalid playlist file {path}", e) from e
    except DuplicateSongError as e:
        raise PlaylistStoreError(f"Invalid playlist file {path}", e) from e

    logger.debug(f"Loaded playlist {path} ({playlist.song_count()} songs)")
    return playlist


def save_playlist(playlist: Playlist, path: Path) -> None:
    """Write a playlist document, replacing any existing file.

    Raises:
        PlaylistStoreError: If the file cannot be written.
    """
    try:
        Path(path).write_text(json.dumps(playlist.to_dict()), encoding="utf-8")
    except OSError as e:
        raise PlaylistStoreError(f"Unable to save to {path}", e) from e

    logger.info(f"Saved playlist {path} ({playlist.song_count()} songs)")


def _scan_directory(directory: Path, library: LibraryConfig) -> list[Path]:
    """Regular files of a directory in name order."""
    pattern = directory.rglob("*") if library.scan_recursive else directory.iterdir()
    return sorted(p for p in pattern if p.is_file() and library.accepts(p))


def load_songs(path: Path, library: Optional[LibraryConfig] = None) -> list[Song]:
    """Turn a file into one song, or a directory into one song per file.

    Raises:
        PlaylistStoreError: If the path is neither a file nor a directory,
            or the directory cannot be listed.
    """
    library = library or LibraryConfig()
    path = Path(path)

    if path.is_file():
        return [Song(path)]

    if path.is_dir():
        try:
            files = _scan_directory(path, library)
        except OSError as e:
            raise PlaylistStoreError(f"Unable to read directory {path}", e) from e
        logger.debug(f"Scanned {path}: {len(files)} files")
        return [Song(p) for p in files]

    raise PlaylistStoreError(f"Expected file or directory: {path}")


def add_songs(playlist: Playlist, songs: list[Song]) -> int:
    """Add songs, reporting and skipping duplicates.

    Returns:
        Number of songs actually added
    """
    added = 0
    for song in songs:
        try:
            playlist.add_song(song)
            added += 1
        except DuplicateSongError as e:
            log(str(e), level="warning")
    return added


def make_playlist_from_path(
    path: Path, library: Optional[LibraryConfig] = None
) -> Playlist:
    """Build a fresh playlist from a file or directory."""
    playlist = Playlist()
    add_songs(playlist, load_songs(path, library))
    return playlist
