"""Playlists domain - songs, playlist settings and JSON persistence.

This domain handles:
- Song and playlist models with duplicate-free insertion
- Loading/saving playlist documents
- Scanning files and directories into songs
- Editing playlists (add songs, settings, validation)
"""

from .editing import add_path_to_playlist, edit_playlist, validate_playlist
from .exceptions import DuplicateSongError, PlaylistError, PlaylistStoreError
from .models import Playlist, PlaylistConfig, RandomMode, Song, SongConfig, parse_volume
from .store import (
    add_songs,
    load_playlist,
    load_songs,
    make_playlist_from_path,
    save_playlist,
)

__all__ = [
    # Models
    "Playlist",
    "PlaylistConfig",
    "RandomMode",
    "Song",
    "SongConfig",
    "parse_volume",
    # Errors
    "DuplicateSongError",
    "PlaylistError",
    "PlaylistStoreError",
    # Store
    "add_songs",
    "load_playlist",
    "load_songs",
    "make_playlist_from_path",
    "save_playlist",
    # Editing
    "add_path_to_playlist",
    "edit_playlist",
    "validate_playlist",
]
