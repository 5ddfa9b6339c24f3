"""Playlist-specific exceptions for error handling."""

from pathlib import Path

from termplay.core.exceptions import TermplayError


class PlaylistError(TermplayError):
    """Base exception for playlist operations."""

    pass


class DuplicateSongError(PlaylistError):
    """Raised when a song with the same path is already in the playlist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Song already exists: {path}")


class PlaylistStoreError(PlaylistError):
    """Raised when a playlist or song path cannot be read or written."""

    pass
