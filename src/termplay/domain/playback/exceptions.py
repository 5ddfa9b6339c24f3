"""Playback-specific exceptions for error handling."""

from typing import Optional

from termplay.core.exceptions import TermplayError


class PlaybackError(TermplayError):
    """Base exception for playback sessions."""

    pass


class EmptyPlaylistError(PlaybackError):
    """Raised before a session starts when there is nothing to play."""

    def __init__(self) -> None:
        super().__init__("Playlist is empty")


class StreamSetupError(PlaybackError):
    """Raised when the audio engine cannot be started."""

    pass


class SongOpenError(PlaybackError):
    """Raised when a single song cannot be opened or played.

    Recoverable: the song is skipped and the session continues.
    """

    def __init__(
        self, message: str = "Unable to open audio file", cause: Optional[BaseException] = None
    ):
        super().__init__(message, cause)


class UnrecognizedFormatError(SongOpenError):
    """Raised when a file opens fine but is not audio the engine can decode."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Unrecognized format, skipping.", cause)


class TerminalModeError(PlaybackError):
    """Raised when the terminal cannot be switched into key-at-a-time mode."""

    pass


class ControlThreadCrashError(PlaybackError):
    """Raised when the control handler thread died from an unexpected error."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Controls crashed", cause)


class PlaybackAbortedError(PlaybackError):
    """Raised after a session whose controls failed and forced a stop."""

    def __init__(self) -> None:
        super().__init__("Playback aborted")
