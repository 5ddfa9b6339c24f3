"""Playback domain - play order, shared session state and mpv integration.

This domain handles:
- Play order for sequential, shuffled and truly random modes
- Live volume steps
- Session state shared between the driver and the controls
- Messages sent to the control handler
- MPV player integration via JSON IPC
"""

from .driver import PlaybackDriver
from .exceptions import (
    ControlThreadCrashError,
    EmptyPlaylistError,
    PlaybackAbortedError,
    PlaybackError,
    SongOpenError,
    StreamSetupError,
    TerminalModeError,
    UnrecognizedFormatError,
)
from .messages import (
    ControlChannel,
    ControlMessage,
    KeyEvent,
    RecoverableError,
    SongStarted,
    Terminate,
    make_channel,
)
from .order import pass_order, random_pick
from .player import (
    AudioEngine,
    AudioSource,
    MpvEngine,
    is_valid_audio_file,
    probe_audio_file,
)
from .state import PlaybackState, SharedPlaybackState
from .volume import MAX_VOLUME, MIN_VOLUME, VOLUME_RATIO, adjust_volume

__all__ = [
    # Driver
    "PlaybackDriver",
    # Errors
    "ControlThreadCrashError",
    "EmptyPlaylistError",
    "PlaybackAbortedError",
    "PlaybackError",
    "SongOpenError",
    "StreamSetupError",
    "TerminalModeError",
    "UnrecognizedFormatError",
    # Messages
    "ControlChannel",
    "ControlMessage",
    "KeyEvent",
    "RecoverableError",
    "SongStarted",
    "Terminate",
    "make_channel",
    # Order
    "pass_order",
    "random_pick",
    # Player
    "AudioEngine",
    "AudioSource",
    "MpvEngine",
    "is_valid_audio_file",
    "probe_audio_file",
    # State
    "PlaybackState",
    "SharedPlaybackState",
    # Volume
    "MAX_VOLUME",
    "MIN_VOLUME",
    "VOLUME_RATIO",
    "adjust_volume",
]
