"""Shared fixtures: in-memory stand-ins for the audio engine and the terminal."""

import queue
import threading
from pathlib import Path
from typing import Callable, Optional

import pytest
from blessed.keyboard import Keystroke

from termplay.domain.playback.exceptions import (
    SongOpenError,
    TerminalModeError,
    UnrecognizedFormatError,
)
from termplay.domain.playback.player import AudioSource
from termplay.domain.playlists.models import Playlist, PlaylistConfig, RandomMode, Song

KEY_CODES = {"KEY_UP": 259, "KEY_DOWN": 258, "KEY_RIGHT": 261, "KEY_LEFT": 260}
KEY_SEQUENCES = {"KEY_UP": "\x1b[A", "KEY_DOWN": "\x1b[B", "KEY_RIGHT": "\x1b[C", "KEY_LEFT": "\x1b[D"}


def key(name_or_char: str) -> Keystroke:
    """Build a blessed Keystroke for a character or a KEY_* name."""
    if name_or_char in KEY_CODES:
        return Keystroke(
            ucs=KEY_SEQUENCES[name_or_char],
            code=KEY_CODES[name_or_char],
            name=name_or_char,
        )
    return Keystroke(ucs=name_or_char)


def make_playlist(*names: str, random: RandomMode = RandomMode.OFF, volume: float = 1.0) -> Playlist:
    return Playlist(PlaylistConfig(volume=volume, random=random), [Song(Path(n)) for n in names])


class FakeEngine:
    """Records what the driver and controls ask of the audio engine.

    Songs named in `blocking` play until clear() is called, everything else
    finishes immediately.
    """

    def __init__(
        self,
        unrecognized: tuple[str, ...] = (),
        unopenable: tuple[str, ...] = (),
        blocking: tuple[str, ...] = (),
    ):
        self.unrecognized = set(unrecognized)
        self.unopenable = set(unopenable)
        self.blocking = set(blocking)
        self.played: list[tuple[Path, float]] = []
        self.gains: list[float] = []
        self.paused = False
        self.clear_count = 0
        self.on_play: Optional[Callable[[AudioSource, float], None]] = None
        self._cleared = threading.Event()

    def open(self, path: Path) -> AudioSource:
        if path.name in self.unrecognized:
            raise UnrecognizedFormatError()
        if path.name in self.unopenable:
            raise SongOpenError()
        return AudioSource(path, "fake")

    def play(self, source: AudioSource, gain: float) -> None:
        self._cleared.clear()
        self.played.append((source.path, gain))
        if self.on_play is not None:
            self.on_play(source, gain)
        if source.path.name in self.blocking:
            assert self._cleared.wait(timeout=5.0), "song was never cleared"

    @property
    def played_names(self) -> list[str]:
        return [path.name for path, _ in self.played]

    def set_gain(self, gain: float) -> None:
        self.gains.append(gain)

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def is_paused(self) -> bool:
        return self.paused

    def clear(self) -> None:
        self.clear_count += 1
        self._cleared.set()


class FakeTerminal:
    """Terminal that reads keys from a queue and records output."""

    def __init__(self, raw_mode_error: bool = False):
        self.raw_mode_error = raw_mode_error
        self.raw_mode = False
        self.raw_mode_enabled_count = 0
        self.output: list[tuple[str, str]] = []
        self.finished = False
        self._keys: "queue.Queue[Keystroke | Exception]" = queue.Queue()

    def push_key(self, name_or_char: str) -> None:
        self._keys.put(key(name_or_char))

    def fail_reads(self) -> None:
        self._keys.put(OSError("input closed"))

    def enable_raw_mode(self) -> None:
        if self.raw_mode_error:
            raise TerminalModeError("Error enabling raw mode")
        self.raw_mode = True
        self.raw_mode_enabled_count += 1

    def disable_raw_mode(self) -> None:
        self.raw_mode = False

    def read_event(self) -> Keystroke:
        item = self._keys.get()
        if isinstance(item, Exception):
            raise item
        return item

    def write_message(self, text: str) -> None:
        self.output.append(("message", text))

    def write_action(self, text: str) -> None:
        self.output.append(("action", text))

    def write_error(self, text: str) -> None:
        self.output.append(("error", text))

    def finish_line(self) -> None:
        self.finished = True

    def texts(self, kind: Optional[str] = None) -> list[str]:
        return [text for k, text in self.output if kind is None or k == kind]


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def playlist_factory() -> Callable[..., Playlist]:
    return make_playlist


@pytest.fixture
def keystroke() -> Callable[[str], Keystroke]:
    return key


@pytest.fixture
def engine_factory() -> type[FakeEngine]:
    return FakeEngine


@pytest.fixture
def terminal_factory() -> type[FakeTerminal]:
    return FakeTerminal
