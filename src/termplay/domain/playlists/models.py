"""
Playlist domain models.

A playlist is an ordered collection of songs plus playlist-wide settings.
Song order is meaningful: it is the play order when random mode is off.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from .exceptions import DuplicateSongError


class RandomMode(Enum):
    """How the next song is chosen.

    OFF plays in playlist order, SHUFFLE permutes the playlist once per pass,
    TRUE picks every song independently and uniformly (repeats allowed).
    """

    OFF = "Off"
    TRUE = "True"
    SHUFFLE = "Shuffle"

    @classmethod
    def from_cli(cls, value: str) -> "RandomMode":
        """Parse the command line spelling (off / on / shuffle)."""
        try:
            return _CLI_NAMES[value.lower()]
        except KeyError:
            raise ValueError(f"Invalid random mode: {value!r}") from None

    @property
    def cli_name(self) -> str:
        return _CLI_SPELLINGS[self]

    def __str__(self) -> str:
        return self.value


_CLI_NAMES = {
    "off": RandomMode.OFF,
    "on": RandomMode.TRUE,
    "shuffle": RandomMode.SHUFFLE,
}
_CLI_SPELLINGS = {mode: name for name, mode in _CLI_NAMES.items()}


def parse_volume(value: Any) -> float:
    """Read a persisted volume, which must be a finite number >= 0.

    Raises:
        ValueError: If the value is negative, NaN or infinite.
    """
    volume = float(value)
    if not math.isfinite(volume) or volume < 0:
        raise ValueError(f"Invalid volume: {value!r}")
    return volume


@dataclass
class SongConfig:
    """Per-song settings."""

    volume: float = 1.0


@dataclass
class PlaylistConfig:
    """Playlist-wide settings."""

    volume: float = 1.0
    random: RandomMode = RandomMode.OFF

    def __str__(self) -> str:
        return f"Volume: {self.volume}; Random mode: {self.random}"


@dataclass
class Song:
    """A song is identified by its source path."""

    path: Path
    config: SongConfig = field(default_factory=SongConfig)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def copy(self) -> "Song":
        return Song(self.path, SongConfig(self.config.volume))

    def __str__(self) -> str:
        # Fall back to the full path when there is no file name to show
        return self.path.name or str(self.path)


class Playlist:
    """Ordered, duplicate-free collection of songs."""

    def __init__(
        self, config: Optional[PlaylistConfig] = None, songs: Optional[list[Song]] = None
    ):
        self.config = config if config is not None else PlaylistConfig()
        self._songs: list[Song] = []
        for song in songs or []:
            self.add_song(song)

    def song(self, index: int) -> Optional[Song]:
        """Song at index, or None when out of range."""
        if 0 <= index < len(self._songs):
            return self._songs[index]
        return None

    def song_count(self) -> int:
        return len(self._songs)

    @property
    def songs(self) -> tuple[Song, ...]:
        return tuple(self._songs)

    def __iter__(self) -> Iterator[Song]:
        return iter(self._songs)

    def __len__(self) -> int:
        return len(self._songs)

    def add_song(self, song: Song) -> None:
        """Append a song.

        Raises:
            DuplicateSongError: If a song with the same path exists. The
                playlist is left unchanged.
        """
        for existing in self._songs:
            if existing.path == song.path:
                raise DuplicateSongError(existing.path)
        self._songs.append(song)

    def validate_songs(self, is_valid: Callable[[Song], bool]) -> None:
        """Keep only the songs for which is_valid returns True."""
        self._songs = [song for song in self._songs if is_valid(song)]

    def copy(self) -> "Playlist":
        """Independent copy, safe to serialize without holding a lock."""
        return Playlist(
            PlaylistConfig(self.config.volume, self.config.random),
            [song.copy() for song in self._songs],
        )

    def effective_gain(self, index: int) -> float:
        """Output gain of a song: its own volume times the playlist volume."""
        song = self._songs[index]
        return song.config.volume * self.config.volume

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": {
                "volume": self.config.volume,
                "random": self.config.random.value,
            },
            "songs": [
                {"path": str(song.path), "config": {"volume": song.config.volume}}
                for song in self._songs
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Playlist":
        """Build a playlist from its persisted layout.

        Raises:
            KeyError, TypeError, ValueError: On a malformed document.
            DuplicateSongError: If the document lists a path twice.
        """
        config_data = data["config"]
        config = PlaylistConfig(
            volume=parse_volume(config_data["volume"]),
            random=RandomMode(config_data["random"]),
        )
        songs = [
            Song(Path(s["path"]), SongConfig(volume=parse_volume(s["config"]["volume"])))
            for s in data["songs"]
        ]
        return cls(config, songs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Playlist):
            return NotImplemented
        return self.config == other.config and self._songs == other._songs

    def __repr__(self) -> str:
        return f"Playlist(config={self.config!r}, songs={self._songs!r})"

    def __str__(self) -> str:
        lines = ["  Settings:", str(self.config), "  Songs:"]
        lines.extend(str(song) for song in self._songs)
        return "\n".join(lines)
