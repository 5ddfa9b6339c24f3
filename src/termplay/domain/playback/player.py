"""
MPV audio engine with JSON IPC for termplay

One mpv process lives for the whole session. Songs are loaded into it one at
a time and play() blocks until the song ends or clear() cuts it short.
"""

import json
import os
import socket
import subprocess
import threading
import time
from pathlib import Path
from typing import Any, NamedTuple, Optional, Protocol

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from termplay.core.config import PlayerConfig

from .exceptions import SongOpenError, StreamSetupError, UnrecognizedFormatError

# Tags the loadfile reply among the event lines on a play connection
LOADFILE_REQUEST_ID = 1


class AudioSource(NamedTuple):
    """A song file that was checked to be decodable."""

    path: Path
    format: str


class AudioEngine(Protocol):
    """What the playback driver and the controls need from an audio backend."""

    def open(self, path: Path) -> AudioSource: ...

    def play(self, source: AudioSource, gain: float) -> None: ...

    def set_gain(self, gain: float) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def is_paused(self) -> bool: ...

    def clear(self) -> None: ...


def probe_audio_file(path: Path) -> AudioSource:
    """Check that a file can be opened and holds audio mutagen recognizes.

    Raises:
        SongOpenError: If the file cannot be opened
        UnrecognizedFormatError: If the file is not a known audio format
    """
    try:
        with open(path, "rb") as f:
            audio = MutagenFile(f)
    except OSError as e:
        raise SongOpenError(cause=e) from e
    except MutagenError as e:
        raise UnrecognizedFormatError(e) from e

    if audio is None:
        raise UnrecognizedFormatError()

    return AudioSource(Path(path), type(audio).__name__)


def is_valid_audio_file(path: Path) -> bool:
    """True if the file exists and is audio the engine can decode."""
    try:
        probe_audio_file(path)
    except SongOpenError:
        return False
    return True


def gain_to_mpv_volume(gain: float) -> float:
    """Convert a linear amplitude gain to an mpv volume percentage.

    mpv applies (volume / 100) ** 3 as amplitude, so take the cube root.
    """
    return 100.0 * max(gain, 0.0) ** (1.0 / 3.0)


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


class MpvConnection:
    """One client connection to mpv's JSON IPC socket.

    mpv writes command replies and events to every client as JSON lines, so
    read_message() returns both; replies carry an "error" key, events an
    "event" key.
    """

    def __init__(self, socket_path: str, timeout: float):
        self.sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._buffer = b""
        try:
            self.sock.settimeout(timeout)
            self.sock.connect(socket_path)
        except OSError:
            self.sock.close()
            raise

    def __enter__(self) -> "MpvConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.sock.close()

    def send(self, command: list[Any], request_id: Optional[int] = None) -> None:
        message: dict[str, Any] = {"command": command}
        if request_id is not None:
            message["request_id"] = request_id
        self.sock.sendall((json.dumps(message) + "\n").encode("utf-8"))

    def read_message(self) -> Optional[dict]:
        """Next message from mpv, or None if nothing arrived within the timeout.

        Raises:
            OSError: If the connection fails or mpv closed it.
        """
        while b"\n" not in self._buffer:
            try:
                chunk = self.sock.recv(4096)
            except socket.timeout:
                return None
            if not chunk:
                raise ConnectionError("mpv closed the IPC connection")
            self._buffer += chunk

        line, self._buffer = self._buffer.split(b"\n", 1)
        try:
            return json.loads(line.decode("utf-8", errors="replace"))
        except json.JSONDecodeError:
            logger.debug(f"Ignoring malformed mpv line: {line!r}")
            return {}


def send_mpv_command(socket_path: Optional[str], command: list[Any]) -> Optional[dict]:
    """Send one JSON IPC command to MPV and return its reply, or None on failure.

    Event lines that arrive before the reply are skipped.
    """
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with MpvConnection(socket_path, timeout=2.0) as conn:
            conn.send(command)
            while True:
                message = conn.read_message()
                if message is None:
                    logger.debug(f"mpv command {command[0]} timed out")
                    return None
                if "error" in message:
                    return message
    except OSError as e:
        logger.debug(f"mpv command {command[0]} failed: {e}")
        return None


def command_succeeded(reply: Optional[dict]) -> bool:
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV, or None if unavailable."""
    reply = send_mpv_command(socket_path, ["get_property", property_name])
    if command_succeeded(reply):
        return reply.get("data")
    return None


class MpvEngine:
    """Audio engine backed by an idle mpv process."""

    def __init__(self, config: Optional[PlayerConfig] = None):
        self.config = config or PlayerConfig()
        self.socket_path: Optional[str] = None
        self.process: Optional[subprocess.Popen] = None
        self._cleared = threading.Event()

    def __enter__(self) -> "MpvEngine":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def start(self) -> None:
        """Start mpv with JSON IPC.

        Raises:
            StreamSetupError: If mpv is missing or does not come up in time.
        """
        if not check_mpv_available():
            raise StreamSetupError("Unable to create audio stream: mpv not found")

        socket_path = self.config.socket_path()
        logger.info(f"Starting MPV player with socket: {socket_path}")

        if os.path.exists(socket_path):
            logger.debug(f"Removing existing socket: {socket_path}")
            os.unlink(socket_path)

        cmd = [
            "mpv",
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            "--keep-open=no",
            "--load-scripts=no",
            f"--input-ipc-server={socket_path}",
            f"--volume-max={self.config.volume_max}",
        ]

        try:
            self.process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except OSError as e:
            raise StreamSetupError("Unable to create audio stream", e) from e

        self.socket_path = socket_path
        deadline = time.monotonic() + self.config.startup_timeout
        while not command_succeeded(
            send_mpv_command(socket_path, ["get_property", "idle-active"])
        ):
            if self.process.poll() is not None or time.monotonic() > deadline:
                logger.error("MPV did not come up")
                self.stop()
                raise StreamSetupError("Unable to start audio stream")
            time.sleep(0.1)

        logger.info("MPV started successfully")

    def stop(self) -> None:
        """Stop MPV process and cleanup."""
        if self.process:
            try:
                self.process.kill()
                self.process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.warning(f"MPV cleanup: {e}")
            self.process = None

        if self.socket_path and os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass
        self.socket_path = None

    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def open(self, path: Path) -> AudioSource:
        return probe_audio_file(path)

    def play(self, source: AudioSource, gain: float) -> None:
        """Play a source to the end, or until clear() is called.

        A clear() that arrived since the previous song ended skips this one
        without loading it.

        Raises:
            SongOpenError: If mpv refuses or fails to play the file, or dies.
        """
        try:
            if self._cleared.is_set():
                logger.debug(f"Skipping {source.path}: cleared before start")
                return
            if not self.is_running() or not self.socket_path:
                raise SongOpenError("Audio engine stopped")

            self.set_gain(gain)
            self.resume()
            try:
                with MpvConnection(self.socket_path, self.config.poll_interval) as conn:
                    conn.send(
                        ["loadfile", str(source.path), "replace"],
                        request_id=LOADFILE_REQUEST_ID,
                    )
                    logger.debug(f"Playing {source.path} at gain {gain:.3f}")
                    self._wait_for_end(conn)
            except OSError as e:
                raise SongOpenError("Unable to play audio file", e) from e
        finally:
            self._cleared.clear()

    def _wait_for_end(self, conn: MpvConnection) -> None:
        """Follow mpv's events until the loaded file ends or clear() is called.

        Events queue up on the connection, so a file that ends before the
        first read is still seen as started and finished.
        """
        started = False
        start_deadline = time.monotonic() + self.config.startup_timeout

        while not self._cleared.is_set():
            if not self.is_running():
                raise SongOpenError("Audio engine stopped")

            message = conn.read_message()
            if message is None:
                if not started and time.monotonic() > start_deadline:
                    raise SongOpenError("Unable to play audio file")
                continue

            if message.get("request_id") == LOADFILE_REQUEST_ID:
                if message.get("error") != "success":
                    raise SongOpenError("Unable to play audio file")
                continue

            event = message.get("event")
            if event == "start-file":
                started = True
            elif event == "end-file" and started:
                if message.get("reason") == "error":
                    raise SongOpenError("Unable to play audio file")
                return

    def set_gain(self, gain: float) -> None:
        volume = min(gain_to_mpv_volume(gain), float(self.config.volume_max))
        send_mpv_command(self.socket_path, ["set_property", "volume", volume])

    def pause(self) -> None:
        send_mpv_command(self.socket_path, ["set_property", "pause", True])

    def resume(self) -> None:
        send_mpv_command(self.socket_path, ["set_property", "pause", False])

    def is_paused(self) -> bool:
        return get_mpv_property(self.socket_path, "pause") is True

    def clear(self) -> None:
        """Abort the current song; a blocked play() returns promptly.

        The request is kept until a play() consumes it, so a skip pressed
        between two songs skips the song that starts next.
        """
        self._cleared.set()
        send_mpv_command(self.socket_path, ["stop"])
