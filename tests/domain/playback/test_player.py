"""
Tests for audio probing and the mpv engine, driven without an mpv process.
"""

import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from termplay.core.config import PlayerConfig
from termplay.domain.playback.exceptions import (
    SongOpenError,
    StreamSetupError,
    UnrecognizedFormatError,
)
from termplay.domain.playback.player import (
    LOADFILE_REQUEST_ID,
    AudioSource,
    MpvEngine,
    command_succeeded,
    gain_to_mpv_volume,
    get_mpv_property,
    is_valid_audio_file,
    probe_audio_file,
    send_mpv_command,
)


class TestProbe:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SongOpenError) as exc_info:
            probe_audio_file(tmp_path / "missing.mp3")

        assert not isinstance(exc_info.value, UnrecognizedFormatError)
        assert isinstance(exc_info.value.cause, OSError)

    def test_text_file_is_unrecognized(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("definitely not audio\n" * 10)

        with pytest.raises(UnrecognizedFormatError, match="Unrecognized format, skipping."):
            probe_audio_file(path)

    def test_is_valid_audio_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("text")

        assert is_valid_audio_file(path) is False
        assert is_valid_audio_file(tmp_path / "missing.ogg") is False


class TestVolumeMapping:
    @pytest.mark.parametrize(
        "gain,volume",
        [(0.0, 0.0), (1.0, 100.0), (0.125, 50.0), (8.0, 200.0)],
    )
    def test_cube_root(self, gain, volume):
        assert gain_to_mpv_volume(gain) == pytest.approx(volume)

    def test_max_gain_fits_default_volume_max(self):
        assert gain_to_mpv_volume(3.0) <= PlayerConfig().volume_max


class TestIpcHelpers:
    def test_no_socket(self):
        assert send_mpv_command(None, ["stop"]) is None

    def test_missing_socket_file(self, tmp_path):
        assert send_mpv_command(str(tmp_path / "sock"), ["stop"]) is None
        assert get_mpv_property(str(tmp_path / "sock"), "pause") is None

    def test_command_succeeded(self):
        assert command_succeeded({"error": "success"})
        assert not command_succeeded({"error": "property unavailable"})
        assert not command_succeeded(None)


class TestMpvEngine:
    def test_start_without_mpv(self):
        engine = MpvEngine(PlayerConfig())

        with patch("termplay.domain.playback.player.check_mpv_available", return_value=False):
            with pytest.raises(StreamSetupError, match="mpv not found"):
                engine.start()

        assert not engine.is_running()

    def test_clear_without_process(self):
        engine = MpvEngine()

        engine.clear()

        assert engine._cleared.is_set()

    def test_play_without_process_fails(self, tmp_path):
        engine = MpvEngine()

        with pytest.raises(SongOpenError):
            engine.play(AudioSource(tmp_path / "a.mp3", "MP3"), 1.0)

    def test_stop_is_idempotent(self):
        engine = MpvEngine()
        engine.stop()
        engine.stop()

        assert engine.socket_path is None



class ScriptedConnection:
    """Stands in for MpvConnection, replaying a fixed list of mpv messages.

    Once the script runs out every read times out, like an idle socket.
    """

    def __init__(self, messages, read_delay=0.0):
        self.messages = list(messages)
        self.read_delay = read_delay
        self.sent = []

    def __call__(self, socket_path, timeout):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def send(self, command, request_id=None):
        self.sent.append((command, request_id))

    def read_message(self):
        if self.messages:
            return self.messages.pop(0)
        time.sleep(self.read_delay)
        return None


LOADED = {"request_id": LOADFILE_REQUEST_ID, "error": "success", "data": None}
STARTED = {"event": "start-file", "playlist_entry_id": 1}
ENDED = {"event": "end-file", "reason": "eof", "playlist_entry_id": 1}


@pytest.fixture
def running_engine():
    """MpvEngine that believes mpv is up, with property commands stubbed out."""
    engine = MpvEngine(PlayerConfig(poll_interval=0.01, startup_timeout=0.2))
    engine.socket_path = "/tmp/termplay-test.sock"
    with patch.object(MpvEngine, "is_running", return_value=True), patch(
        "termplay.domain.playback.player.send_mpv_command",
        return_value={"error": "success"},
    ):
        yield engine


def play_scripted(engine, connection, name="song.wav"):
    with patch("termplay.domain.playback.player.MpvConnection", connection):
        engine.play(AudioSource(Path(name), "WAVE"), 1.0)


class TestMpvEnginePlay:
    """Test how play() follows mpv's events to the end of a song."""

    def test_returns_when_file_ends(self, running_engine):
        connection = ScriptedConnection([LOADED, STARTED, ENDED])

        play_scripted(running_engine, connection)

        assert connection.sent == [
            (["loadfile", "song.wav", "replace"], LOADFILE_REQUEST_ID)
        ]

    def test_song_shorter_than_poll_interval(self, running_engine):
        """A file that ended before the first read still counts as played."""
        connection = ScriptedConnection(
            [STARTED, ENDED, LOADED], read_delay=0.05
        )
        start = time.monotonic()

        play_scripted(running_engine, connection, "short.wav")

        assert time.monotonic() - start < running_engine.config.startup_timeout

    def test_end_before_start_is_ignored(self, running_engine):
        """Only an end-file after this file's start-file ends the song."""
        running_engine.config.startup_timeout = 5.0
        connection = ScriptedConnection(
            [{"event": "end-file", "reason": "stop"}, LOADED, STARTED, ENDED]
        )

        play_scripted(running_engine, connection)

        assert connection.messages == []

    def test_loadfile_rejected(self, running_engine):
        connection = ScriptedConnection(
            [{"request_id": LOADFILE_REQUEST_ID, "error": "unrecognized file format"}]
        )

        with pytest.raises(SongOpenError, match="Unable to play audio file"):
            play_scripted(running_engine, connection)

    def test_decode_error_reported(self, running_engine):
        connection = ScriptedConnection(
            [LOADED, STARTED, {"event": "end-file", "reason": "error"}]
        )

        with pytest.raises(SongOpenError, match="Unable to play audio file"):
            play_scripted(running_engine, connection)

    def test_never_starts_within_deadline(self, running_engine):
        connection = ScriptedConnection([LOADED], read_delay=0.01)

        with pytest.raises(SongOpenError, match="Unable to play audio file"):
            play_scripted(running_engine, connection)

    def test_mpv_dies_mid_song(self, running_engine):
        connection = ScriptedConnection([LOADED, STARTED], read_delay=0.01)

        with patch.object(MpvEngine, "is_running", side_effect=[True, True, True, False]):
            with pytest.raises(SongOpenError, match="Audio engine stopped"):
                play_scripted(running_engine, connection)

    def test_connection_failure(self, running_engine):
        def refuse(socket_path, timeout):
            raise ConnectionRefusedError("no mpv")

        with pytest.raises(SongOpenError, match="Unable to play audio file"):
            play_scripted(running_engine, refuse)

    def test_clear_cuts_playing_song_short(self, running_engine):
        connection = ScriptedConnection([LOADED, STARTED], read_delay=0.01)
        errors = []

        def run():
            try:
                play_scripted(running_engine, connection)
            except SongOpenError as e:
                errors.append(e)

        running_engine.config.startup_timeout = 5.0
        thread = threading.Thread(target=run)
        thread.start()
        time.sleep(0.05)

        running_engine.clear()
        thread.join(timeout=2.0)

        assert not thread.is_alive()
        assert errors == []
        assert not running_engine._cleared.is_set()

    def test_clear_between_songs_skips_next(self, running_engine):
        """A skip pressed before play() starts is not lost."""
        connection = ScriptedConnection([LOADED, STARTED, ENDED])

        running_engine.clear()
        play_scripted(running_engine, connection)

        assert connection.sent == []
        assert not running_engine._cleared.is_set()

        play_scripted(running_engine, connection)
        assert len(connection.sent) == 1


class TestSendMpvCommand:
    def test_skips_event_lines_before_reply(self, tmp_path):
        socket_file = tmp_path / "mpv.sock"
        socket_file.touch()
        connection = ScriptedConnection(
            [
                {"event": "playback-restart"},
                {},
                {"error": "success", "data": False},
            ]
        )

        with patch("termplay.domain.playback.player.MpvConnection", connection):
            reply = send_mpv_command(str(socket_file), ["get_property", "pause"])

        assert reply == {"error": "success", "data": False}
        assert connection.sent == [(["get_property", "pause"], None)]

    def test_timeout_without_reply(self, tmp_path):
        socket_file = tmp_path / "mpv.sock"
        socket_file.touch()
        connection = ScriptedConnection([{"event": "idle"}])

        with patch("termplay.domain.playback.player.MpvConnection", connection):
            assert send_mpv_command(str(socket_file), ["stop"]) is None
