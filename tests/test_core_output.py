"""
Tests for core errors and loguru setup.
"""

import sys

from loguru import logger

from termplay.core.exceptions import TermplayError
from termplay.core.output import log, setup_loguru


def test_error_without_cause():
    assert str(TermplayError("Playlist is empty")) == "Playlist is empty"


def test_error_appends_cause():
    error = TermplayError("Unable to save to x.json", OSError("disk full"))

    assert str(error) == "Unable to save to x.json: disk full"
    assert error.message == "Unable to save to x.json"


def test_setup_loguru_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "termplay.log"

    setup_loguru(log_file, level="debug")
    try:
        logger.debug("debug line")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text()
    assert "Loguru initialized" in content
    assert "debug line" in content


def test_log_prints_message(capsys):
    log("Song already exists: a.mp3", level="warning")

    assert "Song already exists: a.mp3" in capsys.readouterr().out
