"""
Tests for the input reader thread.
"""

import threading

from termplay.domain.playback.messages import KeyEvent, make_channel
from termplay.ui.blessed.input_reader import InputReader


def test_forwards_keys_in_order(fake_terminal):
    channel = make_channel()
    reader = InputReader(fake_terminal, channel, on_failure=lambda: None)
    fake_terminal.push_key("h")
    fake_terminal.push_key("KEY_UP")

    reader.start()

    first = channel.get(timeout=2)
    second = channel.get(timeout=2)
    assert isinstance(first, KeyEvent) and str(first.key) == "h"
    assert isinstance(second, KeyEvent) and second.key.name == "KEY_UP"
    assert reader.thread.daemon


def test_read_failure_calls_on_failure_and_ends(fake_terminal):
    channel = make_channel()
    failed = threading.Event()
    reader = InputReader(fake_terminal, channel, on_failure=failed.set)
    fake_terminal.fail_reads()

    reader.start()

    assert failed.wait(timeout=2)
    reader.thread.join(timeout=2)
    assert not reader.thread.is_alive()
    assert channel.empty()
