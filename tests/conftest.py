"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
import serial  # noqa: E402


class StubChannel:
    """In-memory channel that records every call made by the controller."""

    def __init__(self, open_error=None):
        self.open_error = open_error
        self.on_readable = None
        self.on_error = None
        self.opened_with = None
        self.written = bytearray()
        self.incoming = bytearray()
        self.calls = []

    def open(self, cfg):
        self.calls.append("open")
        if self.open_error is not None:
            raise self.open_error
        self.opened_with = cfg

    def write(self, data):
        self.calls.append("write")
        self.written.extend(data)

    def read_available(self):
        self.calls.append("read_available")
        data, self.incoming = bytes(self.incoming), bytearray()
        return data

    def flush(self):
        self.calls.append("flush")

    def reset_input(self):
        self.calls.append("reset_input")

    def close(self):
        self.calls.append("close")


@pytest.fixture
def channels():
    """Every StubChannel handed out by the factory fixture, in order."""
    return []


@pytest.fixture
def channel_factory(channels):
    def factory():
        ch = StubChannel()
        channels.append(ch)
        return ch
    return factory


@pytest.fixture
def failing_factory(channels):
    def factory():
        ch = StubChannel(open_error=serial.SerialException("access denied"))
        channels.append(ch)
        return ch
    return factory


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def stub_channel_cls():
    return StubChannel
