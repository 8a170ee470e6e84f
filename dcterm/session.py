"""
Port session controller.

Owns the current PortConfiguration and SessionState, applies the
configuration to a serial channel on connect, and relays bytes between the
channel, the input source and the display sink.

A channel is any object with ``open(config)``, ``write(data)``,
``read_available()``, ``flush()``, ``reset_input()``, ``close()`` and the
assignable callbacks ``on_readable()`` / ``on_error(message)``. ``open``
raises the platform's native exception on failure.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, List, Optional

import serial

from .port_config import (
    DataBits, FlowControl, Parity, PortConfiguration, StopBits, parse_baud_rate,
)

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "latin-1"


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SessionError(Exception):
    """Base class for session failures."""


class PortOpenFailed(SessionError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotConnected(SessionError):
    def __init__(self, message: str = "port is not connected"):
        super().__init__(message)


class PortWriteFailed(SessionError):
    """A write failed; the session has been disconnected."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _default_channel_factory():
    from .channel import SerialChannel
    return SerialChannel()


class PortSessionController:
    def __init__(self, display_sink: Optional[Callable[[bytes], None]] = None,
                 channel_factory: Optional[Callable[[], object]] = None,
                 encoding: str = DEFAULT_ENCODING,
                 discard_input_after_read: bool = False):
        self.display_sink = display_sink
        self.encoding = encoding
        self.discard_input_after_read = discard_input_after_read
        self._channel_factory = channel_factory or _default_channel_factory
        self._config = PortConfiguration()
        self._state = SessionState.DISCONNECTED
        self._channel = None
        self._state_listeners: List[Callable[[SessionState], None]] = []
        self._config_listeners: List[Callable[[PortConfiguration], None]] = []

    # ---------- observation ----------
    @property
    def config(self) -> PortConfiguration:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    def add_state_listener(self, callback: Callable[[SessionState], None]):
        self._state_listeners.append(callback)

    def add_config_listener(self, callback: Callable[[PortConfiguration], None]):
        self._config_listeners.append(callback)

    def _set_state(self, state: SessionState):
        if state is self._state:
            return
        logger.info("Session %s -> %s", self._state.value, state.value)
        self._state = state
        for cb in list(self._state_listeners):
            cb(state)

    # ---------- configuration ----------
    def _update(self, field: str, value) -> bool:
        if self._state is not SessionState.DISCONNECTED:
            logger.debug("Ignoring %s=%r while %s", field, value, self._state.value)
            return False
        self._config = self._config.with_changes(**{field: value})
        logger.debug("Configuration %s=%r", field, value)
        for cb in list(self._config_listeners):
            cb(self._config)
        return True

    def set_port_name(self, name: str) -> bool:
        if not isinstance(name, str):
            raise ValueError(f"{name!r} is not a valid port name")
        return self._update("port_name", name.strip())

    def set_baud_rate(self, value) -> bool:
        return self._update("baud_rate", parse_baud_rate(value))

    def set_data_bits(self, value) -> bool:
        return self._update("data_bits", DataBits.parse(value))

    def set_parity(self, value) -> bool:
        return self._update("parity", Parity.parse(value))

    def set_stop_bits(self, value) -> bool:
        return self._update("stop_bits", StopBits.parse(value))

    def set_flow_control(self, value) -> bool:
        return self._update("flow_control", FlowControl.parse(value))

    # ---------- connection ----------
    def connect(self):
        """Open the configured port. Raises PortOpenFailed on failure."""
        if self._state is SessionState.CONNECTED:
            logger.debug("connect() ignored, already connected to %s", self._config.port_name)
            return
        cfg = self._config
        if not cfg.port_name:
            raise PortOpenFailed("No port selected.")

        self._set_state(SessionState.CONNECTING)
        try:
            channel = self._channel_factory()
            channel.open(cfg)
        except Exception as e:
            logger.warning("Open failed on %s: %s", cfg.port_name, e)
            self._set_state(SessionState.DISCONNECTED)
            raise PortOpenFailed(str(e)) from e

        channel.on_readable = self.on_channel_readable
        channel.on_error = self.on_channel_error
        self._channel = channel
        self._set_state(SessionState.CONNECTED)

    def disconnect(self):
        channel, self._channel = self._channel, None
        if channel is None:
            self._set_state(SessionState.DISCONNECTED)
            return
        channel.on_readable = None
        channel.on_error = None
        try:
            channel.flush()
        except (serial.SerialException, OSError) as e:
            logger.warning("Flush failed on %s: %s", self._config.port_name, e)
        try:
            channel.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Close failed on %s: %s", self._config.port_name, e)
        self._set_state(SessionState.DISCONNECTED)

    # ---------- data relay ----------
    def send(self, data):
        if isinstance(data, str):
            data = data.encode(self.encoding, errors="replace")
        if not self.is_connected:
            raise NotConnected()
        try:
            self._channel.write(bytes(data))
        except (serial.SerialException, OSError) as e:
            logger.warning("Write failed on %s: %s", self._config.port_name, e)
            self.on_channel_error(str(e))
            raise PortWriteFailed(str(e)) from e

    def on_channel_readable(self):
        """
        Read everything pending and hand it to the display sink as one chunk.
        Empty reads are not forwarded.
        """
        if not self.is_connected:
            raise NotConnected()
        data = self._channel.read_available()
        if self.discard_input_after_read:
            self._channel.reset_input()
        if data and self.display_sink is not None:
            self.display_sink(bytes(data))

    def on_channel_error(self, message: str):
        logger.error("Channel error on %s: %s", self._config.port_name, message)
        self.disconnect()
