"""pyserial-backed serial channel and port enumeration."""

from __future__ import annotations
import logging
from typing import Callable, List, Optional

import serial
import serial.tools.list_ports

# --- PyInstaller-friendly forced imports for pyserial URL handlers ---
import serial.urlhandler.protocol_loop    # noqa: F401

from PySide6.QtCore import QTimer

from .port_config import PortConfiguration

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 10
LOOPBACK_URL = "loop://"


def available_ports() -> List[str]:
    """Device names of the serial ports currently present."""
    return sorted(p.device for p in serial.tools.list_ports.comports())


class SerialChannel:
    """
    One serial port. Readiness is polled by a QTimer on the thread that
    opened the channel, so ``on_readable`` always runs on that thread.
    """

    def __init__(self, poll_interval_ms: int = POLL_INTERVAL_MS):
        self.on_readable: Optional[Callable[[], None]] = None
        self.on_error: Optional[Callable[[str], None]] = None
        self._poll_interval_ms = poll_interval_ms
        self._ser: Optional[serial.SerialBase] = None
        self._timer: Optional[QTimer] = None

    @property
    def is_open(self) -> bool:
        return bool(self._ser and self._ser.is_open)

    def open(self, cfg: PortConfiguration):
        if self.is_open:
            self.close()
        # Works for URLs (loop://) and normal device names.
        self._ser = serial.serial_for_url(cfg.port_name, **cfg.to_kwargs())
        logger.debug("Opened %s with %s", cfg.port_name, cfg.to_kwargs())
        self._timer = QTimer()
        self._timer.setInterval(self._poll_interval_ms)
        self._timer.timeout.connect(self._poll)
        self._timer.start()

    def write(self, payload: bytes):
        self._ser.write(payload)

    def read_available(self) -> bytes:
        waiting = self._ser.in_waiting
        if not waiting:
            return b""
        return bytes(self._ser.read(waiting))

    def flush(self):
        if self.is_open:
            self._ser.flush()

    def reset_input(self):
        if self.is_open:
            self._ser.reset_input_buffer()

    def close(self):
        self._stop_timer()
        if self._ser:
            ser, self._ser = self._ser, None
            ser.close()

    def _stop_timer(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    def _poll(self):
        if not self.is_open:
            return
        try:
            if self._ser.in_waiting and self.on_readable:
                self.on_readable()
        except (serial.SerialException, OSError) as e:
            self._stop_timer()
            logger.warning("I/O error on %s: %s", getattr(self._ser, "port", "?"), e)
            if self.on_error:
                self.on_error(str(e))
