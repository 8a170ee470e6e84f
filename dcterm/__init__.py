"""dcTerm — a dumb terminal for a serial port (PySide6 + pyserial)."""

__version__ = "1.0.0"

from .port_config import DataBits, FlowControl, Parity, PortConfiguration, StopBits  # noqa: E402
from .session import (  # noqa: E402
    NotConnected, PortOpenFailed, PortSessionController, PortWriteFailed, SessionError, SessionState,
)

__all__ = [
    "DataBits", "FlowControl", "Parity", "PortConfiguration", "StopBits",
    "NotConnected", "PortOpenFailed", "PortSessionController", "PortWriteFailed", "SessionError", "SessionState",
]
