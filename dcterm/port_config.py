"""Serial line parameters and their mapping onto pyserial."""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Union

import serial

BAUD_RATES = (1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200)

# Reads only ever ask for what is already waiting.
READ_TIMEOUT_S = 0
WRITE_TIMEOUT_S = 2

PORT_LABEL_TEXT = " Port: %s "
BAUD_RATE_LABEL_TEXT = " Baud Rate: %s "
DATA_BITS_LABEL_TEXT = " Data Bits: %s "
PARITY_LABEL_TEXT = " Parity: %s "
STOP_BITS_LABEL_TEXT = " Stop Bits: %s "
FLOW_CONTROL_LABEL_TEXT = " Flow Control: %s "


class _LabeledEnum(Enum):
    """Enum whose members carry (value, label) and parse from either."""

    def __new__(cls, value, label):
        obj = object.__new__(cls)
        obj._value_ = value
        obj.label = label
        return obj

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError(f"{value!r} is not a valid {cls.__name__}")
        for member in cls:
            if value == member.value or value == member.label or value == member.name:
                return member
        if isinstance(value, str):
            text = value.strip().lower()
            for member in cls:
                if text in (member.label.lower(), member.name.lower(), str(member.value).lower()):
                    return member
        raise ValueError(f"{value!r} is not a valid {cls.__name__}")

    def __str__(self):
        return self.label


class DataBits(_LabeledEnum):
    FIVE = (5, "5")
    SIX = (6, "6")
    SEVEN = (7, "7")
    EIGHT = (8, "8")


class Parity(_LabeledEnum):
    NONE = ("N", "None")
    EVEN = ("E", "Even")
    ODD = ("O", "Odd")


class StopBits(_LabeledEnum):
    ONE = (1, "1")
    TWO = (2, "2")


class FlowControl(_LabeledEnum):
    NONE = ("none", "No Flow Control")
    HARDWARE = ("hardware", "Hardware Control")
    SOFTWARE = ("software", "Software Control")


def parse_baud_rate(value: Union[int, str]) -> int:
    """Accept any positive integer (or its decimal text)."""
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid baud rate")
    try:
        rate = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{value!r} is not a valid baud rate") from None
    if isinstance(value, float) and rate != value:
        raise ValueError(f"{value!r} is not a valid baud rate")
    if rate <= 0:
        raise ValueError(f"{value!r} is not a valid baud rate")
    return rate


@dataclass(frozen=True)
class PortConfiguration:
    port_name: str = ""
    baud_rate: int = 2400
    data_bits: DataBits = DataBits.EIGHT
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    flow_control: FlowControl = FlowControl.HARDWARE

    def with_changes(self, **changes) -> "PortConfiguration":
        return replace(self, **changes)

    def to_kwargs(self):
        parity_map = {Parity.NONE: serial.PARITY_NONE, Parity.EVEN: serial.PARITY_EVEN,
                      Parity.ODD: serial.PARITY_ODD}
        stop_map = {StopBits.ONE: serial.STOPBITS_ONE, StopBits.TWO: serial.STOPBITS_TWO}
        byte_map = {DataBits.FIVE: serial.FIVEBITS, DataBits.SIX: serial.SIXBITS,
                    DataBits.SEVEN: serial.SEVENBITS, DataBits.EIGHT: serial.EIGHTBITS}
        return dict(
            baudrate=self.baud_rate,
            bytesize=byte_map[self.data_bits],
            parity=parity_map[self.parity],
            stopbits=stop_map[self.stop_bits],
            rtscts=self.flow_control is FlowControl.HARDWARE,
            xonxoff=self.flow_control is FlowControl.SOFTWARE,
            timeout=READ_TIMEOUT_S, write_timeout=WRITE_TIMEOUT_S
        )

    def status_labels(self) -> Dict[str, str]:
        """Texts for the status bar, keyed by field name."""
        return {
            "port_name": PORT_LABEL_TEXT % (self.port_name or "N/A"),
            "baud_rate": BAUD_RATE_LABEL_TEXT % self.baud_rate,
            "data_bits": DATA_BITS_LABEL_TEXT % self.data_bits.label,
            "parity": PARITY_LABEL_TEXT % self.parity.label,
            "stop_bits": STOP_BITS_LABEL_TEXT % self.stop_bits.label,
            "flow_control": FLOW_CONTROL_LABEL_TEXT % self.flow_control.label,
        }
