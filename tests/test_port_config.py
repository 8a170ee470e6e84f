"""Unit tests for dcterm.port_config."""

import pytest
import serial

from dcterm.port_config import (
    DataBits, FlowControl, Parity, PortConfiguration, StopBits, parse_baud_rate,
)


class TestDefaults:
    def test_defaults(self):
        cfg = PortConfiguration()
        assert cfg.port_name == ""
        assert cfg.baud_rate == 2400
        assert cfg.data_bits is DataBits.EIGHT
        assert cfg.parity is Parity.NONE
        assert cfg.stop_bits is StopBits.ONE
        assert cfg.flow_control is FlowControl.HARDWARE

    def test_is_frozen(self):
        with pytest.raises(Exception):
            PortConfiguration().baud_rate = 9600


class TestParse:
    @pytest.mark.parametrize("value, expected", [
        (8, DataBits.EIGHT), ("5", DataBits.FIVE), (DataBits.SIX, DataBits.SIX),
    ])
    def test_data_bits(self, value, expected):
        assert DataBits.parse(value) is expected

    @pytest.mark.parametrize("value, expected", [
        ("None", Parity.NONE), ("even", Parity.EVEN), ("O", Parity.ODD),
    ])
    def test_parity(self, value, expected):
        assert Parity.parse(value) is expected

    def test_flow_control_by_label(self):
        assert FlowControl.parse("Software Control") is FlowControl.SOFTWARE
        assert FlowControl.parse("hardware") is FlowControl.HARDWARE

    @pytest.mark.parametrize("value", [4, 9, "x", None, 1.5])
    def test_rejects_unknown_data_bits(self, value):
        with pytest.raises(ValueError):
            DataBits.parse(value)

    @pytest.mark.parametrize("enum_cls, value", [
        (StopBits, True), (DataBits, 8.0), (Parity, None), (FlowControl, b"none"),
    ])
    def test_rejects_non_text_non_int(self, enum_cls, value):
        with pytest.raises(ValueError):
            enum_cls.parse(value)

    def test_rejects_mark_parity(self):
        with pytest.raises(ValueError):
            Parity.parse("Mark")

    def test_baud_rate(self):
        assert parse_baud_rate("9600") == 9600
        assert parse_baud_rate(250000) == 250000

    @pytest.mark.parametrize("value", [0, -9600, "fast", True, 9600.5, None])
    def test_baud_rate_rejects(self, value):
        with pytest.raises(ValueError):
            parse_baud_rate(value)


class TestToKwargs:
    def test_maps_line_settings(self):
        cfg = PortConfiguration(port_name="COM3", baud_rate=9600, data_bits=DataBits.SEVEN,
                                parity=Parity.EVEN, stop_bits=StopBits.TWO,
                                flow_control=FlowControl.NONE)
        kw = cfg.to_kwargs()
        assert kw["baudrate"] == 9600
        assert kw["bytesize"] == serial.SEVENBITS
        assert kw["parity"] == serial.PARITY_EVEN
        assert kw["stopbits"] == serial.STOPBITS_TWO
        assert kw["rtscts"] is False and kw["xonxoff"] is False

    def test_reads_never_block(self):
        kw = PortConfiguration().to_kwargs()
        assert kw["timeout"] == 0
        assert kw["write_timeout"] > 0

    def test_hardware_flow_control_is_rtscts(self):
        kw = PortConfiguration(flow_control=FlowControl.HARDWARE).to_kwargs()
        assert kw["rtscts"] is True and kw["xonxoff"] is False

    def test_software_flow_control_is_xonxoff(self):
        kw = PortConfiguration(flow_control=FlowControl.SOFTWARE).to_kwargs()
        assert kw["rtscts"] is False and kw["xonxoff"] is True


class TestStatusLabels:
    def test_unset_port_shows_na(self):
        labels = PortConfiguration().status_labels()
        assert labels["port_name"] == " Port: N/A "
        assert labels["baud_rate"] == " Baud Rate: 2400 "
        assert labels["data_bits"] == " Data Bits: 8 "
        assert labels["parity"] == " Parity: None "
        assert labels["stop_bits"] == " Stop Bits: 1 "
        assert labels["flow_control"] == " Flow Control: Hardware Control "

    def test_port_name(self):
        assert PortConfiguration(port_name="COM3").status_labels()["port_name"] == " Port: COM3 "
