#!/usr/bin/env python3
"""
dcTerm — dumb terminal for a serial port

Pick a port and its line settings from the menus, Connection → Connect, then
type: every key goes out on the port and everything received is shown.

Quick test (no hardware): Tools → Use loopback (loop://), then Connect.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Dict, List, Optional

from PySide6.QtCore import Slot
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QMenu, QMessageBox, QStatusBar

from . import __version__
from .channel import LOOPBACK_URL, available_ports
from .console import Console
from .log import configure_root
from .port_config import BAUD_RATES, DataBits, FlowControl, Parity, PortConfiguration, StopBits
from .session import NotConnected, PortOpenFailed, PortSessionController, PortWriteFailed, SessionState

logger = logging.getLogger(__name__)

TITLE_UNDETECTABLE = "dcTerm - Unable to Detect Any Ports"
TITLE_CONNECTED = "dcTerm - Connected on %s"
TITLE_CONNECTING = "dcTerm - Connecting..."
TITLE_DISCONNECTED = "dcTerm - Disconnected"

ERROR_CANNOT_OPEN = "An error occured while opening port."

LABEL_ORDER = ("port_name", "baud_rate", "data_bits", "parity", "stop_bits", "flow_control")


# ---------------- Main window ----------------
class MainWindow(QMainWindow):
    def __init__(self, controller: Optional[PortSessionController] = None,
                 ports: Optional[List[str]] = None):
        super().__init__()
        self.setWindowTitle(TITLE_DISCONNECTED); self.resize(800, 500)

        self.console = Console(self); self.console.setEnabled(False)
        self.setCentralWidget(self.console)

        self.controller = controller or PortSessionController()
        self.controller.encoding = self.console.encoding
        self.controller.display_sink = self.console.display_data

        # Settings actions per field, keyed by the value they select
        self._choice_actions: Dict[str, Dict[object, QAction]] = {}
        self._port_actions: Dict[str, QAction] = {}

        self._build_menu()
        self._build_status_bar()
        self._populate_ports(available_ports() if ports is None else ports)

        # Wiring
        self.console.key_pressed.connect(self._on_key)
        self.controller.add_state_listener(self._on_state)
        self.controller.add_config_listener(self._on_config)
        self._on_config(self.controller.config)
        self._on_state(self.controller.state)

    def _build_menu(self):
        bar = self.menuBar()

        conn = bar.addMenu("&Connection")
        self.act_connect = QAction("Connect", self); self.act_connect.triggered.connect(self._connect); conn.addAction(self.act_connect)
        self.act_disconnect = QAction("Disconnect", self); self.act_disconnect.triggered.connect(self._disconnect); conn.addAction(self.act_disconnect)
        conn.addSeparator(); act_close = QAction("Close", self); act_close.triggered.connect(self.close); conn.addAction(act_close)

        self.port_menu = bar.addMenu("&Port")
        self._port_group = QActionGroup(self); self._port_group.setExclusive(True)

        self.settings_menu = bar.addMenu("&Settings")
        self._add_choice_menu("Baud Rate", "baud_rate", [(str(r), r) for r in BAUD_RATES], self.controller.set_baud_rate)
        self._add_choice_menu("Data Bits", "data_bits", [(m.label, m) for m in DataBits], self.controller.set_data_bits)
        self._add_choice_menu("Parity", "parity", [(m.label, m) for m in Parity], self.controller.set_parity)
        self._add_choice_menu("Stop Bits", "stop_bits", [(m.label, m) for m in StopBits], self.controller.set_stop_bits)
        self._add_choice_menu("Flow Control", "flow_control", [(m.label, m) for m in FlowControl], self.controller.set_flow_control)

        tools = bar.addMenu("&Tools")
        act_loop = QAction(f"Use loopback ({LOOPBACK_URL})", self)
        act_loop.triggered.connect(lambda: self.controller.set_port_name(LOOPBACK_URL)); tools.addAction(act_loop)

        help_menu = bar.addMenu("&Help")
        act_about = QAction("About", self); act_about.triggered.connect(self._about); help_menu.addAction(act_about)

    def _add_choice_menu(self, title: str, field: str, choices, setter):
        menu: QMenu = self.settings_menu.addMenu(title)
        group = QActionGroup(self); group.setExclusive(True)
        actions = {}
        for text, value in choices:
            act = QAction(text, self); act.setCheckable(True)
            act.triggered.connect(lambda checked=False, v=value: setter(v))
            group.addAction(act); menu.addAction(act)
            actions[value] = act
        self._choice_actions[field] = actions

    def _build_status_bar(self):
        self.status = QStatusBar(); self.setStatusBar(self.status)
        self.labels: Dict[str, QLabel] = {}
        for field in LABEL_ORDER:
            lbl = QLabel(self.status); self.status.addPermanentWidget(lbl)
            self.labels[field] = lbl

    def _populate_ports(self, ports: List[str]):
        if not ports:
            self.port_menu.setEnabled(False)
            self.setWindowTitle(TITLE_UNDETECTABLE)
            logger.warning("No serial ports detected")
            return
        for name in ports:
            act = QAction(name, self); act.setObjectName(name); act.setCheckable(True)
            act.triggered.connect(lambda checked=False, n=name: self.controller.set_port_name(n))
            self._port_group.addAction(act); self.port_menu.addAction(act)
            self._port_actions[name] = act

    def _about(self):
        QMessageBox.information(self, "About dcTerm",
            f"dcTerm {__version__} — PySide6 + pyserial terminal.\n"
            f"Tip: Tools → Use loopback to verify without hardware.")

    # Slots
    @Slot()
    def _connect(self):
        try:
            self.controller.connect()
        except PortOpenFailed as e:
            self._show_error(e.message)
            self.status.showMessage(ERROR_CANNOT_OPEN)

    def _show_error(self, message: str):
        QMessageBox.critical(self, "Error", message)

    @Slot()
    def _disconnect(self):
        self.controller.disconnect()

    @Slot(bytes)
    def _on_key(self, payload: bytes):
        try:
            self.controller.send(payload)
        except NotConnected:
            logger.debug("Dropped %d typed bytes, not connected", len(payload))
        except PortWriteFailed as e:
            self.status.showMessage(f"Write failed: {e.message}", 4000)

    def _on_state(self, state: SessionState):
        connected = state is SessionState.CONNECTED
        idle = state is SessionState.DISCONNECTED
        self.act_connect.setEnabled(idle)
        self.act_disconnect.setEnabled(connected)
        self.console.setEnabled(connected)
        self.settings_menu.setEnabled(idle)
        self.port_menu.setEnabled(idle and bool(self._port_actions))
        if connected:
            self.setWindowTitle(TITLE_CONNECTED % self.controller.config.port_name)
            self.status.clearMessage(); self.console.setFocus()
        elif state is SessionState.CONNECTING:
            self.setWindowTitle(TITLE_CONNECTING)
            self.repaint()
        elif self._port_actions or self.windowTitle() != TITLE_UNDETECTABLE:
            self.setWindowTitle(TITLE_DISCONNECTED)

    def _on_config(self, cfg: PortConfiguration):
        for field, text in cfg.status_labels().items():
            self.labels[field].setText(text)
        for field, actions in self._choice_actions.items():
            act = actions.get(getattr(cfg, field))
            if act is not None:
                act.setChecked(True)
        act = self._port_actions.get(cfg.port_name)
        if act is not None:
            act.setChecked(True)

    def closeEvent(self, e):
        try: self.controller.disconnect()
        finally: super().closeEvent(e)


# --------------- main ---------------
def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="dcterm", description="Dumb terminal for a serial port.")
    parser.add_argument("--log-level", default="WARNING", help="root log level (default: WARNING)")
    args, qt_args = parser.parse_known_args(sys.argv[1:] if argv is None else argv)
    configure_root(args.log_level)

    app = QApplication([sys.argv[0]] + qt_args)
    win = MainWindow()
    win.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
