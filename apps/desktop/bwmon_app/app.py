"""Desktop window that renders the shared snapshot on a Qt timer."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QFont, QIcon
from PySide6.QtWidgets import QApplication, QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from bwmon_core import AppConfig, load_config
from bwmon_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from bwmon_telemetry import Sampler, SnapshotStore

from .view import FOOTER, HEADING, STORAGE_HEADING, TITLE, PanelText, format_panel


ICON_PATH = Path("assets") / "favicon.ico"


def _separator() -> QFrame:
    line = QFrame()
    line.setFrameShape(QFrame.Shape.HLine)
    line.setFrameShadow(QFrame.Shadow.Sunken)
    return line


def _heading(text: str) -> QLabel:
    label = QLabel(text)
    font = QFont(label.font())
    font.setPointSizeF(font.pointSizeF() * 1.4)
    font.setBold(True)
    label.setFont(font)
    return label


class MonitorWindow(QWidget):
    """Read-only consumer: pulls the latest snapshot each tick, never writes it."""

    def __init__(self, store: SnapshotStore, config: AppConfig) -> None:
        super().__init__()
        self.store = store
        self.config = config
        self.setWindowTitle(TITLE)
        if config.ui.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

        self._labels: dict[str, QLabel] = {name: QLabel() for name in PanelText.__dataclass_fields__}
        self._labels["gpu"].setMaximumWidth(360)
        self._labels["gpu"].setWordWrap(True)

        left = QVBoxLayout()
        for name in ("cpu", "ram"):
            left.addWidget(self._labels[name])
        left.addStretch(1)

        right = QVBoxLayout()
        for name in ("gpu", "vram", "pcie_tx", "pcie_rx"):
            right.addWidget(self._labels[name])
        right.addStretch(1)

        columns = QHBoxLayout()
        columns.addLayout(left)
        columns.addSpacing(20)
        columns.addLayout(right)

        footer = QLabel(FOOTER)
        footer.setEnabled(False)

        root = QVBoxLayout(self)
        root.addWidget(_heading(HEADING))
        root.addWidget(_separator())
        root.addLayout(columns)
        root.addWidget(_separator())
        root.addWidget(_heading(STORAGE_HEADING))
        root.addWidget(self._labels["disk_read"])
        root.addWidget(self._labels["disk_write"])
        root.addSpacing(10)
        root.addWidget(footer)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.refresh)
        self._timer.start(config.ui.refresh_ms)
        self.refresh()

    def refresh(self) -> None:
        panel = format_panel(self.store.read())
        for name, label in self._labels.items():
            text = getattr(panel, name)
            if label.text() != text:
                label.setText(text)

    def shutdown(self) -> None:
        self._timer.stop()


def _load_icon() -> QIcon | None:
    if not ICON_PATH.exists():
        return None
    icon = QIcon(str(ICON_PATH))
    return None if icon.isNull() else icon


def run_gui() -> int:
    config = load_config()
    configure_logging(keep_files=config.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    app = QApplication(sys.argv)
    app.setApplicationName(TITLE)

    icon = _load_icon()
    if icon is not None:
        app.setWindowIcon(icon)

    store = SnapshotStore()
    sampler = Sampler(store, interval_s=config.sampler_interval_s)
    sampler.start()

    window = MonitorWindow(store, config)
    window.show()

    exit_code = app.exec()
    window.shutdown()
    # The sampler thread is a daemon; process exit ends it.
    logger.info("app shutdown", extra={"event": "shutdown", "exit_code": int(exit_code)})
    return int(exit_code)
