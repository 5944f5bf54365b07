"""
Main window: tesseract canvas in the center, controls in a dock, status in the status bar.
"""
from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QMainWindow, QDockWidget, QScrollArea, QLabel, QToolBar

from sofarotator.app.application import VISIBLE_APP_NAME
from sofarotator.app.animation import AnimationDriver
from sofarotator.app.motion import MotionSource
from sofarotator.app.state import Store
from sofarotator.app.ui.canvas import TesseractCanvas
from sofarotator.app.ui.panels.controls import RotationControlsPanel
from sofarotator.model.integrator import RotationControls
from sofarotator.model.state import ViewState

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, store: Store | None = None) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1100, 800)

        # Global store
        self.store = store or Store()

        # ---- Central: canvas ----
        self.canvas = TesseractCanvas(self)
        self.setCentralWidget(self.canvas)
        self.canvas.viewport_changed.connect(self.store.set_viewport)
        self.store.frame_ready.connect(self.canvas.set_frame)

        # ---- Dock: controls ----
        self.controls_panel = RotationControlsPanel(self.store, parent=self)
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.controls_panel)
        self.dock_controls = QDockWidget(self.tr("Tesseract Controls"), self)
        self.dock_controls.setWidget(scroll)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.dock_controls)

        # ---- Toolbar ----
        toolbar = QToolBar(self.tr("Main"), self)
        self.addToolBar(toolbar)
        self.act_controls = self.dock_controls.toggleViewAction()
        self.act_controls.setText(self.tr("Controls"))
        toolbar.addAction(self.act_controls)

        self.act_auto = QAction(self.tr("Auto-rotate"), self)
        self.act_auto.setCheckable(True)
        self.act_auto.setShortcut(QKeySequence(Qt.Key.Key_Space))
        self.act_auto.toggled.connect(self.store.set_auto_rotate)
        toolbar.addAction(self.act_auto)

        act_reset = QAction(self.tr("Reset"), self)
        act_reset.triggered.connect(self.store.reset_rotation)
        toolbar.addAction(act_reset)

        # ---- Status bar ----
        self.status_mode = QLabel(self)
        self.status_rotation = QLabel(self)
        self.status_section = QLabel(self)
        for w in (self.status_mode, self.status_rotation, self.status_section):
            self.statusBar().addPermanentWidget(w)

        # ---- Drivers ----
        self.animation = AnimationDriver(self.store, parent=self)
        self.motion = MotionSource(self.store, parent=self)

        self.store.controls_changed.connect(self._on_controls_changed)
        self.store.view_changed.connect(self._on_view_changed)
        self._on_controls_changed(self.store.controls)
        self._on_view_changed(self.store.view)

        self.animation.start()

    @Slot(object)
    def _on_controls_changed(self, controls: RotationControls) -> None:
        blocked = self.act_auto.blockSignals(True)
        self.act_auto.setChecked(controls.auto_rotate)
        self.act_auto.blockSignals(blocked)
        self.status_rotation.setText(
            self.tr("Auto Rotating") if controls.auto_rotate else self.tr("Manual Control")
        )

        if controls.motion_enabled:
            if not self.motion.start():
                self.statusBar().showMessage(self.tr("No gyroscope available."), 3000)
        else:
            self.motion.stop()

    @Slot(object)
    def _on_view_changed(self, view: ViewState) -> None:
        self.status_mode.setText(self.tr(view.visualization_mode.value.capitalize()))
        self.status_section.setText(self.tr("Cross-Section") if view.show_cross_section else "")

    def closeEvent(self, event: QCloseEvent) -> None:
        self.animation.stop()
        self.motion.stop()
        super().closeEvent(event)
