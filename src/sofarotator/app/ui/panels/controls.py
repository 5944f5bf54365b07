from __future__ import annotations

from functools import partial

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QGridLayout, QLabel, QRadioButton, QButtonGroup,
    QCheckBox, QDoubleSpinBox, QPushButton, QHBoxLayout, QSizePolicy, QStackedWidget,
)

from sofarotator.config import (
    GLOBAL_SPEED_RANGE, SLIDER_RANGE, MOTION_SENSITIVITY_RANGE, CROSS_SECTION_RANGE,
)
from sofarotator.app.state import Store
from sofarotator.app.ui.panels.base import BasePanel
from sofarotator.model.integrator import RotationControls
from sofarotator.model.projection import ProjectionMode
from sofarotator.model.rotation import RotationPlane
from sofarotator.model.state import ViewState
from sofarotator.model.tesseract import VisualizationMode

PLANE_LABELS = {
    RotationPlane.XW: "4D Rotation (XW)",
    RotationPlane.YZ: "Height (YZ)",
    RotationPlane.XY: "Horizontal (XY)",
    RotationPlane.ZW: "Depth (ZW)",
}


def _make_spin(
    parent: QWidget,
    *,
    min_value: float,
    max_value: float,
    step: float = 0.05,
    value: float = 0.0,
    suffix: str = "",
    decimals: int = 2
) -> QDoubleSpinBox:
    w = QDoubleSpinBox(parent)
    w.setRange(min_value, max_value)
    w.setSingleStep(step)
    w.setDecimals(decimals)
    w.setValue(value)
    w.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
    if suffix:
        w.setSuffix(f" {suffix}")
    return w


class RotationControlsPanel(BasePanel):
    """
    Side panel with every user-facing parameter of the visualization.

    Top to bottom: visualization mode, projection mode, cross-section,
    rotation (uniform or per-plane speeds, plane locks), motion control.
    All edits go straight to the Store.
    """
    def __init__(self, store: Store, parent: QWidget | None = None) -> None:
        super().__init__(store, parent)
        root = QVBoxLayout(self)

        root.addWidget(self._build_visualization_box())
        root.addWidget(self._build_projection_box())
        root.addWidget(self._build_cross_section_box())
        root.addWidget(self._build_rotation_box())
        root.addWidget(self._build_motion_box())
        root.addStretch()

        self.store.controls_changed.connect(self._sync_controls)
        self.store.view_changed.connect(self._sync_view)
        self._sync_controls(self.store.controls)
        self._sync_view(self.store.view)

    # ---- builders ----

    def _build_visualization_box(self) -> QGroupBox:
        box = QGroupBox(self.tr("Visualization"), self)
        row = QHBoxLayout(box)
        self.visualization_group = QButtonGroup(box)
        self._visualization_buttons: dict[VisualizationMode, QRadioButton] = {}
        for mode, label in ((VisualizationMode.WIREFRAME, "Wireframe"), (VisualizationMode.SOLID, "Solid")):
            btn = QRadioButton(self.tr(label), box)
            btn.toggled.connect(partial(self._on_mode_toggled, self.store.set_visualization_mode, mode))
            self.visualization_group.addButton(btn)
            self._visualization_buttons[mode] = btn
            row.addWidget(btn)
        return box

    def _build_projection_box(self) -> QGroupBox:
        box = QGroupBox(self.tr("Projection"), self)
        row = QHBoxLayout(box)
        self.projection_group = QButtonGroup(box)
        self._projection_buttons: dict[ProjectionMode, QRadioButton] = {}
        for mode, label in ((ProjectionMode.PERSPECTIVE, "Perspective"), (ProjectionMode.ORTHOGRAPHIC, "Orthographic")):
            btn = QRadioButton(self.tr(label), box)
            btn.toggled.connect(partial(self._on_mode_toggled, self.store.set_projection_mode, mode))
            self.projection_group.addButton(btn)
            self._projection_buttons[mode] = btn
            row.addWidget(btn)
        return box

    def _build_cross_section_box(self) -> QGroupBox:
        box = QGroupBox(self.tr("Cross Section"), self)
        grid = QGridLayout(box)
        self.check_cross_section = QCheckBox(self.tr("Show"), box)
        self.check_cross_section.toggled.connect(self.store.set_cross_section_visible)
        grid.addWidget(self.check_cross_section, 0, 0, 1, 2)

        grid.addWidget(QLabel(self.tr("Position (w):"), box), 1, 0)
        self.spin_cross_section = _make_spin(box, min_value=CROSS_SECTION_RANGE[0], max_value=CROSS_SECTION_RANGE[1])
        self.spin_cross_section.valueChanged.connect(self.store.set_cross_section_position)
        grid.addWidget(self.spin_cross_section, 1, 1)
        return box

    def _build_rotation_box(self) -> QGroupBox:
        box = QGroupBox(self.tr("Rotation Control"), self)
        v = QVBoxLayout(box)

        self.check_auto = QCheckBox(self.tr("Uniform speed (auto-rotate)"), box)
        self.check_auto.toggled.connect(self.store.set_auto_rotate)
        v.addWidget(self.check_auto)

        # speed column: auto speeds on page 0, manual slider positions on page 1
        self.speed_stack = QStackedWidget(box)
        self.speed_stack.addWidget(self._build_auto_page())
        self.speed_stack.addWidget(self._build_manual_page())
        v.addWidget(self.speed_stack)

        locks = QGridLayout()
        self._lock_checks: dict[RotationPlane, QCheckBox] = {}
        for i, plane in enumerate(RotationPlane):
            chk = QCheckBox(self.tr("Lock {plane}").format(plane=plane.value.upper()), box)
            chk.toggled.connect(partial(self._on_lock_toggled, plane))
            locks.addWidget(chk, i // 2, i % 2)
            self._lock_checks[plane] = chk
        v.addLayout(locks)

        buttons = QHBoxLayout()
        btn_reset_rotation = QPushButton(self.tr("Reset rotation"), box)
        btn_reset_rotation.clicked.connect(self.store.reset_rotation)
        btn_reset_speeds = QPushButton(self.tr("Reset speeds"), box)
        btn_reset_speeds.clicked.connect(self.store.reset_speeds)
        buttons.addWidget(btn_reset_rotation)
        buttons.addWidget(btn_reset_speeds)
        v.addLayout(buttons)
        return box

    def _build_auto_page(self) -> QWidget:
        page = QWidget(self)
        grid = QGridLayout(page)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.addWidget(QLabel(self.tr("Global speed:"), page), 0, 0)
        self.spin_global_speed = _make_spin(
            page, min_value=GLOBAL_SPEED_RANGE[0], max_value=GLOBAL_SPEED_RANGE[1], step=0.1, suffix="×"
        )
        self.spin_global_speed.valueChanged.connect(self.store.set_global_speed)
        grid.addWidget(self.spin_global_speed, 0, 1)

        self._speed_spins: dict[RotationPlane, QDoubleSpinBox] = {}
        for row, plane in enumerate(RotationPlane, start=1):
            grid.addWidget(QLabel(self.tr(PLANE_LABELS[plane]), page), row, 0)
            spin = _make_spin(page, min_value=0.0, max_value=SLIDER_RANGE[1], step=0.1)
            spin.valueChanged.connect(partial(self.store.set_speed, plane))
            grid.addWidget(spin, row, 1)
            self._speed_spins[plane] = spin
        return page

    def _build_manual_page(self) -> QWidget:
        page = QWidget(self)
        grid = QGridLayout(page)
        grid.setContentsMargins(0, 0, 0, 0)
        self._slider_spins: dict[RotationPlane, QDoubleSpinBox] = {}
        for row, plane in enumerate(RotationPlane):
            grid.addWidget(QLabel(self.tr(PLANE_LABELS[plane]), page), row, 0)
            spin = _make_spin(page, min_value=SLIDER_RANGE[0], max_value=SLIDER_RANGE[1], step=0.05, suffix="×")
            spin.valueChanged.connect(partial(self.store.set_slider, plane))
            grid.addWidget(spin, row, 1)
            self._slider_spins[plane] = spin
        return page

    def _build_motion_box(self) -> QGroupBox:
        box = QGroupBox(self.tr("Motion Control"), self)
        grid = QGridLayout(box)
        self.check_motion = QCheckBox(self.tr("Use device gyroscope"), box)
        self.check_motion.toggled.connect(self.store.set_motion_enabled)
        grid.addWidget(self.check_motion, 0, 0, 1, 2)

        grid.addWidget(QLabel(self.tr("Sensitivity:"), box), 1, 0)
        self.spin_sensitivity = _make_spin(
            box, min_value=MOTION_SENSITIVITY_RANGE[0], max_value=MOTION_SENSITIVITY_RANGE[1], step=0.1
        )
        self.spin_sensitivity.valueChanged.connect(self.store.set_motion_sensitivity)
        grid.addWidget(self.spin_sensitivity, 1, 1)
        return box

    # ---- slots ----

    def _on_mode_toggled(self, setter, mode, checked: bool) -> None:
        if checked:
            setter(mode)

    def _on_lock_toggled(self, plane: RotationPlane, checked: bool) -> None:
        if checked != self.store.controls.is_locked(plane):
            self.store.toggle_lock(plane)

    # ---- store -> widgets ----

    @staticmethod
    def _set_silently(widget: QWidget, setter_name: str, value) -> None:
        """Update a widget without re-emitting its change signal back to the store."""
        blocked = widget.blockSignals(True)
        getattr(widget, setter_name)(value)
        widget.blockSignals(blocked)

    def _sync_controls(self, controls: RotationControls) -> None:
        self._set_silently(self.check_auto, "setChecked", controls.auto_rotate)
        self.speed_stack.setCurrentIndex(0 if controls.auto_rotate else 1)
        self._set_silently(self.spin_global_speed, "setValue", controls.global_speed)
        for plane in RotationPlane:
            self._set_silently(self._speed_spins[plane], "setValue", controls.speeds[plane])
            self._set_silently(self._slider_spins[plane], "setValue", controls.sliders[plane])
            self._set_silently(self._lock_checks[plane], "setChecked", controls.is_locked(plane))
        self._set_silently(self.check_motion, "setChecked", controls.motion_enabled)
        self._set_silently(self.spin_sensitivity, "setValue", controls.motion_sensitivity)

    def _sync_view(self, view: ViewState) -> None:
        self._set_silently(self._visualization_buttons[view.visualization_mode], "setChecked", True)
        self._set_silently(self._projection_buttons[view.projection_mode], "setChecked", True)
        self._set_silently(self.check_cross_section, "setChecked", view.show_cross_section)
        self._set_silently(self.spin_cross_section, "setValue", view.cross_section_position)
        self.spin_cross_section.setEnabled(view.show_cross_section)
