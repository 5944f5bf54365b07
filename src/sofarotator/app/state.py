from __future__ import annotations

import logging
from dataclasses import replace

from PySide6.QtCore import QObject, Signal

from sofarotator.model.geometry_primitives import Viewport
from sofarotator.model.integrator import RotationControls
from sofarotator.model.projection import ProjectionMode
from sofarotator.model.rotation import RotationPlane
from sofarotator.model.state import TesseractSession, ViewState, TesseractFrame
from sofarotator.model.tesseract import VisualizationMode

logger = logging.getLogger(__name__)


class Store(QObject):
    """
    Qt adapter around a TesseractSession.

    The session stays the single owner of the rotation. The store only forwards
    user input to it and publishes each finished frame.
    """
    frame_ready = Signal(object)
    controls_changed = Signal(object)
    view_changed = Signal(object)

    def __init__(self, session: TesseractSession | None = None) -> None:
        super().__init__()
        self.session = session or TesseractSession()
        self._viewport: Viewport | None = None

    # ---- frame driving ----

    def set_viewport(self, viewport: Viewport) -> None:
        self._viewport = viewport
        self._publish(self.session.render(viewport))

    def tick(self, elapsed: float) -> None:
        if self._viewport is None:
            return
        self._publish(self.session.tick(elapsed, self._viewport))

    def _publish(self, frame: TesseractFrame) -> None:
        self.frame_ready.emit(frame)

    def _refresh(self) -> None:
        if self._viewport is not None:
            self._publish(self.session.render(self._viewport))

    # ---- controls ----

    @property
    def controls(self) -> RotationControls:
        return self.session.controls

    @property
    def view(self) -> ViewState:
        return self.session.view

    def _set_controls(self, controls: RotationControls) -> None:
        self.session.update_controls(controls)
        self.controls_changed.emit(controls)

    def _set_view(self, view: ViewState) -> None:
        self.session.update_view(view)
        self.view_changed.emit(view)
        self._refresh()

    def set_auto_rotate(self, enabled: bool) -> None:
        self._set_controls(replace(self.controls, auto_rotate=bool(enabled)))

    def toggle_auto_rotate(self) -> None:
        self.set_auto_rotate(not self.controls.auto_rotate)

    def set_global_speed(self, speed: float) -> None:
        self._set_controls(replace(self.controls, global_speed=float(speed)))

    def set_speed(self, plane: RotationPlane, speed: float) -> None:
        self._set_controls(self.controls.with_speed(plane, speed))

    def set_slider(self, plane: RotationPlane, position: float) -> None:
        self._set_controls(self.controls.with_slider(plane, position))

    def toggle_lock(self, plane: RotationPlane) -> None:
        self._set_controls(self.controls.toggle_lock(plane))

    def set_motion_enabled(self, enabled: bool) -> None:
        self._set_controls(replace(self.controls, motion_enabled=bool(enabled)))

    def set_motion_sensitivity(self, sensitivity: float) -> None:
        self._set_controls(self.controls.with_motion_sensitivity(sensitivity))

    def reset_speeds(self) -> None:
        self._set_controls(self.controls.reset_speeds())

    def reset_rotation(self) -> None:
        self.session.reset_rotation()
        self._refresh()

    def apply_motion_sample(self, x: float, y: float, z: float) -> None:
        self.session.apply_motion_sample(x, y, z)

    # ---- view ----

    def set_visualization_mode(self, mode: VisualizationMode) -> None:
        self._set_view(replace(self.view, visualization_mode=VisualizationMode(mode)))

    def set_projection_mode(self, mode: ProjectionMode) -> None:
        self._set_view(replace(self.view, projection_mode=ProjectionMode(mode)))

    def set_cross_section_visible(self, visible: bool) -> None:
        self._set_view(replace(self.view, show_cross_section=bool(visible)))

    def set_cross_section_position(self, position: float) -> None:
        self._set_view(self.view.with_cross_section_position(position))
