"""
Session State (Animation Driver Model)
======================================
This module defines the state owned by one running visualization.

Why is this file needed?
------------------------
1. Ownership: TesseractSession is the only owner of the RotationState. The host
   calls `tick()` once per frame; nothing else mutates the angles.
2. By-value frames: every tick returns a fresh, immutable TesseractFrame. The
   renderer draws it and throws it away, so the model needs no observers.
3. Timing: FrameClock turns host timestamps into clamped frame times.

Classes:
    ViewState: Presentation choices that affect the geometry (modes, cross-section).
    FrameClock: Timestamp -> clamped elapsed time.
    TesseractFrame: Everything the renderer needs for one frame.
    TesseractSession: The per-frame driver.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
import logging
from typing import Any, Optional

from sofarotator.config import DEFAULT_FRAME_TIME, VIEW_SCALE_FACTOR, CROSS_SECTION_RANGE
from sofarotator.model.geometry_primitives import ScreenPoint, Viewport
from sofarotator.model.integrator import (
    RotationControls, advance_rotation, apply_motion_input, clamp_elapsed,
)
from sofarotator.model.projection import ProjectionMode
from sofarotator.model.rotation import RotationState
from sofarotator.model.tesseract import (
    Tesseract, VisualizationMode, create_tesseract, create_cross_section,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    visualization_mode: VisualizationMode = VisualizationMode.WIREFRAME
    projection_mode: ProjectionMode = ProjectionMode.PERSPECTIVE
    show_cross_section: bool = False
    cross_section_position: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "visualization_mode", VisualizationMode(self.visualization_mode))
        object.__setattr__(self, "projection_mode", ProjectionMode(self.projection_mode))

    def with_cross_section_position(self, position: float) -> ViewState:
        low, high = CROSS_SECTION_RANGE
        return replace(self, cross_section_position=min(max(float(position), low), high))

    def updated(self, **changes: Any) -> ViewState:
        """Return a copy with the given fields changed and the cross-section position clamped."""
        position = changes.pop("cross_section_position", self.cross_section_position)
        return replace(self, **changes).with_cross_section_position(position)


class FrameClock:
    """
    Converts monotonic timestamps (seconds) into per-frame elapsed times.

    The first tick after `reset()` reports one 60 Hz frame; later ticks are
    clamped by `clamp_elapsed`.
    """
    def __init__(self) -> None:
        self._last: Optional[float] = None

    def reset(self) -> None:
        self._last = None

    def tick(self, now: float) -> float:
        if self._last is None:
            elapsed = DEFAULT_FRAME_TIME
        else:
            elapsed = clamp_elapsed(now - self._last)
        self._last = now
        return elapsed


@dataclass(frozen=True)
class TesseractFrame:
    """One frame of renderable geometry, handed to the renderer by value."""
    tesseract: Tesseract
    cross_section: Optional[tuple[ScreenPoint, ...]]
    visualization_mode: VisualizationMode
    rotation: RotationState
    scale: float

    @property
    def topology(self) -> tuple[tuple[int, ...], ...]:
        return Tesseract.topology(self.visualization_mode)


def view_scale(viewport: Viewport) -> float:
    """Pixels per projected unit for a given drawing surface."""
    return viewport.shortest_side * VIEW_SCALE_FACTOR


class TesseractSession:
    """
    Drives one visualization: integrates the rotation and builds frames.

    All methods run synchronously on the caller's thread; nothing is cached
    between frames.
    """
    def __init__(
        self,
        controls: Optional[RotationControls] = None,
        view: Optional[ViewState] = None,
        rotation: Optional[RotationState] = None,
    ) -> None:
        self._controls = controls or RotationControls()
        self._view = view or ViewState()
        self._rotation = rotation or RotationState.zero()

    # ------------------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------------------

    @property
    def rotation(self) -> RotationState:
        return self._rotation

    @property
    def controls(self) -> RotationControls:
        return self._controls

    @property
    def view(self) -> ViewState:
        return self._view

    # ------------------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------------------

    def update_controls(self, controls: RotationControls) -> None:
        if controls.auto_rotate != self._controls.auto_rotate:
            logger.debug("Rotation mode: %s", "auto" if controls.auto_rotate else "manual")
        self._controls = controls

    def update_view(self, view: ViewState) -> None:
        self._view = view

    def update(self, **changes: Any) -> None:
        """Apply keyword changes to the controls or the view, whichever owns the field."""
        control_fields = {f.name for f in fields(self._controls)}
        view_fields = {f.name for f in fields(self._view)}
        control_changes = {k: v for k, v in changes.items() if k in control_fields}
        view_changes = {k: v for k, v in changes.items() if k in view_fields}
        unknown = set(changes) - set(control_changes) - set(view_changes)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}.")
        # Build both before committing either, so a bad value leaves the session untouched
        controls = self._controls.updated(**control_changes) if control_changes else self._controls
        view = self._view.updated(**view_changes) if view_changes else self._view
        self.update_controls(controls)
        self.update_view(view)

    def reset_rotation(self) -> None:
        logger.debug("Rotation reset.")
        self._rotation = RotationState.zero()

    def apply_motion_sample(self, x: float, y: float, z: float) -> None:
        self._rotation = apply_motion_input(self._rotation, self._controls, x, y, z)

    # ------------------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------------------

    def tick(self, elapsed: float, viewport: Viewport) -> TesseractFrame:
        """Advance by one frame of `elapsed` seconds and return the new geometry."""
        self._rotation = advance_rotation(self._rotation, self._controls, clamp_elapsed(elapsed))
        return self.render(viewport)

    def render(self, viewport: Viewport) -> TesseractFrame:
        """Build the geometry for the current rotation without advancing it."""
        scale = view_scale(viewport)
        mode = self._view.projection_mode
        tesseract = create_tesseract(self._rotation, mode, viewport, scale)

        cross_section = None
        if self._view.show_cross_section:
            cross_section = create_cross_section(
                self._view.cross_section_position, self._rotation, viewport, scale, mode
            )

        return TesseractFrame(
            tesseract=tesseract,
            cross_section=cross_section,
            visualization_mode=self._view.visualization_mode,
            rotation=self._rotation,
            scale=scale,
        )
