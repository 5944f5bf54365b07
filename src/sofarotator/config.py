"""
Configuration & Global Constants
================================
This module serves as the central registry for the numeric parameters of the
tesseract pipeline and for the few environment-driven settings.

Why is this file needed?
------------------------
1. Single source: the rotation, projection and animation modules all read
   their numbers from here, so a tweak lands everywhere at once.
2. Environment: log level and log file can be changed without touching code.

Exports:
    PROJECTION_DISTANCE_4D (float): Stereographic 4D->3D distance (D1).
    VIEW_DISTANCE_3D (float): Perspective 3D->2D distance (D2).
    ... see below.
"""
import os

# ------------------------------------------------------------------------------
# Projection
# ------------------------------------------------------------------------------
PROJECTION_DISTANCE_4D: float = 5.0
VIEW_DISTANCE_3D: float = 4.0
ORTHOGRAPHIC_SCALE: float = 0.5

# Denominators closer to zero than this are treated as the projection singularity
SINGULARITY_EPSILON: float = 1e-9

# ------------------------------------------------------------------------------
# Tesseract geometry
# ------------------------------------------------------------------------------
INNER_CUBE_SCALE: float = 0.5
INNER_CUBE_W: float = 0.5
OUTER_CUBE_SCALE: float = 1.0
OUTER_CUBE_W: float = -0.5
CROSS_SECTION_SCALE: float = 1.0
CROSS_SECTION_RANGE: tuple[float, float] = (-1.0, 1.0)

# ------------------------------------------------------------------------------
# Shading
# ------------------------------------------------------------------------------
OPACITY_MIN: float = 0.2
OPACITY_MAX: float = 1.0
OPACITY_DEPTH_GAIN: float = 2.0

# ------------------------------------------------------------------------------
# Animation
# ------------------------------------------------------------------------------
ROTATION_STEP: float = 0.02  # radians per frame at the reference frame rate
REFERENCE_FPS: float = 60.0
DEFAULT_FRAME_TIME: float = 1.0 / 60.0  # assumed for the very first frame
MAX_FRAME_TIME: float = 1.0 / 30.0
MANUAL_SPEED_GAIN: float = 2.0

DEFAULT_SPEEDS: dict[str, float] = {"xw": 1.0, "yz": 0.7, "xy": 0.5, "zw": 0.3}
DEFAULT_SLIDERS: dict[str, float] = {"xw": 0.5, "yz": 0.35, "xy": 0.25, "zw": 0.15}
DEFAULT_GLOBAL_SPEED: float = 1.0
GLOBAL_SPEED_RANGE: tuple[float, float] = (0.1, 2.0)
SLIDER_RANGE: tuple[float, float] = (-2.0, 2.0)

# ------------------------------------------------------------------------------
# Device motion
# ------------------------------------------------------------------------------
MOTION_SENSITIVITY_RANGE: tuple[float, float] = (0.1, 3.0)
DEFAULT_MOTION_SENSITIVITY: float = 1.0
MOTION_GAIN: float = 0.1
MOTION_FRAME_TIME: float = 0.016  # fixed per-sample step, independent of the animation clock

# ------------------------------------------------------------------------------
# View
# ------------------------------------------------------------------------------
VIEW_SCALE_FACTOR: float = 4.0  # screen scale = min(width, height) * factor
FRAME_INTERVAL_MS: int = 16

# ------------------------------------------------------------------------------
# Environment
# ------------------------------------------------------------------------------
LOG_LEVEL: str = os.environ.get("SOFAROTATOR_LOG_LEVEL", "INFO").upper()
LOG_FILE: str | None = os.environ.get("SOFAROTATOR_LOG_FILE") or None
