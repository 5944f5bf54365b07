"""
Rotation-State Integrator
=========================
Advances the plane angles once per animation frame.

    delta = 0.02 * elapsed * 60

The 0.02 rad step is calibrated for 60 Hz; multiplying by `elapsed * 60` keeps
the angular speed independent of the real frame rate.

Auto mode:    angle += delta * speed[plane] * global_speed
Manual mode:  angle += delta * slider[plane] * 2

Locked planes are frozen in both modes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from sofarotator.config import (
    ROTATION_STEP, REFERENCE_FPS, MAX_FRAME_TIME, MANUAL_SPEED_GAIN,
    DEFAULT_SPEEDS, DEFAULT_SLIDERS, DEFAULT_GLOBAL_SPEED,
    MOTION_SENSITIVITY_RANGE, DEFAULT_MOTION_SENSITIVITY, MOTION_GAIN, MOTION_FRAME_TIME,
)
from sofarotator.model.rotation import RotationPlane, RotationState

logger = logging.getLogger(__name__)


def _per_plane(values: Mapping[str, float]) -> Mapping[RotationPlane, float]:
    return MappingProxyType({plane: float(values[plane.value]) for plane in RotationPlane})


def _merge_per_plane(current: Mapping[RotationPlane, Any], values: Mapping[str, Any], cast) -> Mapping[RotationPlane, Any]:
    """Overlay `values` (keyed by plane or plane name) on `current` and freeze the result."""
    merged = dict(current)
    for key, value in values.items():
        try:
            plane = RotationPlane(key)
        except ValueError:
            raise ValueError(f"Unknown rotation plane '{key}'.") from None
        merged[plane] = cast(value)
    return MappingProxyType(merged)


def _no_locks() -> Mapping[RotationPlane, bool]:
    return MappingProxyType({plane: False for plane in RotationPlane})


_PER_PLANE_FIELDS = {"speeds": float, "sliders": float, "locks": bool}


@dataclass(frozen=True)
class RotationControls:
    """
    User-set animation parameters.

    Speeds are used in auto mode, slider positions in manual mode. Slider
    positions are signed: the sign picks the direction of rotation.
    """
    speeds: Mapping[RotationPlane, float] = field(default_factory=lambda: _per_plane(DEFAULT_SPEEDS))
    sliders: Mapping[RotationPlane, float] = field(default_factory=lambda: _per_plane(DEFAULT_SLIDERS))
    locks: Mapping[RotationPlane, bool] = field(default_factory=_no_locks)
    auto_rotate: bool = True
    global_speed: float = DEFAULT_GLOBAL_SPEED
    motion_enabled: bool = False
    motion_sensitivity: float = DEFAULT_MOTION_SENSITIVITY

    def __post_init__(self) -> None:
        # Every table must cover all four planes; store it read-only, keyed by RotationPlane
        for name, cast in _PER_PLANE_FIELDS.items():
            table = getattr(self, name)
            missing = [plane.value for plane in RotationPlane if plane not in table]
            if missing:
                raise ValueError(f"'{name}' is missing plane(s): {', '.join(missing)}.")
            object.__setattr__(self, name, _merge_per_plane({}, table, cast))

    def updated(self, **changes: Any) -> RotationControls:
        """
        Return a copy with the given fields changed.

        Per-plane tables may be partial: they are merged over the current
        table. Motion sensitivity is clamped like `with_motion_sensitivity`.
        """
        for name, cast in _PER_PLANE_FIELDS.items():
            if name in changes:
                changes[name] = _merge_per_plane(getattr(self, name), changes[name], cast)
        if "motion_sensitivity" in changes:
            low, high = MOTION_SENSITIVITY_RANGE
            changes["motion_sensitivity"] = min(max(float(changes["motion_sensitivity"]), low), high)
        return replace(self, **changes)

    def is_locked(self, plane: RotationPlane) -> bool:
        return self.locks[RotationPlane(plane)]

    def toggle_lock(self, plane: RotationPlane) -> RotationControls:
        plane = RotationPlane(plane)
        locks = dict(self.locks)
        locks[plane] = not locks[plane]
        return replace(self, locks=MappingProxyType(locks))

    def with_speed(self, plane: RotationPlane, speed: float) -> RotationControls:
        speeds = dict(self.speeds)
        speeds[RotationPlane(plane)] = float(speed)
        return replace(self, speeds=MappingProxyType(speeds))

    def with_slider(self, plane: RotationPlane, position: float) -> RotationControls:
        sliders = dict(self.sliders)
        sliders[RotationPlane(plane)] = float(position)
        return replace(self, sliders=MappingProxyType(sliders))

    def with_motion_sensitivity(self, sensitivity: float) -> RotationControls:
        low, high = MOTION_SENSITIVITY_RANGE
        return replace(self, motion_sensitivity=min(max(float(sensitivity), low), high))

    def reset_speeds(self) -> RotationControls:
        """Restore default per-plane speeds and the global multiplier."""
        return replace(self, speeds=_per_plane(DEFAULT_SPEEDS), global_speed=DEFAULT_GLOBAL_SPEED)


def clamp_elapsed(elapsed: float) -> float:
    """Limit a frame time to [0, 1/30] s so a stalled frame cannot jerk the rotation."""
    if elapsed > MAX_FRAME_TIME:
        logger.debug("Frame time %.4f s clamped to %.4f s", elapsed, MAX_FRAME_TIME)
        return MAX_FRAME_TIME
    return max(elapsed, 0.0)


def rotation_delta(elapsed: float) -> float:
    """Base angle increment for a frame of `elapsed` seconds."""
    return ROTATION_STEP * elapsed * REFERENCE_FPS


def advance_rotation(
    state: RotationState,
    controls: RotationControls,
    elapsed: float
) -> RotationState:
    """
    Integrate one frame.

    Args:
        state: Current angles.
        controls: Speeds, sliders, locks and auto/manual mode.
        elapsed: Frame time in seconds (callers clamp it with `clamp_elapsed`).

    Returns:
        The next RotationState. Locked planes keep their angle exactly.
    """
    delta = rotation_delta(elapsed)
    deltas: dict[RotationPlane, float] = {}
    for plane in RotationPlane:
        if controls.is_locked(plane):
            continue
        if controls.auto_rotate:
            deltas[plane] = delta * controls.speeds[plane] * controls.global_speed
        else:
            deltas[plane] = delta * controls.sliders[plane] * MANUAL_SPEED_GAIN
    return state.offset(deltas)


def motion_deltas(x: float, y: float, z: float, sensitivity: float) -> dict[RotationPlane, float]:
    """
    Map a gyroscope sample (rad/s around x, y, z) to per-plane angle deltas.

    XW <- x, YZ <- y, XY <- z, ZW <- (x + y) / 2; sensitivity is clamped to [0.1, 3.0].
    """
    low, high = MOTION_SENSITIVITY_RANGE
    gain = min(max(sensitivity, low), high) * MOTION_GAIN * MOTION_FRAME_TIME
    return {
        RotationPlane.XW: x * gain,
        RotationPlane.YZ: y * gain,
        RotationPlane.XY: z * gain,
        RotationPlane.ZW: (x + y) * 0.5 * gain,
    }


def apply_motion_input(
    state: RotationState,
    controls: RotationControls,
    x: float,
    y: float,
    z: float
) -> RotationState:
    """Add a gyroscope sample to the unlocked planes when motion control drives the rotation."""
    if not controls.motion_enabled or controls.auto_rotate:
        return state
    deltas = motion_deltas(x, y, z, controls.motion_sensitivity)
    return state.offset({
        plane: d for plane, d in deltas.items() if not controls.is_locked(plane)
    })
