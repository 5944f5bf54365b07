"""
4D Rotation Engine
==================
Rotates 4D points through the four plane rotations exposed by the app.

The rotations are applied one after another, in a fixed order, each feeding the
next:

    1. XW  rotates (x, w)
    2. YZ  rotates (y, z)
    3. XY  rotates (x', y')  - the x from step 1 and the y from step 2
    4. ZW  rotates (z', w')  - the z from step 2 and the w from step 1

This is deliberately *not* a product of four independent plane matrices applied
to the original coordinates. Changing the order (or rotating the original
coordinates in steps 3/4) produces a different animation.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Mapping

import numpy as np

from sofarotator.model.geometry_primitives import Point4D

if TYPE_CHECKING:
    import numpy.typing as npt


class RotationPlane(StrEnum):
    """The rotation planes driven by the app, in application order."""
    XW = "xw"
    YZ = "yz"
    XY = "xy"
    ZW = "zw"


@dataclass(frozen=True)
class RotationState:
    """
    Accumulated rotation angle (radians) for each plane.

    Angles are unbounded; auto-rotation grows them monotonically and they are
    never wrapped.
    """
    xw: float = 0.0
    yz: float = 0.0
    xy: float = 0.0
    zw: float = 0.0

    @classmethod
    def zero(cls) -> RotationState:
        return cls()

    def angle(self, plane: RotationPlane) -> float:
        return getattr(self, RotationPlane(plane).value)

    def with_angle(self, plane: RotationPlane, value: float) -> RotationState:
        return replace(self, **{RotationPlane(plane).value: value})

    def offset(self, deltas: Mapping[RotationPlane, float]) -> RotationState:
        """Return a new state with the given per-plane deltas added."""
        changes = {
            RotationPlane(plane).value: self.angle(plane) + delta
            for plane, delta in deltas.items()
        }
        return replace(self, **changes)

    def as_dict(self) -> dict[RotationPlane, float]:
        return {plane: self.angle(plane) for plane in RotationPlane}


def rotate_2d(a, b, angle: float):
    """
    Rotate the pair (a, b) by `angle` radians within its plane.

    Works on floats and on numpy arrays alike.
    """
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (
        a * cos_a - b * sin_a,
        a * sin_a + b * cos_a,
    )


def _rotate_components(x, y, z, w, state: RotationState):
    x1, w1 = rotate_2d(x, w, state.xw)
    y1, z1 = rotate_2d(y, z, state.yz)
    x2, y2 = rotate_2d(x1, y1, state.xy)
    z2, w2 = rotate_2d(z1, w1, state.zw)
    return x2, y2, z2, w2


def rotate_point(point: Point4D, state: RotationState) -> Point4D:
    """Rotate a single point. With all angles zero the input is returned unchanged."""
    return Point4D(*_rotate_components(point.x, point.y, point.z, point.w, state))


def rotate_vertices(
    vertices: npt.ArrayLike,
    state: RotationState
) -> npt.NDArray[np.float64]:
    """
    Rotate every row of an (N, 4) array of (x, y, z, w) coordinates.

    Args:
        vertices: Array of shape (N, 4).
        state: Rotation angles to apply.

    Returns:
        A new (N, 4) array, row-aligned with the input.

    Raises:
        ValueError: If the input is not of shape (N, 4).
    """
    arr = np.asarray(vertices, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError(f"Expected shape (N, 4), got {arr.shape}.")

    x, y, z, w = _rotate_components(arr[:, 0], arr[:, 1], arr[:, 2], arr[:, 3], state)
    return np.column_stack((x, y, z, w))
