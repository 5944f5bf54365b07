"""
Geometric Primitives for the 4D -> 2D pipeline.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
from typing import TYPE_CHECKING
import numpy as np

from sofarotator.config import OPACITY_MIN, OPACITY_MAX, OPACITY_DEPTH_GAIN

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Point4D:
    """
    A point in 4D space. Immutable: rotation and projection return new points.
    """
    x: float
    y: float
    z: float
    w: float

    def __add__(self, other: Point4D) -> Point4D:
        return Point4D(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: Point4D) -> Point4D:
        return Point4D(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __mul__(self, scalar: float) -> Point4D:
        return Point4D(self.x * scalar, self.y * scalar, self.z * scalar, self.w * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Point4D:
        return Point4D(-self.x, -self.y, -self.z, -self.w)

    @property
    def norm(self) -> float:
        return float(np.sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2))

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)

    @classmethod
    def from_array(cls, a: npt.ArrayLike) -> Point4D:
        arr = np.asarray(a, dtype=np.float64).reshape(-1)
        if arr.shape != (4,):
            raise ValueError(f"Expected 4 coordinates, got shape {arr.shape}.")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]), float(arr[3]))


@dataclass(frozen=True)
class Point3D:
    """Intermediate result of the stereographic 4D -> 3D step."""
    x: float
    y: float
    z: float

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class Viewport:
    """Size of the drawing surface in pixels."""
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(f"Viewport must have a positive size, got {self.width}x{self.height}.")

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    @property
    def shortest_side(self) -> float:
        return min(self.width, self.height)


@dataclass(frozen=True)
class ScreenPoint:
    """
    A projected vertex: screen position in pixels plus a depth value used for shading.

    Recomputed every frame, never stored.
    """
    x: float
    y: float
    depth: float

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def opacity(self) -> float:
        return calculate_opacity(self.depth)


def calculate_opacity(depth: float) -> float:
    """Map a depth value to a draw opacity in [0.2, 1.0]; nearer is more opaque."""
    if math.isnan(depth):
        return OPACITY_MIN
    return min(max(OPACITY_MIN + depth * OPACITY_DEPTH_GAIN, OPACITY_MIN), OPACITY_MAX)
