"""
Projection Pipeline (4D -> 3D -> 2D)
====================================
Step A: stereographic 4D -> 3D, dividing by (D1 - w) with D1 = 5.
Step B: 3D -> 2D, perspective (divide by D2 - z, D2 = 4) or orthographic
        (fixed half scale). The perspective factor is kept as the depth value
        in both modes, for shading.
Step C: screen = viewport center + (x, y) * scale.

Singularities
-------------
Step A diverges at w = D1 and step B at z = D2. The app's cube sizes and
offsets keep every rotated vertex far away from both. Instead of returning
inf/NaN, inputs within SINGULARITY_EPSILON of either pole raise
ProjectionSingularityError: reaching them is a caller error.
"""
from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from sofarotator.config import (
    PROJECTION_DISTANCE_4D, VIEW_DISTANCE_3D, ORTHOGRAPHIC_SCALE, SINGULARITY_EPSILON,
)
from sofarotator.model.geometry_primitives import Point3D, Point4D, ScreenPoint, Viewport

if TYPE_CHECKING:
    import numpy.typing as npt


class ProjectionMode(StrEnum):
    """Selects the 3D -> 2D step. The 4D -> 3D step is always stereographic."""
    PERSPECTIVE = "perspective"
    ORTHOGRAPHIC = "orthographic"


class ProjectionSingularityError(ValueError):
    """Raised when a point sits on one of the projection poles."""


def _check_denominator(denominator, stage: str) -> None:
    if np.any(np.abs(denominator) < SINGULARITY_EPSILON):
        raise ProjectionSingularityError(
            f"{stage} projection is singular (denominator {np.min(np.abs(denominator)):.3e})."
        )


def stereographic_project(point: Point4D) -> Point3D:
    """Project a 4D point into 3D space through the w axis."""
    denominator = PROJECTION_DISTANCE_4D - point.w
    _check_denominator(denominator, "Stereographic (4D->3D)")
    w1 = 1.0 / denominator
    return Point3D(point.x * w1, point.y * w1, point.z * w1)


def _project_plane(x3, y3, z3, mode: ProjectionMode):
    """Step B on floats or arrays. Returns (screen_x, screen_y, depth)."""
    denominator = VIEW_DISTANCE_3D - z3
    _check_denominator(denominator, "Perspective (3D->2D)")
    perspective = 1.0 / denominator

    match ProjectionMode(mode):
        case ProjectionMode.PERSPECTIVE:
            return x3 * perspective, y3 * perspective, perspective
        case ProjectionMode.ORTHOGRAPHIC:
            # Position ignores distance, depth is still needed for shading
            return x3 * ORTHOGRAPHIC_SCALE, y3 * ORTHOGRAPHIC_SCALE, perspective


def _check_scale(scale: float) -> None:
    if not scale > 0.0:
        raise ValueError(f"Scale must be positive, got {scale}.")


def project_point(
    point: Point4D,
    mode: ProjectionMode,
    viewport: Viewport,
    scale: float
) -> ScreenPoint:
    """
    Project one rotated 4D point to screen coordinates.

    Args:
        point: The (already rotated) 4D point.
        mode: Perspective or orthographic 3D -> 2D step.
        viewport: Drawing surface; the projection is centered on it.
        scale: Pixels per projected unit.

    Returns:
        ScreenPoint with pixel position and the depth used for shading.

    Raises:
        ProjectionSingularityError: If the point sits on a projection pole.
        ValueError: If `scale` is not positive.
    """
    _check_scale(scale)
    p3 = stereographic_project(point)
    screen_x, screen_y, depth = _project_plane(p3.x, p3.y, p3.z, mode)
    cx, cy = viewport.center
    return ScreenPoint(
        x=cx + screen_x * scale,
        y=cy + screen_y * scale,
        depth=depth,
    )


def project_vertices(
    vertices: npt.ArrayLike,
    mode: ProjectionMode,
    viewport: Viewport,
    scale: float
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Vectorised `project_point` over an (N, 4) array.

    Returns:
        (positions, depths): an (N, 2) array of pixel coordinates and an (N,)
        array of depth values, both row-aligned with the input.
    """
    _check_scale(scale)
    arr = np.asarray(vertices, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError(f"Expected shape (N, 4), got {arr.shape}.")

    denominator = PROJECTION_DISTANCE_4D - arr[:, 3]
    _check_denominator(denominator, "Stereographic (4D->3D)")
    w1 = 1.0 / denominator
    x3, y3, z3 = arr[:, 0] * w1, arr[:, 1] * w1, arr[:, 2] * w1

    screen_x, screen_y, depth = _project_plane(x3, y3, z3, mode)
    cx, cy = viewport.center
    positions = np.column_stack((cx + screen_x * scale, cy + screen_y * scale))
    return positions, np.asarray(depth, dtype=np.float64)

