"""
Tesseract Assembler
===================
Builds the renderable tesseract from two fixed-w cubes.

The "inner" (scale 0.5, w = +0.5) and "outer" (scale 1.0, w = -0.5) cubes are
two slices of the same hypercube. Drawing both and joining vertex i of one to
vertex i of the other gives the classic cube-within-a-cube picture:

    16 vertices, 12 + 12 edges on the cubes, 8 connecting edges = 32 edges.

Vertex order (shared by every cube, never changes)::

    front face (z = -s)          back face (z = +s)
    0: (-s, -s)  1: (+s, -s)     4: (-s, -s)  5: (+s, -s)
    3: (-s, +s)  2: (+s, +s)     7: (-s, +s)  6: (+s, +s)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from sofarotator.config import (
    INNER_CUBE_SCALE, INNER_CUBE_W, OUTER_CUBE_SCALE, OUTER_CUBE_W, CROSS_SECTION_SCALE,
)
from sofarotator.model.geometry_primitives import Point4D, ScreenPoint, Viewport
from sofarotator.model.projection import ProjectionMode, project_vertices
from sofarotator.model.rotation import RotationState, rotate_vertices

if TYPE_CHECKING:
    import numpy.typing as npt


class VisualizationMode(StrEnum):
    """How the renderer draws the cubes; selects the topology table it consumes."""
    WIREFRAME = "wireframe"
    SOLID = "solid"

# ------------------------------------------------------------------------------
# Topology
# ------------------------------------------------------------------------------

CUBE_EDGES: tuple[tuple[int, int], ...] = (
    # front face
    (0, 1), (1, 2), (2, 3), (3, 0),
    # back face
    (4, 5), (5, 6), (6, 7), (7, 4),
    # front to back
    (0, 4), (1, 5), (2, 6), (3, 7),
)

CUBE_FACES: tuple[tuple[int, int, int, int], ...] = (
    (0, 1, 2, 3),  # front
    (4, 5, 6, 7),  # back
    (0, 1, 5, 4),  # bottom
    (2, 3, 7, 6),  # top
    (0, 3, 7, 4),  # left
    (1, 2, 6, 5),  # right
)

# Corner signs in canonical vertex order
_CORNER_SIGNS = np.array([
    (-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1),
    (-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1),
], dtype=np.float64)

VERTICES_PER_CUBE = len(_CORNER_SIGNS)

# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------

@dataclass(frozen=True)
class Cube:
    """
    Eight 4D vertices of an axis-aligned cube sitting at a fixed w.
    """
    scale: float
    w_offset: float
    vertices: tuple[Point4D, ...]

    edges = CUBE_EDGES
    faces = CUBE_FACES

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([v.to_array() for v in self.vertices], dtype=np.float64)


@dataclass(frozen=True)
class Tesseract:
    """
    Render package: projected inner and outer cubes.

    inner[i] and outer[i] are the same hypercube vertex seen at the two w slices,
    which is what makes the connecting line i meaningful.
    """
    inner: tuple[ScreenPoint, ...]
    outer: tuple[ScreenPoint, ...]

    edges = CUBE_EDGES
    faces = CUBE_FACES

    def __post_init__(self) -> None:
        if len(self.inner) != VERTICES_PER_CUBE or len(self.outer) != VERTICES_PER_CUBE:
            raise ValueError(
                f"Both cubes need {VERTICES_PER_CUBE} vertices, "
                f"got {len(self.inner)} and {len(self.outer)}."
            )

    def connections(self) -> list[tuple[ScreenPoint, ScreenPoint]]:
        """Index-aligned (inner, outer) pairs, one per hypercube vertex."""
        return list(zip(self.inner, self.outer))

    @staticmethod
    def topology(mode: VisualizationMode) -> tuple[tuple[int, ...], ...]:
        """Edges for wireframe drawing, faces for solid drawing."""
        match VisualizationMode(mode):
            case VisualizationMode.WIREFRAME:
                return CUBE_EDGES
            case VisualizationMode.SOLID:
                return CUBE_FACES

# ------------------------------------------------------------------------------
# Construction
# ------------------------------------------------------------------------------

def create_cube(scale: float, w_offset: float) -> Cube:
    """Create the 8 corners of a cube of half-size `scale` at `w_offset`."""
    corners = _CORNER_SIGNS * scale
    vertices = tuple(
        Point4D(float(x), float(y), float(z), float(w_offset))
        for x, y, z in corners
    )
    return Cube(scale=scale, w_offset=w_offset, vertices=vertices)


def project_cube(
    cube: Cube,
    rotation: RotationState,
    mode: ProjectionMode,
    viewport: Viewport,
    scale: float
) -> tuple[ScreenPoint, ...]:
    """Rotate and project every vertex of a cube, preserving vertex order."""
    rotated = rotate_vertices(cube.to_array(), rotation)
    positions, depths = project_vertices(rotated, mode, viewport, scale)
    return tuple(
        ScreenPoint(x=float(px), y=float(py), depth=float(d))
        for (px, py), d in zip(positions, depths)
    )


def create_tesseract(
    rotation: RotationState,
    mode: ProjectionMode,
    viewport: Viewport,
    scale: float
) -> Tesseract:
    """
    Build, rotate and project both cubes of the tesseract.

    Args:
        rotation: Current plane angles.
        mode: 3D -> 2D projection mode.
        viewport: Drawing surface.
        scale: Pixels per projected unit.

    Returns:
        Tesseract with inner and outer projected vertices, index-aligned.
    """
    inner = create_cube(INNER_CUBE_SCALE, INNER_CUBE_W)
    outer = create_cube(OUTER_CUBE_SCALE, OUTER_CUBE_W)
    return Tesseract(
        inner=project_cube(inner, rotation, mode, viewport, scale),
        outer=project_cube(outer, rotation, mode, viewport, scale),
    )


def create_cross_section(
    w_position: float,
    rotation: RotationState,
    viewport: Viewport,
    scale: float,
    mode: ProjectionMode = ProjectionMode.PERSPECTIVE
) -> tuple[ScreenPoint, ...]:
    """
    Slice the hypercube at `w_position` and project the resulting cube.

    The slice is a unit cube (scale 1.0) at the requested w, rotated with the
    same angles as the tesseract itself.
    """
    cube = create_cube(CROSS_SECTION_SCALE, w_position)
    return project_cube(cube, rotation, mode, viewport, scale)
