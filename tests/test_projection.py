"""Tests for the 4D -> 3D -> 2D projection pipeline."""
import math

import numpy as np
import pytest

from sofarotator.model.geometry_primitives import Point4D, Viewport, calculate_opacity
from sofarotator.model.projection import (
    ProjectionMode, ProjectionSingularityError,
    project_point, project_vertices, stereographic_project,
)


@pytest.fixture
def viewport():
    return Viewport(400.0, 400.0)


@pytest.fixture
def inner_corner():
    return Point4D(-0.5, -0.5, -0.5, 0.5)


# ---------------------------------------------------------------------------
# Stereographic step
# ---------------------------------------------------------------------------

class TestStereographic:

    def test_divides_by_distance_minus_w(self):
        p3 = stereographic_project(Point4D(1.0, 2.0, 3.0, 1.0))
        assert (p3.x, p3.y, p3.z) == pytest.approx((0.25, 0.5, 0.75))

    def test_w_zero_scales_by_one_fifth(self):
        p3 = stereographic_project(Point4D(1.0, 1.0, 1.0, 0.0))
        assert p3.x == pytest.approx(0.2)

    def test_pole_raises(self):
        with pytest.raises(ProjectionSingularityError):
            stereographic_project(Point4D(1.0, 1.0, 1.0, 5.0))

    def test_singularity_error_is_value_error(self):
        assert issubclass(ProjectionSingularityError, ValueError)


# ---------------------------------------------------------------------------
# Full projection
# ---------------------------------------------------------------------------

class TestProjectPoint:

    def test_perspective_regression_fixture(self, inner_corner, viewport):
        sp = project_point(inner_corner, ProjectionMode.PERSPECTIVE, viewport, 100.0)
        # w1 = 1/4.5, x3 = -1/9, perspective = 1/(4 + 1/9) = 9/37, screen = -1/37
        assert sp.depth == pytest.approx(9.0 / 37.0)
        assert sp.x == pytest.approx(200.0 - 100.0 / 37.0)
        assert sp.y == pytest.approx(200.0 - 100.0 / 37.0)
        assert sp.x == pytest.approx(197.2973, abs=1e-4)

    def test_orthographic_uses_half_scale(self, inner_corner, viewport):
        sp = project_point(inner_corner, ProjectionMode.ORTHOGRAPHIC, viewport, 100.0)
        # x3 = -1/9 -> screen = -1/18
        assert sp.x == pytest.approx(200.0 - 100.0 / 18.0)
        assert sp.y == pytest.approx(200.0 - 100.0 / 18.0)

    def test_orthographic_keeps_perspective_depth(self, inner_corner, viewport):
        persp = project_point(inner_corner, ProjectionMode.PERSPECTIVE, viewport, 100.0)
        ortho = project_point(inner_corner, ProjectionMode.ORTHOGRAPHIC, viewport, 100.0)
        assert ortho.depth == persp.depth

    def test_origin_lands_on_viewport_center(self):
        vp = Viewport(640.0, 480.0)
        for mode in ProjectionMode:
            sp = project_point(Point4D(0.0, 0.0, 0.0, 0.3), mode, vp, 250.0)
            assert sp.position == (320.0, 240.0)
            assert sp.depth == pytest.approx(0.25)

    def test_deterministic(self, viewport):
        p = Point4D(0.3, -0.7, 0.2, -0.4)
        first = project_point(p, ProjectionMode.PERSPECTIVE, viewport, 80.0)
        for _ in range(5):
            assert project_point(p, ProjectionMode.PERSPECTIVE, viewport, 80.0) == first

    def test_accepts_mode_string(self, inner_corner, viewport):
        a = project_point(inner_corner, "perspective", viewport, 100.0)
        b = project_point(inner_corner, ProjectionMode.PERSPECTIVE, viewport, 100.0)
        assert a == b

    def test_view_distance_pole_raises(self, viewport):
        # z3 = 20 / 5 = 4 = view distance
        with pytest.raises(ProjectionSingularityError):
            project_point(Point4D(0.0, 0.0, 20.0, 0.0), ProjectionMode.PERSPECTIVE, viewport, 1.0)

    def test_orthographic_also_guards_depth_pole(self, viewport):
        with pytest.raises(ProjectionSingularityError):
            project_point(Point4D(0.0, 0.0, 20.0, 0.0), ProjectionMode.ORTHOGRAPHIC, viewport, 1.0)

    @pytest.mark.parametrize("scale", [0.0, -1.0])
    def test_rejects_non_positive_scale(self, inner_corner, viewport, scale):
        with pytest.raises(ValueError):
            project_point(inner_corner, ProjectionMode.PERSPECTIVE, viewport, scale)

    def test_unknown_mode_raises(self, inner_corner, viewport):
        with pytest.raises(ValueError):
            project_point(inner_corner, "fisheye", viewport, 1.0)


class TestProjectVertices:

    def test_matches_project_point(self, viewport):
        rng = np.random.default_rng(7)
        arr = rng.uniform(-1.0, 1.0, size=(16, 4))
        for mode in ProjectionMode:
            positions, depths = project_vertices(arr, mode, viewport, 120.0)
            assert positions.shape == (16, 2)
            assert depths.shape == (16,)
            for row, pos, d in zip(arr, positions, depths):
                sp = project_point(Point4D.from_array(row), mode, viewport, 120.0)
                assert pos[0] == sp.x
                assert pos[1] == sp.y
                assert d == sp.depth

    def test_single_bad_row_raises(self, viewport):
        arr = np.array([[0.0, 0.0, 0.0, 0.0], [1.0, 1.0, 1.0, 5.0]])
        with pytest.raises(ProjectionSingularityError):
            project_vertices(arr, ProjectionMode.PERSPECTIVE, viewport, 1.0)

    def test_rejects_wrong_shape(self, viewport):
        with pytest.raises(ValueError):
            project_vertices(np.zeros((4, 3)), ProjectionMode.PERSPECTIVE, viewport, 1.0)


# ---------------------------------------------------------------------------
# Opacity
# ---------------------------------------------------------------------------

class TestOpacity:

    @pytest.mark.parametrize("depth", [-1e12, -5.0, -0.1, 0.0, 0.05, 0.25, 0.4, 1.0, 1e12, math.inf, -math.inf])
    def test_bounded(self, depth):
        assert 0.2 <= calculate_opacity(depth) <= 1.0

    def test_nan_maps_to_minimum(self):
        assert calculate_opacity(math.nan) == 0.2

    def test_linear_in_range(self):
        assert calculate_opacity(0.25) == pytest.approx(0.7)
        assert calculate_opacity(0.0) == pytest.approx(0.2)

    def test_saturates(self):
        assert calculate_opacity(0.4) == pytest.approx(1.0)
        assert calculate_opacity(3.0) == 1.0
        assert calculate_opacity(-3.0) == 0.2
