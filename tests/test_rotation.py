"""Tests for the 4D rotation engine."""
import math

import numpy as np
import pytest

from sofarotator.model.geometry_primitives import Point4D
from sofarotator.model.rotation import (
    RotationPlane, RotationState, rotate_2d, rotate_point, rotate_vertices,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def random_points(rng):
    return [Point4D(*map(float, rng.uniform(-2.0, 2.0, size=4))) for _ in range(25)]


@pytest.fixture
def random_states(rng):
    return [RotationState(*map(float, rng.uniform(-10.0, 10.0, size=4))) for _ in range(25)]


# ---------------------------------------------------------------------------
# Plane rotation
# ---------------------------------------------------------------------------

class TestRotate2D:

    def test_preserves_squared_length(self, rng):
        for _ in range(200):
            a, b = rng.uniform(-100.0, 100.0, size=2)
            angle = rng.uniform(-50.0, 50.0)
            ra, rb = rotate_2d(a, b, angle)
            assert ra**2 + rb**2 == pytest.approx(a**2 + b**2, rel=1e-12)

    def test_quarter_turn(self):
        a, b = rotate_2d(1.0, 0.0, math.pi / 2)
        assert a == pytest.approx(0.0, abs=1e-15)
        assert b == pytest.approx(1.0)

    def test_works_on_arrays(self):
        a = np.array([1.0, 0.0])
        b = np.array([0.0, 1.0])
        ra, rb = rotate_2d(a, b, math.pi)
        np.testing.assert_allclose(ra, [-1.0, 0.0], atol=1e-15)
        np.testing.assert_allclose(rb, [0.0, -1.0], atol=1e-15)


# ---------------------------------------------------------------------------
# Full 4D rotation
# ---------------------------------------------------------------------------

class TestRotatePoint:

    def test_identity_is_exact(self, random_points):
        zero = RotationState.zero()
        for p in random_points:
            assert rotate_point(p, zero) == p

    def test_xw_quarter_turn_swaps_x_into_w(self):
        p = rotate_point(Point4D(1.0, 0.0, 0.0, 0.0), RotationState(xw=math.pi / 2))
        assert p.x == pytest.approx(0.0, abs=1e-15)
        assert p.y == 0.0
        assert p.z == 0.0
        assert p.w == pytest.approx(1.0)

    def test_preserves_4d_norm(self, random_points, random_states):
        for p, s in zip(random_points, random_states):
            assert rotate_point(p, s).norm == pytest.approx(p.norm, rel=1e-12)

    def test_disjoint_first_stage_planes_compose(self, random_points):
        theta, phi = 0.7, -1.3
        combined = RotationState(xw=theta, yz=phi)
        for p in random_points:
            sequential = rotate_point(rotate_point(p, RotationState(xw=theta)), RotationState(yz=phi))
            simultaneous = rotate_point(p, combined)
            np.testing.assert_allclose(sequential.to_array(), simultaneous.to_array(), atol=1e-14)

    def test_xy_acts_on_already_rotated_coordinates(self):
        p = Point4D(0.3, -0.8, 0.5, 0.9)
        xw, yz, xy, zw = 0.9, 0.4, 1.1, -0.6
        result = rotate_point(p, RotationState(xw=xw, yz=yz, xy=xy, zw=zw))

        # naive: every plane rotates the original coordinates independently
        naive_x, naive_y = rotate_2d(p.x, p.y, xy)
        naive_z, naive_w = rotate_2d(p.z, p.w, zw)
        assert result.x != pytest.approx(naive_x)
        assert result.y != pytest.approx(naive_y)
        assert result.z != pytest.approx(naive_z)
        assert result.w != pytest.approx(naive_w)

    def test_sequential_composition_by_hand(self):
        p = Point4D(0.3, -0.8, 0.5, 0.9)
        s = RotationState(xw=0.9, yz=0.4, xy=1.1, zw=-0.6)
        x1, w1 = rotate_2d(p.x, p.w, s.xw)
        y1, z1 = rotate_2d(p.y, p.z, s.yz)
        x2, y2 = rotate_2d(x1, y1, s.xy)
        z2, w2 = rotate_2d(z1, w1, s.zw)
        assert rotate_point(p, s) == Point4D(x2, y2, z2, w2)

    def test_order_matters(self):
        p = Point4D(1.0, 0.5, -0.25, 0.75)
        forward = rotate_point(p, RotationState(xw=0.8, xy=0.8))
        # same angles applied the other way round: XY first, then XW
        x, y = rotate_2d(p.x, p.y, 0.8)
        x, w = rotate_2d(x, p.w, 0.8)
        assert (forward.x, forward.w) != pytest.approx((x, w))


class TestRotateVertices:

    def test_matches_rotate_point_row_by_row(self, random_points, random_states):
        arr = np.array([p.to_array() for p in random_points])
        for s in random_states[:5]:
            rotated = rotate_vertices(arr, s)
            for row, p in zip(rotated, random_points):
                np.testing.assert_array_equal(row, rotate_point(p, s).to_array())

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            rotate_vertices(np.zeros((3, 3)), RotationState())


# ---------------------------------------------------------------------------
# RotationState
# ---------------------------------------------------------------------------

class TestRotationState:

    def test_plane_order(self):
        assert [p.value for p in RotationPlane] == ["xw", "yz", "xy", "zw"]

    def test_angle_and_with_angle(self):
        s = RotationState().with_angle(RotationPlane.ZW, 1.5)
        assert s.angle(RotationPlane.ZW) == 1.5
        assert s.angle("zw") == 1.5
        assert s.xw == s.yz == s.xy == 0.0

    def test_offset_adds_only_given_planes(self):
        s = RotationState(xw=1.0, yz=2.0, xy=3.0, zw=4.0)
        t = s.offset({RotationPlane.XY: 0.5})
        assert t == RotationState(xw=1.0, yz=2.0, xy=3.5, zw=4.0)
        assert s.xy == 3.0

    def test_is_immutable(self):
        s = RotationState()
        with pytest.raises(AttributeError):
            s.xw = 1.0

    def test_as_dict(self):
        s = RotationState(xw=0.1, yz=0.2, xy=0.3, zw=0.4)
        assert s.as_dict() == {
            RotationPlane.XW: 0.1, RotationPlane.YZ: 0.2, RotationPlane.XY: 0.3, RotationPlane.ZW: 0.4,
        }
