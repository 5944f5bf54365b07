"""Tests for the geometric value types."""
import numpy as np
import pytest

from sofarotator.model.geometry_primitives import (
    Point3D, Point4D, ScreenPoint, Viewport, calculate_opacity,
)


class TestPoint4D:

    def test_arithmetic(self):
        a = Point4D(1.0, 2.0, 3.0, 4.0)
        b = Point4D(0.5, 0.5, 0.5, 0.5)
        assert a + b == Point4D(1.5, 2.5, 3.5, 4.5)
        assert a - b == Point4D(0.5, 1.5, 2.5, 3.5)
        assert a * 2.0 == 2.0 * a == Point4D(2.0, 4.0, 6.0, 8.0)
        assert -a == Point4D(-1.0, -2.0, -3.0, -4.0)

    def test_norm(self):
        assert Point4D(1.0, 1.0, 1.0, 1.0).norm == pytest.approx(2.0)

    def test_array_conversion(self):
        p = Point4D(0.1, -0.2, 0.3, -0.4)
        arr = p.to_array()
        assert arr.dtype == np.float64
        assert Point4D.from_array(arr) == p

    def test_from_array_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            Point4D.from_array([1.0, 2.0, 3.0])

    def test_is_hashable_and_frozen(self):
        p = Point4D(0.0, 0.0, 0.0, 0.0)
        assert len({p, Point4D(0.0, 0.0, 0.0, 0.0)}) == 1
        with pytest.raises(AttributeError):
            p.w = 1.0


def test_point3d_to_array():
    np.testing.assert_array_equal(Point3D(1.0, 2.0, 3.0).to_array(), [1.0, 2.0, 3.0])


class TestViewport:

    def test_center_and_shortest_side(self):
        vp = Viewport(640.0, 480.0)
        assert vp.center == (320.0, 240.0)
        assert vp.shortest_side == 480.0

    @pytest.mark.parametrize("width, height", [(0.0, 100.0), (100.0, 0.0), (-5.0, 10.0)])
    def test_rejects_empty_surface(self, width, height):
        with pytest.raises(ValueError):
            Viewport(width, height)


class TestScreenPoint:

    def test_position(self):
        assert ScreenPoint(10.0, 20.0, 0.25).position == (10.0, 20.0)

    def test_opacity_from_depth(self):
        assert ScreenPoint(0.0, 0.0, 0.25).opacity == pytest.approx(0.7)
        assert ScreenPoint(0.0, 0.0, 5.0).opacity == 1.0
        assert ScreenPoint(0.0, 0.0, -5.0).opacity == 0.2

    @pytest.mark.parametrize("depth", [-1.0, 0.0, 0.1, 0.3, 2.0, float("nan")])
    def test_opacity_agrees_with_calculate_opacity(self, depth):
        assert ScreenPoint(0.0, 0.0, depth).opacity == calculate_opacity(depth)
