"""Unit tests for the one-sided plane."""

import numpy as np
import pytest

from rtx.geometry import Plane, ShapeType


@pytest.fixture
def floor():
    """The plane y = -1 facing up."""
    return Plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))


class TestPlane:
    """Tests for plane construction and intersection."""

    def test_normal_is_normalized(self):
        """Test the stored normal has unit length."""
        plane = Plane((0.0, 0.0, 0.0), (0.0, 5.0, 0.0))
        np.testing.assert_allclose(plane.normal((3.0, 0.0, 3.0)), (0.0, 1.0, 0.0))
        assert plane.shape_type == ShapeType.PLANE

    def test_zero_normal_raises(self):
        """Test a zero normal is rejected."""
        with pytest.raises(ValueError):
            Plane((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_hit_from_front(self, floor):
        """Test a ray going down hits the floor."""
        assert floor.distance((0.0, 0.0, 0.0), (0.0, -1.0, 0.0)) == pytest.approx(1.0)

    def test_oblique_hit(self, floor):
        """Test the distance along a slanted ray."""
        assert floor.distance((0.0, 0.0, 0.0), (1.0, -1.0, 0.0)) == pytest.approx(np.sqrt(2.0))

    def test_parallel_ray(self, floor):
        """Test a ray parallel to the plane misses."""
        assert floor.distance((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)) is None

    def test_ray_moving_away(self, floor):
        """Test a ray going up misses."""
        assert floor.distance((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) is None

    def test_origin_behind_plane(self, floor):
        """Test the back side is invisible."""
        assert floor.distance((0.0, -2.0, 0.0), (0.0, -1.0, 0.0)) is None
        assert floor.distance((0.0, -2.0, 0.0), (0.0, 1.0, 0.0)) is None

    def test_origin_on_plane(self, floor):
        """Test a ray leaving the surface does not hit it again."""
        assert floor.distance((0.0, -1.0, 0.0), (0.0, -1.0, 0.0)) is None
