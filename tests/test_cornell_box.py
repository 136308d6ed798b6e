"""Tests for the Cornell box scene factory.

Tests cover:
- Object count and order
- Wall orientation (every surface faces into the box)
- Light and wall materials, including custom parameters
- Camera placement and default config
- A small end-to-end render
"""

import math

import numpy as np
import pytest

from rtx.core.ray import dot, vec3
from rtx.geometry import Plane, ShapeType, Sphere, Triangle
from rtx.scene import Config, CornellBoxParams, create_cornell_box_scene, quad_triangles
from rtx.scene.cornell_box import (
    BOX_SIZE,
    CAMERA_DISTANCE,
    CAMERA_FOV,
    LIGHT_DEPTH,
    LIGHT_WIDTH,
    SPHERE_RADIUS,
)

WALL_SLICE = slice(0, 8)
FLOOR_INDEX = 8
LIGHT_SLICE = slice(9, 11)
SPHERE_SLICE = slice(11, 14)


@pytest.fixture(scope="module")
def cornell_scene():
    """The default Cornell box scene, shared because it is never modified."""
    return create_cornell_box_scene()


def box_center(size=BOX_SIZE):
    return vec3(size / 2.0, size / 2.0, size / 2.0)


class TestQuadTriangles:
    """Tests for splitting quads into triangles."""

    def test_two_triangles_facing_u_cross_v(self):
        """Test both halves face along edge_u x edge_v."""
        triangles = quad_triangles((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert len(triangles) == 2
        for triangle in triangles:
            np.testing.assert_allclose(triangle.normal(vec3(0.0, 0.0, 0.0)), (0.0, 0.0, 1.0))

    def test_covers_the_quad(self):
        """Test points of the quad fall inside exactly one half."""
        first, second = quad_triangles((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0))
        assert first.contains(vec3(0.5, 0.5, 0.0))
        assert not second.contains(vec3(0.5, 0.5, 0.0))
        assert second.contains(vec3(1.5, 1.5, 0.0))
        assert not first.contains(vec3(1.5, 1.5, 0.0))


class TestCornellBoxGeometry:
    """Tests for the scene layout."""

    def test_object_count(self, cornell_scene):
        """Test 8 wall triangles, a floor, 2 light triangles and 3 spheres."""
        assert len(cornell_scene) == 14
        types = [obj.shape_type for obj in cornell_scene.objects]
        assert types[WALL_SLICE] == [ShapeType.TRIANGLE] * 8
        assert types[FLOOR_INDEX] == ShapeType.PLANE
        assert types[LIGHT_SLICE] == [ShapeType.TRIANGLE] * 2
        assert types[SPHERE_SLICE] == [ShapeType.SPHERE] * 3

    def test_walls_face_inward(self, cornell_scene):
        """Test every wall triangle faces the box center."""
        center = box_center()
        for obj in cornell_scene.objects[WALL_SLICE]:
            triangle = obj.shape
            assert isinstance(triangle, Triangle)
            normal = triangle.normal(triangle.vertices[0])
            assert dot(normal, center - triangle.vertices[0]) > 0.0

    def test_floor_faces_up(self, cornell_scene):
        """Test the floor is the plane y = 0 facing +y."""
        floor = cornell_scene.objects[FLOOR_INDEX].shape
        assert isinstance(floor, Plane)
        np.testing.assert_array_equal(floor.normal_vector, (0.0, 1.0, 0.0))
        assert floor.point[1] == 0.0

    def test_light_below_ceiling(self, cornell_scene):
        """Test the light faces down from just under the ceiling."""
        for obj in cornell_scene.objects[LIGHT_SLICE]:
            triangle = obj.shape
            np.testing.assert_allclose(triangle.normal(triangle.vertices[0]), (0.0, -1.0, 0.0))
            for vertex in triangle.vertices:
                assert vertex[1] == pytest.approx(BOX_SIZE - 1.0)

    def test_light_area(self, cornell_scene):
        """Test the two light triangles cover LIGHT_WIDTH x LIGHT_DEPTH."""
        area = 0.0
        for obj in cornell_scene.objects[LIGHT_SLICE]:
            edge1, edge2 = obj.shape.edges
            area += np.linalg.norm(np.cross(edge1, edge2)) / 2.0
        assert area == pytest.approx(LIGHT_WIDTH * LIGHT_DEPTH)

    def test_spheres_rest_on_floor(self, cornell_scene):
        """Test every sphere touches the floor and sits inside the box."""
        for obj in cornell_scene.objects[SPHERE_SLICE]:
            sphere = obj.shape
            assert isinstance(sphere, Sphere)
            assert sphere.radius == SPHERE_RADIUS
            assert sphere.center[1] == pytest.approx(SPHERE_RADIUS)
            assert SPHERE_RADIUS < sphere.center[0] < BOX_SIZE - SPHERE_RADIUS
            assert SPHERE_RADIUS < sphere.center[2] < BOX_SIZE - SPHERE_RADIUS

    def test_custom_box_size(self):
        """Test box_size scales the walls."""
        scene = create_cornell_box_scene(box_size=100.0)
        vertices = np.array([v for obj in scene.objects[WALL_SLICE] for v in obj.shape.vertices])
        assert vertices.max() == pytest.approx(100.0)
        assert vertices.min() == pytest.approx(0.0)


class TestCornellBoxMaterials:
    """Tests for materials."""

    def test_default_colors(self, cornell_scene):
        """Test the left wall is red, the right wall green and the light white."""
        objects = cornell_scene.objects
        np.testing.assert_allclose(objects[0].material.base_color, (0.65, 0.05, 0.05))
        np.testing.assert_allclose(objects[2].material.base_color, (0.12, 0.45, 0.15))
        np.testing.assert_allclose(objects[FLOOR_INDEX].material.base_color, (0.73, 0.73, 0.73))
        for obj in objects[LIGHT_SLICE]:
            np.testing.assert_allclose(obj.material.emission_color, (15.0, 15.0, 15.0))
            np.testing.assert_array_equal(obj.material.base_color, (0.0, 0.0, 0.0))

    def test_only_the_light_emits(self, cornell_scene):
        """Test no other object emits light."""
        for i, obj in enumerate(cornell_scene.objects):
            if i in (9, 10):
                continue
            assert not obj.material.emission_color.any()

    def test_sphere_roughness(self, cornell_scene):
        """Test the diffuse, metal and mirror spheres."""
        roughness = [obj.material.roughness for obj in cornell_scene.objects[SPHERE_SLICE]]
        assert roughness == [1.0, pytest.approx(0.3), 0.0]

    def test_custom_params(self):
        """Test custom light and wall colors are applied."""
        params = CornellBoxParams(
            light_intensity=20.0,
            light_color=(1.0, 0.9, 0.8),
            left_wall_color=(0.2, 0.2, 0.8),
        )
        scene = create_cornell_box_scene(params=params)
        np.testing.assert_allclose(scene.objects[0].material.base_color, (0.2, 0.2, 0.8))
        np.testing.assert_allclose(scene.objects[9].material.emission_color, (20.0, 18.0, 16.0))


class TestCornellBoxCamera:
    """Tests for camera and config."""

    def test_camera_looks_into_box(self, cornell_scene):
        """Test the camera sits in front of the box looking along +z."""
        camera = cornell_scene.camera
        np.testing.assert_allclose(
            camera.position, (BOX_SIZE / 2.0, BOX_SIZE / 2.0, -CAMERA_DISTANCE)
        )
        assert camera.fov == pytest.approx(math.radians(40.0)) == CAMERA_FOV
        forward = camera.rotate_to_world_space(vec3(0.0, 0.0, 1.0))
        np.testing.assert_allclose(forward, (0.0, 0.0, 1.0), atol=1e-12)

    def test_default_focus_on_box_center(self, cornell_scene):
        """Test the default config focuses on the middle of the box."""
        assert cornell_scene.config.focal_length == pytest.approx(
            CAMERA_DISTANCE + BOX_SIZE / 2.0
        )

    def test_custom_config(self):
        """Test a given config is used unchanged."""
        config = Config(rays_per_pixel=2)
        assert create_cornell_box_scene(config=config).config is config


class TestCornellBoxRender:
    """Tests for rendering the box."""

    def test_small_render(self):
        """Test a tiny render is finite, non-negative and receives light."""
        config = Config(rays_per_pixel=4, max_bounces=4, seed=11, max_workers=2)
        config = config.with_focal_length(CAMERA_DISTANCE + BOX_SIZE / 2.0)
        scene = create_cornell_box_scene(config=config)
        image = scene.render(8, 8)
        assert image.shape == (8, 8, 3)
        assert np.isfinite(image).all()
        assert (image >= 0.0).all()
        assert image.sum() > 0.0
