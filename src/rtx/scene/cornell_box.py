"""Cornell box scene configuration.

This module provides a factory function to create the classic Cornell box scene,
a standard test scene used in computer graphics for evaluating global illumination
algorithms.

The Cornell box consists of:
- 4 walls made of triangle pairs (left, right, back, ceiling)
- An infinite floor plane
- Left wall: red diffuse
- Right wall: green diffuse
- Back wall, floor, ceiling: white diffuse
- 3 spheres with different materials (diffuse, rough metal, mirror)
- Area light on the ceiling (emissive triangle pair)

The box spans from 0 to box_size in each dimension, with the camera
positioned outside looking in through the open front. All surfaces face the
inside of the box, since triangles and planes are only visible from the front.

Example:
    >>> from rtx.scene.cornell_box import create_cornell_box_scene
    >>> scene = create_cornell_box_scene()
    >>> len(scene)
    14
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from rtx.camera.camera import Camera
from rtx.core.ray import Vector3, VectorLike, as_vec3
from rtx.geometry import Plane, Sphere, Triangle
from rtx.materials.material import Material
from rtx.scene.config import Config
from rtx.scene.manager import Scene

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    Attributes:
        light_intensity: Multiplier applied to light_color for the emission
            of the area light. Default is 15.0.
        light_color: RGB color of the light (each component in [0, 1]).
            Default is white (1.0, 1.0, 1.0).
        left_wall_color: RGB base color of the left wall.
            Default is red (0.65, 0.05, 0.05).
        right_wall_color: RGB base color of the right wall.
            Default is green (0.12, 0.45, 0.15).
        back_wall_color: RGB base color of the back wall, floor and ceiling.
            Default is white (0.73, 0.73, 0.73).

    Example:
        >>> custom = CornellBoxParams(
        ...     light_intensity=20.0,
        ...     light_color=(1.0, 0.9, 0.8),  # Warm light
        ...     left_wall_color=(0.2, 0.2, 0.8),  # Blue wall
        ... )
    """

    light_intensity: float = 15.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    right_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    back_wall_color: tuple[float, float, float] = (0.73, 0.73, 0.73)


# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

# Ceiling light size (classic Cornell box light is ~130x105 units)
LIGHT_WIDTH = 130.0
LIGHT_DEPTH = 105.0

# Sphere materials
DIFFUSE_SPHERE_COLOR = (0.73, 0.73, 0.73)
METAL_SPHERE_COLOR = (0.95, 0.93, 0.88)  # Silver reflectance
METAL_SPHERE_ROUGHNESS = 0.3  # Slightly rough for soft reflections
SPHERE_RADIUS = 80.0

# Camera
CAMERA_DISTANCE = 800.0
CAMERA_FOV = math.radians(40.0)


def quad_triangles(corner: VectorLike, edge_u: VectorLike, edge_v: VectorLike) -> list[Triangle]:
    """Split the parallelogram corner + s*edge_u + t*edge_v into two triangles.

    Both triangles face along edge_u x edge_v.
    """
    c: Vector3 = as_vec3(corner)
    u: Vector3 = as_vec3(edge_u)
    v: Vector3 = as_vec3(edge_v)
    return [
        Triangle((c, c + u, c + v)),
        Triangle((c + u, c + u + v, c + v)),
    ]


# =============================================================================
# Cornell Box Factory
# =============================================================================


def create_cornell_box_scene(
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
    config: Config | None = None,
) -> Scene:
    """Create a Cornell box scene with standard configuration.

    The coordinate system places the box origin at (0, 0, 0) with:
    - X-axis: from the right wall (x = 0) to the left wall (x = box_size),
      as seen from the camera
    - Y-axis: floor to ceiling (0 to box_size)
    - Z-axis: front to back (0 to box_size), camera looks toward +Z

    Args:
        box_size: The size of the box in each dimension. Default is 555.0.
        params: Optional CornellBoxParams for customizing light and wall colors.
            If None, uses default CornellBoxParams().
        config: Render configuration. Defaults to Config() focused on the
            middle of the box.

    Returns:
        A Scene with the box geometry, materials and a camera looking in.
    """
    if params is None:
        params = CornellBoxParams()

    s = box_size
    camera = Camera.look_at(
        position=(s / 2.0, s / 2.0, -CAMERA_DISTANCE),
        target=(s / 2.0, s / 2.0, s / 2.0),
        fov=CAMERA_FOV,
    )
    if config is None:
        config = Config(focal_length=CAMERA_DISTANCE + s / 2.0)
    scene = Scene(config, camera)

    # =========================================================================
    # Materials
    # =========================================================================

    left_mat = Material.colored(params.left_wall_color)
    right_mat = Material.colored(params.right_wall_color)
    white_mat = Material.colored(params.back_wall_color)
    light_mat = Material.light(
        tuple(c * params.light_intensity for c in params.light_color)
    )

    # =========================================================================
    # Walls
    # =========================================================================

    walls = (
        # Left wall - facing -x
        (left_mat, (s, 0.0, 0.0), (0.0, 0.0, s), (0.0, s, 0.0)),
        # Right wall - facing +x
        (right_mat, (0.0, 0.0, 0.0), (0.0, s, 0.0), (0.0, 0.0, s)),
        # Back wall - facing -z
        (white_mat, (0.0, 0.0, s), (0.0, s, 0.0), (s, 0.0, 0.0)),
        # Ceiling - facing -y
        (white_mat, (0.0, s, 0.0), (s, 0.0, 0.0), (0.0, 0.0, s)),
    )
    for material, corner, edge_u, edge_v in walls:
        for triangle in quad_triangles(corner, edge_u, edge_v):
            scene.add_shape(triangle, material)

    # Floor - facing +y
    scene.add_shape(Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)), white_mat)

    # =========================================================================
    # Area Light (on ceiling)
    # =========================================================================

    # Light sits just below ceiling so it is hit before the ceiling
    light_corner = ((s - LIGHT_WIDTH) / 2.0, s - 1.0, (s - LIGHT_DEPTH) / 2.0)
    for triangle in quad_triangles(light_corner, (LIGHT_WIDTH, 0.0, 0.0), (0.0, 0.0, LIGHT_DEPTH)):
        scene.add_shape(triangle, light_mat)

    # =========================================================================
    # Spheres (resting on the floor)
    # =========================================================================

    spheres = (
        (Material.colored(DIFFUSE_SPHERE_COLOR), (s * 0.73, SPHERE_RADIUS, s * 0.35)),
        (
            Material(METAL_SPHERE_COLOR, (0.0, 0.0, 0.0), METAL_SPHERE_ROUGHNESS),
            (s * 0.27, SPHERE_RADIUS, s * 0.35),
        ),
        (Material.mirror(), (s * 0.5, SPHERE_RADIUS, s * 0.65)),
    )
    for material, center in spheres:
        scene.add_shape(Sphere(center, SPHERE_RADIUS), material)

    return scene
