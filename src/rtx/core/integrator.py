"""Path tracing render loop.

This module turns a scene snapshot into an image. It traces, for every pixel,
``rays_per_pixel`` jittered rays through the scene, bounces each one off the
closest surface until it misses, is fully absorbed or runs out of bounces,
and averages the gathered light.

Whole images are rendered by the compiled kernels in rtx.core.kernels: the
snapshot is packed into flat arrays and the rows run as a numba parallel-for
on up to config.max_workers threads. Every sample draws from its own random
stream seeded with (master_seed, row, sample), so a seeded render is
reproducible no matter how many threads run it or in which order rows finish.

The object-level functions (render_ray, render_pixel) trace the same model
on Scene objects with a numpy Generator, for inspecting single rays.

Key features:
    - Analytic closest-hit search over all objects
    - Roughness-blended bounce directions with emission gathering
    - Depth of field through origin and focal point jitter
    - Row-parallel execution with in-order reassembly

Example:
    >>> from rtx.camera import Camera
    >>> from rtx.core.integrator import RenderSnapshot, render_image
    >>> from rtx.scene.config import Config
    >>> snapshot = RenderSnapshot(Camera((0, 0, 0), (0, 0, 1), 1.5), Config(seed=1), ())
    >>> render_image(snapshot, 4, 2).shape
    (2, 4, 3)
"""

from __future__ import annotations

import math
import time
from collections import namedtuple
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import numba
import numpy as np
import numpy.typing as npt
from loguru import logger

from rtx.core import kernels
from rtx.core.ray import Ray, Vector3, is_zero, normalize, random_in_unit_cube, zeros
from rtx.materials.scatter import ray_hit

if TYPE_CHECKING:
    from rtx.camera.camera import Camera
    from rtx.scene.config import Config
    from rtx.scene.manager import Object

# A non-negative int or a sequence of them
SeedLike = Union[int, Sequence[int]]

# Rows handed to the kernel per thread between two progress messages
ROWS_PER_THREAD = 4

_WORD_BITS = 64
_WORD_MASK = (1 << _WORD_BITS) - 1

# Flat arrays of a snapshot, see rtx.core.kernels for the layout
SceneArrays = namedtuple(
    "SceneArrays", ["shape_types", "geometry", "materials", "camera_position", "to_world"]
)

# Scalar render parameters in the order the kernels take them
RenderSettings = namedtuple(
    "RenderSettings",
    [
        "fov",
        "vertical_fov",
        "rays_per_pixel",
        "max_bounces",
        "max_distance",
        "focal_length",
        "focal_offset",
        "non_focal_offset",
    ],
)


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything a render worker needs, frozen for the duration of a render.

    Attributes:
        camera: A private copy of the scene camera.
        config: The render configuration.
        objects: The scene objects at the time the render started.
    """

    camera: Camera
    config: Config
    objects: tuple[Object, ...]


# =============================================================================
# Randomness
# =============================================================================


def draw_master_seed() -> int:
    """Draw a fresh 64-bit master seed from OS entropy."""
    return int(np.random.SeedSequence().generate_state(1, np.uint64)[0])


def seed_words(seed: SeedLike) -> npt.NDArray[np.uint64]:
    """Split a seed into 64-bit words.

    Every part contributes its word count followed by its words, least
    significant first, so an int seed and the one-element sequence holding
    it give the same words.

    Raises:
        ValueError: If any part of the seed is negative.
    """
    parts = [seed] if isinstance(seed, (int, np.integer)) else list(seed)
    words: list[int] = []
    for part in parts:
        value = int(part)
        if value < 0:
            raise ValueError(f"Seed values must be non-negative, got {value}")
        chunk = [value & _WORD_MASK]
        value >>= _WORD_BITS
        while value:
            chunk.append(value & _WORD_MASK)
            value >>= _WORD_BITS
        words.append(len(chunk))
        words.extend(chunk)
    return np.array(words, dtype=np.uint64)


def seed_key(seed: SeedLike) -> np.uint64:
    """Fold a master seed into the 64-bit key the kernels derive streams from."""
    return np.uint64(kernels.fold_seed(seed_words(seed)))


# =============================================================================
# Packing
# =============================================================================


def pack_scene(snapshot: RenderSnapshot) -> SceneArrays:
    """Pack camera and objects into the flat arrays the kernels read."""
    count = len(snapshot.objects)
    shape_types = np.empty(count, dtype=np.int64)
    geometry = np.zeros((count, kernels.GEOMETRY_SIZE), dtype=np.float64)
    materials = np.zeros((count, kernels.MATERIAL_SIZE), dtype=np.float64)

    for i, obj in enumerate(snapshot.objects):
        shape = obj.shape
        shape_types[i] = int(shape.shape_type)
        if shape.shape_type == kernels.SPHERE:
            geometry[i, 0:3] = shape.center
            geometry[i, 3] = shape.radius
        elif shape.shape_type == kernels.PLANE:
            geometry[i, 0:3] = shape.point
            geometry[i, 3:6] = shape.normal_vector
        else:
            edge1, edge2 = shape.edges
            geometry[i, 0:3] = shape.vertices[0]
            geometry[i, 3:6] = edge1
            geometry[i, 6:9] = edge2
            geometry[i, 9:12] = shape.normal(shape.vertices[0])
        materials[i, 0:3] = obj.material.base_color
        materials[i, 3:6] = obj.material.emission_color
        materials[i, 6] = obj.material.roughness

    camera = snapshot.camera
    return SceneArrays(
        shape_types,
        geometry,
        materials,
        np.ascontiguousarray(camera.position, dtype=np.float64),
        np.ascontiguousarray(camera.to_world_space_matrix, dtype=np.float64),
    )


def render_settings(snapshot: RenderSnapshot, width: int, height: int) -> RenderSettings:
    """Collect the scalar parameters of a width x height render."""
    config = snapshot.config
    fov = float(snapshot.camera.fov)
    return RenderSettings(
        fov,
        height / width * fov,
        int(config.rays_per_pixel),
        int(config.max_bounces),
        float(config.max_distance),
        float(config.focal_length),
        float(config.focal_offset),
        float(config.non_focal_offset),
    )


# =============================================================================
# Tracing
# =============================================================================


def get_ray_dir(camera: Camera, x: float, y: float, vertical_fov: float) -> Vector3:
    """Compute the primary ray direction for an image coordinate.

    The mapping is angular: angle_x = fov * (x - 0.5) and
    angle_y = vertical_fov * (y - 0.5) give the camera-space direction
    (sin(angle_x), sin(angle_y), cos(angle_x) * cos(angle_y)).

    Args:
        camera: The camera to shoot from.
        x: Horizontal image coordinate in [0, 1).
        y: Vertical image coordinate in [0, 1).
        vertical_fov: The vertical field of view in radians.

    Returns:
        The world-space direction. Unit length for an orthonormal camera.
    """
    to_world = np.ascontiguousarray(camera.to_world_space_matrix, dtype=np.float64)
    return kernels.primary_direction(
        to_world, float(camera.fov), float(vertical_fov), float(x), float(y)
    )


def closest_hit(
    objects: Sequence[Object],
    position: Vector3,
    direction: Vector3,
    max_distance: float,
) -> tuple[Object, float] | None:
    """Find the nearest object the ray hits.

    Only finite, positive distances up to max_distance count. Ties keep the
    object that comes first.

    Returns:
        Tuple (object, distance), or None if nothing is hit.
    """
    best: tuple[Object, float] | None = None
    for obj in objects:
        distance = obj.distance(position, direction)
        if distance is None or not math.isfinite(distance):
            continue
        if distance <= 0.0 or distance > max_distance:
            continue
        if best is None or distance < best[1]:
            best = (obj, distance)
    return best


def render_ray(snapshot: RenderSnapshot, ray: Ray, rng: np.random.Generator) -> Vector3:
    """Trace one ray through the scene and return the light it gathered.

    The ray is bounced at most max_bounces + 1 times. Tracing stops early
    when the throughput drops to exactly zero or when the ray leaves the
    scene.

    Args:
        snapshot: The scene to trace against.
        ray: The ray to trace. Mutated in place.
        rng: The generator for bounce directions.

    Returns:
        The ray's resulting color.
    """
    if not snapshot.objects:
        return ray.resulting_color

    for _ in range(snapshot.config.max_bounces + 1):
        if is_zero(ray.light_color):
            break
        hit = closest_hit(
            snapshot.objects, ray.position, ray.direction, snapshot.config.max_distance
        )
        if hit is None:
            break
        obj, distance = hit
        ray.position = ray.position + ray.direction * distance
        ray_hit(ray, obj, rng)

    return ray.resulting_color


def render_pixel(
    snapshot: RenderSnapshot,
    x: float,
    y: float,
    vertical_fov: float,
    rng: np.random.Generator,
) -> Vector3:
    """Average rays_per_pixel depth-of-field samples for one pixel.

    Each sample shifts the ray origin by a random offset scaled with
    non_focal_offset and aims at the focal point (focal_length along the
    primary direction) shifted by a random offset scaled with focal_offset.

    Args:
        snapshot: The scene to render.
        x: Horizontal image coordinate in [0, 1).
        y: Vertical image coordinate in [0, 1).
        vertical_fov: The vertical field of view in radians.
        rng: The generator for jitter and bounces.

    Returns:
        The averaged linear color of the pixel.
    """
    config = snapshot.config
    origin = snapshot.camera.position
    ray_dir = get_ray_dir(snapshot.camera, x, y, vertical_fov)
    focal_point = origin + ray_dir * config.focal_length

    total = zeros()
    for _ in range(config.rays_per_pixel):
        ray_position = origin + random_in_unit_cube(rng) * config.non_focal_offset
        target_point = focal_point + random_in_unit_cube(rng) * config.focal_offset
        ray = Ray(position=ray_position, direction=normalize(target_point - ray_position))
        total = total + render_ray(snapshot, ray, rng)
    return total / config.rays_per_pixel


def _render_rows(
    snapshot: RenderSnapshot,
    rows: npt.NDArray[np.int64],
    width: int,
    height: int,
    key: np.uint64,
) -> npt.NDArray[np.float64]:
    return kernels.render_rows(
        rows,
        width,
        height,
        *pack_scene(snapshot),
        *render_settings(snapshot, width, height),
        key,
    )


def render_row(
    snapshot: RenderSnapshot,
    row: int,
    width: int,
    height: int,
    seed: SeedLike,
) -> npt.NDArray[np.float64]:
    """Render one image row.

    The result is identical to row ``row`` of render_image() with the same
    seed.

    Returns:
        Array of shape (width, 3).
    """
    logger.debug("rendering row {} out of {} ({:.2f}%)", row, height, row / height * 100.0)
    rows = np.array([row], dtype=np.int64)
    return _render_rows(snapshot, rows, width, height, seed_key(seed))[0]


def render_image(
    snapshot: RenderSnapshot,
    width: int,
    height: int,
    seed: SeedLike | None = None,
) -> npt.NDArray[np.float64]:
    """Render a complete image.

    Rows run as a parallel-for on min(config.max_workers, NUMBA_NUM_THREADS)
    threads (all numba threads when unset). They are handed to the kernel in
    chunks so progress can be logged between chunks. The call blocks until
    all rows are done.

    Args:
        snapshot: The scene to render.
        width: Image width in pixels (positive).
        height: Image height in pixels (positive).
        seed: Master seed override. Defaults to config.seed, or a fresh seed
            from OS entropy when that is unset too.

    Returns:
        Array of shape (height, width, 3) with linear colors, image[y][x].

    Raises:
        ValueError: If width or height is not positive, or the seed is negative.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")

    if seed is None:
        seed = snapshot.config.seed if snapshot.config.seed is not None else draw_master_seed()
    key = seed_key(seed)

    available = numba.config.NUMBA_NUM_THREADS
    threads = min(snapshot.config.max_workers or available, available)
    logger.info(
        "Rendering {}x{} image, {} objects, {} rays per pixel, {} threads",
        width,
        height,
        len(snapshot.objects),
        snapshot.config.rays_per_pixel,
        threads,
    )
    start = time.perf_counter()

    image = np.empty((height, width, 3), dtype=np.float64)
    chunk = threads * ROWS_PER_THREAD
    previous_threads = numba.get_num_threads()
    numba.set_num_threads(threads)
    try:
        for first in range(0, height, chunk):
            logger.debug(
                "rendering row {} out of {} ({:.2f}%)", first, height, first / height * 100.0
            )
            rows = np.arange(first, min(first + chunk, height), dtype=np.int64)
            image[first : first + len(rows)] = _render_rows(snapshot, rows, width, height, key)
    finally:
        numba.set_num_threads(previous_threads)

    logger.info("Render finished in {:.3f}s", time.perf_counter() - start)
    return image
