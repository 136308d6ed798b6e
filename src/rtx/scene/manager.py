"""Scene manager: objects, camera and configuration in one place.

This module provides the scene API used to build and render images. A Scene
owns:
- A camera the image is rendered from
- A render configuration
- An ordered list of objects, each pairing one shape with one material

Objects are frozen once built. A render works on a snapshot of the scene
(a copy of the camera plus the current config and object tuple), so the
scene can be edited again as soon as render() returns.

Example:
    >>> import math
    >>> from rtx.camera import Camera
    >>> from rtx.geometry import Sphere
    >>> from rtx.materials import Material
    >>> from rtx.scene import Config, Object, Scene
    >>> camera = Camera((0, 0, 0), (1, 0, 0), math.radians(90))
    >>> scene = Scene(Config().with_rays_per_pixel(4), camera)
    >>> scene.add_object(Object(Sphere((5, 0, 0), 1.0), Material.light((1.0, 1.0, 1.0))))
    >>> image = scene.render(32, 24)
    >>> image.shape
    (24, 32, 3)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from rtx.camera.camera import Camera
from rtx.core import integrator
from rtx.core.integrator import RenderSnapshot, SeedLike
from rtx.core.ray import Ray, Vector3, VectorLike, normalize
from rtx.geometry import Plane, Shape, ShapeType, Sphere, Triangle
from rtx.materials.material import Material
from rtx.scene.config import Config

# Default camera: at the origin, looking along +x, 90 degrees wide
DEFAULT_CAMERA_POSITION = (0.0, 0.0, 0.0)
DEFAULT_CAMERA_DIRECTION = (1.0, 0.0, 0.0)
DEFAULT_CAMERA_FOV = math.radians(90.0)


def default_camera() -> Camera:
    """Create the camera a Scene uses when none is given."""
    return Camera(DEFAULT_CAMERA_POSITION, DEFAULT_CAMERA_DIRECTION, DEFAULT_CAMERA_FOV)


@dataclass(frozen=True, eq=False)
class Object:
    """A renderable object: one shape with one material.

    Attributes:
        shape: The geometry (Sphere, Plane or Triangle).
        material: The surface material.

    Raises:
        TypeError: If shape is not a supported shape or material is not a Material.
    """

    shape: Shape
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        if not isinstance(self.shape, (Sphere, Plane, Triangle)):
            raise TypeError(
                f"Object shape must be a Sphere, Plane or Triangle, got {type(self.shape).__name__}"
            )
        if not isinstance(self.material, Material):
            raise TypeError(
                f"Object material must be a Material, got {type(self.material).__name__}"
            )

    @property
    def shape_type(self) -> ShapeType:
        """The kind of shape this object is made of."""
        return self.shape.shape_type

    def distance(self, ray_position: VectorLike, ray_direction: VectorLike) -> float | None:
        """Distance along the ray to the object's surface, or None for a miss."""
        return self.shape.distance(ray_position, ray_direction)

    def normal_at(self, world_position: VectorLike) -> Vector3:
        """Unit surface normal at a point on the object."""
        return normalize(self.shape.normal(world_position))

    def to_dict(self) -> dict[str, Any]:
        """Describe the object with JSON-compatible values."""
        return {"shape": self.shape.to_dict(), "material": self.material.to_dict()}


class Scene:
    """A camera, a render configuration and the objects to render.

    Attributes:
        camera: The camera the scene is rendered from.
        config: The render configuration.

    Example:
        >>> scene = Scene()
        >>> _ = scene.add_shape(Plane((0, -1, 0), (0, 1, 0)), Material.colored((0.8, 0.8, 0.8)))
        >>> len(scene)
        1
    """

    def __init__(self, config: Config | None = None, camera: Camera | None = None) -> None:
        """Initialize an empty scene.

        Args:
            config: The render configuration. Defaults to Config().
            camera: The camera. Defaults to default_camera().
        """
        self.config = config if config is not None else Config()
        self.camera = camera if camera is not None else default_camera()
        self._objects: list[Object] = []

    # =========================================================================
    # Object Management
    # =========================================================================

    @property
    def objects(self) -> tuple[Object, ...]:
        """The objects in insertion order."""
        return tuple(self._objects)

    def add_object(self, obj: Object) -> None:
        """Add an object to the scene.

        Args:
            obj: The object to add.

        Raises:
            TypeError: If obj is not an Object.
        """
        if not isinstance(obj, Object):
            raise TypeError(f"Expected an Object, got {type(obj).__name__}")
        self._objects.append(obj)

    def add_shape(self, shape: Shape, material: Material | None = None) -> Object:
        """Wrap a shape and a material into an Object and add it.

        Args:
            shape: The geometry.
            material: The material. Defaults to a white diffuse Material().

        Returns:
            The object that was added.

        Raises:
            TypeError: If shape is not a supported shape.
        """
        obj = Object(shape, material if material is not None else Material())
        self.add_object(obj)
        return obj

    def clear(self) -> None:
        """Remove all objects. Camera and config are kept."""
        self._objects.clear()

    def __len__(self) -> int:
        return len(self._objects)

    # =========================================================================
    # Rendering
    # =========================================================================

    def snapshot(self) -> RenderSnapshot:
        """Freeze the current state for a render."""
        return RenderSnapshot(
            camera=self.camera.copy(),
            config=self.config,
            objects=tuple(self._objects),
        )

    def render(
        self, width: int, height: int, seed: SeedLike | None = None
    ) -> npt.NDArray[np.float64]:
        """Render the scene.

        Args:
            width: Image width in pixels (positive).
            height: Image height in pixels (positive).
            seed: Master seed override. Defaults to config.seed.

        Returns:
            Array of shape (height, width, 3) with linear colors, image[y][x].

        Raises:
            ValueError: If width or height is not positive.
        """
        return integrator.render_image(self.snapshot(), width, height, seed=seed)

    def render_to_image(self, width: int, height: int) -> npt.NDArray[np.uint8]:
        """Render the scene straight to 8-bit RGB.

        Returns:
            Array of shape (height, width, 3) and dtype uint8, see to_uint8().
        """
        from rtx.preview.export import to_uint8

        return to_uint8(self.render(width, height))

    def get_ray_dir(self, x: float, y: float, vertical_fov: float) -> Vector3:
        """Primary ray direction for image coordinate (x, y)."""
        return integrator.get_ray_dir(self.camera, x, y, vertical_fov)

    def render_pixel(
        self, x: float, y: float, vertical_fov: float, rng: np.random.Generator
    ) -> Vector3:
        """Average color of one pixel, see integrator.render_pixel()."""
        return integrator.render_pixel(self.snapshot(), x, y, vertical_fov, rng)

    def render_ray(self, ray: Ray, rng: np.random.Generator) -> Vector3:
        """Trace a single ray, see integrator.render_ray()."""
        return integrator.render_ray(self.snapshot(), ray, rng)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert the scene to a JSON-compatible dictionary."""
        from rtx.scene.serialize import scene_to_dict

        return scene_to_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from the output of to_dict()."""
        from rtx.scene.serialize import scene_from_dict

        return scene_from_dict(data)

    def __repr__(self) -> str:
        """Return a string representation of the scene."""
        return (
            f"Scene(objects={len(self._objects)}, camera={self.camera!r}, "
            f"config={self.config!r})"
        )

