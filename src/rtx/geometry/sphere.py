"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves the quadratic

    |origin + t * direction - center|^2 = radius^2

for a normalized direction. Expanding gives a*t^2 + b*t + c = 0 with

    a = dot(direction, direction)
    b = 2 * dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Tangent rays (discriminant at or below kernels.DISCRIMINANT_EPSILON) count as misses,
which keeps grazing rays from producing surface acne. Only the nearer root is
reported, and only when it lies in front of the ray origin.

Example:
    >>> from rtx.geometry.sphere import Sphere
    >>> sphere = Sphere(center=(5.0, 0.0, 0.0), radius=1.0)
    >>> sphere.distance((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    4.0
"""

from __future__ import annotations

from dataclasses import dataclass

from rtx.core import kernels
from rtx.core.ray import Vector3, VectorLike, as_vec3, normalize
from rtx.geometry.shape import ShapeType


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: Vector3
    radius: float

    shape_type = ShapeType.SPHERE

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "center", as_vec3(self.center))
        object.__setattr__(self, "radius", float(self.radius))

    def distance(self, ray_position: VectorLike, ray_direction: VectorLike) -> float | None:
        """Distance along the ray to the nearest intersection.

        Args:
            ray_position: The origin of the ray in world space.
            ray_direction: The direction of the ray. Need not be normalized.

        Returns:
            The distance to the first hit in front of the origin, or None when
            the ray misses, grazes the sphere, or the sphere lies behind it.
        """
        t = kernels.sphere_distance(
            self.center, self.radius, as_vec3(ray_position), as_vec3(ray_direction)
        )
        return None if t == kernels.NO_HIT else t

    def normal(self, world_position: VectorLike) -> Vector3:
        """Outward unit normal at a point on the surface."""
        return normalize(as_vec3(world_position) - self.center)

    def to_dict(self) -> dict[str, object]:
        """Describe the sphere with JSON-compatible values."""
        return {
            "type": self.shape_type.name.lower(),
            "center": self.center.tolist(),
            "radius": self.radius,
        }
