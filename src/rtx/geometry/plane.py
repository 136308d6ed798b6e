"""One-sided infinite plane primitive.

A plane is defined by a point on it and a normal. Only its front side (the
half-space the normal points into) is visible: rays that start on or behind
the plane, or that travel parallel to or away from it, never hit.

For a visible hit the distance along a normalized direction d from origin O is

    t = -dot(O - point, n) / dot(d, n)
"""

from __future__ import annotations

from dataclasses import dataclass

from rtx.core import kernels
from rtx.core.ray import Vector3, VectorLike, as_vec3, length, normalize
from rtx.geometry.shape import ShapeType


@dataclass(frozen=True, eq=False)
class Plane:
    """An infinite plane through ``point`` facing along ``normal``.

    Attributes:
        point: Any point on the plane.
        normal_vector: The front-facing normal. Normalized on construction.
    """

    point: Vector3
    normal_vector: Vector3

    shape_type = ShapeType.PLANE

    def __post_init__(self) -> None:
        normal = as_vec3(self.normal_vector)
        if length(normal) == 0.0:
            raise ValueError("Plane normal must not be the zero vector")
        object.__setattr__(self, "point", as_vec3(self.point))
        object.__setattr__(self, "normal_vector", normalize(normal))

    def distance(self, ray_position: VectorLike, ray_direction: VectorLike) -> float | None:
        """Distance along the ray to the plane, or None for a miss."""
        t = kernels.plane_distance(
            self.point, self.normal_vector, as_vec3(ray_position), as_vec3(ray_direction)
        )
        return None if t == kernels.NO_HIT else t

    def normal(self, world_position: VectorLike) -> Vector3:
        """The plane normal, identical everywhere on the surface."""
        return self.normal_vector.copy()

    def to_dict(self) -> dict[str, object]:
        """Describe the plane with JSON-compatible values."""
        return {
            "type": self.shape_type.name.lower(),
            "point": self.point.tolist(),
            "normal": self.normal_vector.tolist(),
        }
