"""Triangle primitive with plane intersection and an in-triangle test.

A triangle is given by three vertices v0, v1, v2. Its plane is spanned by

    edge1 = v1 - v0
    edge2 = v2 - v0

and its front face is the side normalize(edge1 x edge2) points to. Only rays
approaching the front face can hit.

Intersection runs in two steps:
1. Find where the ray meets the triangle's plane.
2. Express that point as v0 + a * edge1 + b * edge2 and accept it when
   0 <= a <= 1, 0 <= b <= 1 and a + b <= 1.

Step 2 solves the overdetermined 3x2 linear system (one row per axis) by
Gaussian elimination with row pivoting (kernels.solve_edge_system), so no
axis where an edge happens to have a zero component can cause a division by
zero. Systems that cannot be solved (collinear edges) count as a miss.

Example:
    >>> from rtx.geometry.triangle import Triangle
    >>> tri = Triangle(((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)))
    >>> tri.contains((0.25, 0.25, 0.0))
    True
    >>> tri.contains((0.9, 0.9, 0.0))
    False
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from rtx.core import kernels
from rtx.core.kernels import PLANE_TOLERANCE
from rtx.core.ray import Vector3, VectorLike, as_vec3, cross, dot, length, normalize
from rtx.geometry.shape import ShapeType


def solve_edge_coefficients(
    edge1: Vector3, edge2: Vector3, target: Vector3
) -> tuple[float, float, float] | None:
    """Solve a * edge1 + b * edge2 = target for (a, b).

    The system has one equation per axis. It is reduced by Gaussian
    elimination, picking the row with the largest magnitude entry as pivot
    for each unknown. The leftover third row is the residual: zero when the
    target lies in the plane spanned by the edges.

    Args:
        edge1: First spanning vector.
        edge2: Second spanning vector.
        target: The vector to express in terms of the edges.

    Returns:
        Tuple (a, b, residual), or None if the edges are (nearly) collinear.
    """
    solved, a, b, residual = kernels.solve_edge_system(
        as_vec3(edge1), as_vec3(edge2), as_vec3(target)
    )
    if not solved:
        return None
    return a, b, residual


@dataclass(frozen=True, eq=False)
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        vertices: The corners (v0, v1, v2). Their winding defines the front face.
    """

    vertices: tuple[Vector3, Vector3, Vector3]
    _edge1: Vector3 = field(init=False, repr=False)
    _edge2: Vector3 = field(init=False, repr=False)
    _normal: Vector3 = field(init=False, repr=False)

    shape_type = ShapeType.TRIANGLE

    def __post_init__(self) -> None:
        if len(self.vertices) != 3:
            raise ValueError(f"A triangle needs exactly 3 vertices, got {len(self.vertices)}")
        v0, v1, v2 = (as_vec3(v) for v in self.vertices)
        object.__setattr__(self, "vertices", (v0, v1, v2))
        object.__setattr__(self, "_edge1", v1 - v0)
        object.__setattr__(self, "_edge2", v2 - v0)
        normal = normalize(cross(self._edge1, self._edge2))
        if length(normal) == 0.0:
            logger.debug(
                "Degenerate triangle {}, it will never be hit",
                [v.tolist() for v in self.vertices],
            )
        object.__setattr__(self, "_normal", normal)

    @property
    def edges(self) -> tuple[Vector3, Vector3]:
        """The spanning vectors (v1 - v0, v2 - v0)."""
        return self._edge1.copy(), self._edge2.copy()

    def contains(self, point: VectorLike) -> bool:
        """Check whether a point lies inside the triangle.

        Args:
            point: A point in world space, expected to lie on the triangle's plane.

        Returns:
            True when the point is inside or on the border of the triangle.
            False for outside points and for degenerate triangles.
        """
        p = as_vec3(point) - self.vertices[0]
        solution = solve_edge_coefficients(self._edge1, self._edge2, p)
        if solution is None:
            logger.debug(
                "Can't solve the edge system for triangle {}",
                [v.tolist() for v in self.vertices],
            )
            return False
        a, b, residual = solution
        scale = max(1.0, length(p))
        if abs(residual) > PLANE_TOLERANCE * scale:
            return False
        return 0.0 <= a <= 1.0 and 0.0 <= b <= 1.0 and a + b <= 1.0

    def plane_distance(self, ray_position: VectorLike, ray_direction: VectorLike) -> float | None:
        """Distance along the ray to the triangle's plane.

        Returns:
            The distance, or None if the ray is parallel to the plane or the
            plane lies behind the ray origin.
        """
        direction = normalize(as_vec3(ray_direction))
        facing = dot(direction, self._normal)
        if facing == 0.0:
            return None
        t = dot(self._normal, self.vertices[0] - as_vec3(ray_position)) / facing
        if not t > 0.0:
            return None
        return t

    def distance(self, ray_position: VectorLike, ray_direction: VectorLike) -> float | None:
        """Distance along the ray to the triangle, or None for a miss."""
        position = as_vec3(ray_position)
        direction = normalize(as_vec3(ray_direction))
        if dot(self._normal, direction) >= 0.0:
            return None
        t = self.plane_distance(position, direction)
        if t is None:
            return None
        if not self.contains(position + direction * t):
            return None
        return t

    def normal(self, world_position: VectorLike) -> Vector3:
        """The face normal, constant over the whole triangle."""
        return self._normal.copy()

    def to_dict(self) -> dict[str, object]:
        """Describe the triangle with JSON-compatible values."""
        return {
            "type": self.shape_type.name.lower(),
            "vertices": [v.tolist() for v in self.vertices],
        }
