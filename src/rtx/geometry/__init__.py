"""Geometry module for shape primitives.

This module provides the closed set of geometric primitives:

Components:
    shape: ShapeType tag shared by all primitives
    sphere: Sphere with analytic ray-sphere intersection
    plane: One-sided infinite plane
    triangle: Triangle with a pivoting in-triangle test

Every primitive answers the same two queries:
    distance(ray_position, ray_direction) -> float | None
    normal(world_position) -> Vector3

Shapes are frozen after construction, so any number of render workers can
query them at once without locking.
"""

from typing import Union

from .plane import Plane
from .shape import ShapeType
from .sphere import Sphere
from .triangle import Triangle, solve_edge_coefficients

# Any concrete shape accepted by the renderer
Shape = Union[Sphere, Plane, Triangle]

__all__ = [
    "Shape",
    "ShapeType",
    "Sphere",
    "Plane",
    "Triangle",
    "solve_edge_coefficients",
]
