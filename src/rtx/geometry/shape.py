"""Closed set of shape kinds understood by the renderer.

Every shape is a frozen dataclass exposing the same two queries:

    distance(ray_position, ray_direction) -> float | None
    normal(world_position) -> Vector3

plus a ``shape_type`` tag used for serialization.
"""

from __future__ import annotations

from enum import IntEnum


class ShapeType(IntEnum):
    """Enumeration of supported shape kinds.

    The integer values are part of the packed object layout handed to an
    external GPU backend, so existing values must never change.
    """

    SPHERE = 0
    PLANE = 1
    TRIANGLE = 2
