"""Ray state and vector utilities for the CPU path tracer.

This module provides the per-sample Ray state and the small set of 3-vector
helpers every other module builds on. Vectors are plain NumPy arrays of shape
(3,) and dtype float64, used interchangeably for positions, directions and
colors.

All random sampling takes an explicit ``numpy.random.Generator`` so that every
draw can be traced back to a seed.

Example:
    >>> import numpy as np
    >>> from rtx.core.ray import Ray, vec3
    >>> ray = Ray(position=vec3(0.0, 0.0, 0.0), direction=vec3(1.0, 0.0, 0.0))
    >>> ray.light_color
    array([1., 1., 1.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

import numpy as np
import numpy.typing as npt

from rtx.core import kernels

# Type alias for 3D vectors
Vector3 = npt.NDArray[np.float64]

# Anything that can be turned into a Vector3
VectorLike = Union[Vector3, tuple[float, float, float], list[float]]


def vec3(x: float, y: float, z: float) -> Vector3:
    """Create a 3D vector.

    Args:
        x: The x component.
        y: The y component.
        z: The z component.

    Returns:
        A float64 array of shape (3,).
    """
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: VectorLike) -> Vector3:
    """Convert a tuple, list or array into a fresh Vector3.

    Args:
        value: Three numeric components.

    Returns:
        A new float64 array of shape (3,).

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    arr = np.array(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected three components, got shape {arr.shape}")
    return arr


def zeros() -> Vector3:
    """Return the zero vector."""
    return np.zeros(3, dtype=np.float64)


def ones() -> Vector3:
    """Return the vector (1, 1, 1)."""
    return np.ones(3, dtype=np.float64)


@dataclass
class Ray:
    """A ray travelling through the scene, carrying its accumulated light.

    Attributes:
        position: The current origin of the ray in world space.
        direction: The current direction. Kept at unit length after every
            bounce.
        resulting_color: Radiance gathered from emitters so far.
        light_color: Throughput, i.e. the product of the base colors of every
            surface hit so far. Starts at (1, 1, 1).
    """

    position: Vector3
    direction: Vector3
    resulting_color: Vector3 = field(default_factory=zeros)
    light_color: Vector3 = field(default_factory=ones)

    def copy(self) -> Ray:
        """Return an independent copy of this ray."""
        return Ray(
            position=self.position.copy(),
            direction=self.direction.copy(),
            resulting_color=self.resulting_color.copy(),
            light_color=self.light_color.copy(),
        )


def ray_at(ray: Ray, t: float) -> Vector3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.position + t * ray.direction.
    """
    return ray.position + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vector3, b: Vector3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vector3, b: Vector3) -> Vector3:
    """Compute the cross product a x b."""
    return vec3(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(v: Vector3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(dot(v, v))


def length_squared(v: Vector3) -> float:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


def normalize(v: Vector3) -> Vector3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length vector is
        returned unchanged (as zeros) instead of producing NaN.
    """
    n = length(v)
    if n == 0.0:
        return zeros()
    return v / n


def is_zero(v: Vector3) -> bool:
    """Check whether every component is exactly zero."""
    return not bool(np.any(v))


def reflect(incident: Vector3, normal: Vector3) -> Vector3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The mirrored direction incident - 2 * dot(incident, normal) * normal.
    """
    return incident - normal * (2.0 * dot(incident, normal))


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_unit_vector(rng: np.random.Generator) -> Vector3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Uses the cylindrical equal-area mapping: z uniform in [-1, 1], azimuth
    uniform in [0, 2*pi).

    Args:
        rng: The generator to draw from.

    Returns:
        A random unit vector.
    """
    u1 = rng.random()
    u2 = rng.random()
    return kernels.unit_vector_from(u1, u2)


def random_in_unit_cube(rng: np.random.Generator) -> Vector3:
    """Generate a random point with every component in [0, 1).

    Used for depth-of-field jitter of ray origins and focal points.

    Args:
        rng: The generator to draw from.

    Returns:
        A random vector inside the unit cube anchored at the origin.
    """
    return rng.random(3)
