"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray state, vector utilities and random sampling helpers
    matrix: 3x3 matrix helpers for camera basis transforms
    kernels: numba-compiled intersection, bounce and row-parallel render kernels
    integrator: The per-row, per-pixel, per-sample render loop
    progressive: Accumulation of several complete render passes

Vectors are NumPy float64 arrays of shape (3,). Object-level sampling takes an
explicit numpy.random.Generator; whole images draw from per-sample streams
derived from a master seed, so renders can be reproduced from a seed.
"""

from .matrix import Mat3x3, adjugate, determinant, inverse, mat3, transpose
from .ray import (
    Ray,
    Vector3,
    as_vec3,
    cross,
    dot,
    is_zero,
    length,
    length_squared,
    normalize,
    ones,
    random_in_unit_cube,
    random_unit_vector,
    ray_at,
    reflect,
    vec3,
    zeros,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from rtx.core.integrator or rtx.core.progressive when needed.

__all__ = [
    "Ray",
    "Vector3",
    "ray_at",
    "vec3",
    "as_vec3",
    "zeros",
    "ones",
    "length",
    "length_squared",
    "normalize",
    "is_zero",
    "dot",
    "cross",
    "reflect",
    "random_unit_vector",
    "random_in_unit_cube",
    "Mat3x3",
    "mat3",
    "transpose",
    "determinant",
    "adjugate",
    "inverse",
]
