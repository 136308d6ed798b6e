"""3x3 matrix helpers used to build camera basis transforms.

Matrices are NumPy arrays of shape (3, 3) whose rows are the row vectors.
The inverse is computed the general way (adjugate over determinant), so
callers must not pass singular matrices.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from rtx.core.ray import Vector3

Mat3x3 = npt.NDArray[np.float64]


def mat3(x: Vector3, y: Vector3, z: Vector3) -> Mat3x3:
    """Build a matrix from three row vectors."""
    return np.array([x, y, z], dtype=np.float64)


def transpose(m: Mat3x3) -> Mat3x3:
    """Return the transpose of a matrix."""
    return np.ascontiguousarray(m.T)


def determinant(m: Mat3x3) -> float:
    """Compute the determinant by the rule of Sarrus.

    For the matrix [[a, b, c], [d, e, f], [g, h, i]] this is
    aei + bfg + cdh - gec - hfa - idb.
    """
    (a, b, c), (d, e, f), (g, h, i) = m
    return float((a * e * i + b * f * g + c * d * h) - (g * e * c + h * f * a + i * d * b))


def adjugate(m: Mat3x3) -> Mat3x3:
    """Compute the adjugate (transposed cofactor matrix)."""
    (a, b, c), (d, e, f), (g, h, i) = m
    return np.array(
        [
            [e * i - f * h, c * h - b * i, b * f - c * e],
            [f * g - d * i, a * i - c * g, c * d - a * f],
            [d * h - e * g, b * g - a * h, a * e - b * d],
        ],
        dtype=np.float64,
    )


def inverse(m: Mat3x3) -> Mat3x3:
    """Compute the inverse as adjugate / determinant.

    Raises:
        ValueError: If the matrix is singular.
    """
    det = determinant(m)
    if det == 0.0:
        raise ValueError("Cannot invert a singular matrix")
    return adjugate(m) / det
