"""Camera model with world/camera space transforms.

The camera derives an orthonormal basis from the direction it faces:

- forward: the normalized facing direction
- right: forward x (0, 0, -1), normalized
- up: forward x right

The camera-to-world matrix is the transpose of the matrix whose rows are
(right, up, forward), i.e. its columns are the basis vectors. The world-to-camera
matrix is its inverse. Rotation and translation are kept apart: points are
rotated then translated into world space, and translated then rotated into
camera space, so moving the camera never requires recomputing the matrices.

Example:
    >>> import math
    >>> from rtx.camera.camera import Camera
    >>> camera = Camera((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), math.radians(90.0))
    >>> camera.to_world_space((0.0, 0.0, 1.0))  # camera forward
    array([1., 0., 0.])
"""

from __future__ import annotations

from loguru import logger

from rtx.core.matrix import Mat3x3, inverse, mat3, transpose
from rtx.core.ray import Vector3, VectorLike, as_vec3, cross, length, normalize, vec3

# Reference axis used to derive the camera's right vector
REFERENCE_AXIS = vec3(0.0, 0.0, -1.0)

# Used instead when the camera faces along the reference axis
FALLBACK_REFERENCE_AXIS = vec3(0.0, 1.0, 0.0)

# Below this length the right vector is treated as degenerate
DEGENERATE_EPSILON = 1e-12


def derive_to_world_space_matrix(direction: Vector3) -> Mat3x3:
    """Derive the camera-to-world rotation for a facing direction.

    Args:
        direction: The facing direction. Need not be normalized.

    Returns:
        The rotation matrix whose columns are (right, up, forward).

    Raises:
        ValueError: If the direction is the zero vector.
    """
    if length(direction) == 0.0:
        raise ValueError("Camera direction must not be the zero vector")

    forward = normalize(direction)
    right = cross(forward, REFERENCE_AXIS)
    if length(right) < DEGENERATE_EPSILON:
        logger.debug(
            "Camera direction {} is parallel to the reference axis, using {} instead",
            direction.tolist(),
            FALLBACK_REFERENCE_AXIS.tolist(),
        )
        right = cross(forward, FALLBACK_REFERENCE_AXIS)
    right = normalize(right)
    up = cross(forward, right)
    return transpose(mat3(right, up, forward))


class Camera:
    """A camera placed in the scene.

    Attributes:
        position: Camera position in world space.
        fov: Horizontal field of view in radians.
        to_world_space_matrix: Rotation from camera space to world space.
        to_cam_space_matrix: Rotation from world space to camera space. Always
            the inverse of to_world_space_matrix.
    """

    def __init__(self, position: VectorLike, direction: VectorLike, fov: float) -> None:
        """Create a camera.

        Args:
            position: Camera position in world space.
            direction: The direction the camera faces. Need not be normalized.
            fov: Horizontal field of view in radians.

        Raises:
            ValueError: If the direction is the zero vector or fov is not positive.
        """
        if fov <= 0.0:
            raise ValueError(f"Field of view must be positive, got {fov}")
        self.fov = float(fov)
        self._position = as_vec3(position)
        self._direction = as_vec3(direction)
        self._update_matrices(self._direction)

    @classmethod
    def look_at(cls, position: VectorLike, target: VectorLike, fov: float) -> Camera:
        """Create a camera at position facing target.

        Raises:
            ValueError: If position and target coincide or fov is not positive.
        """
        position = as_vec3(position)
        return cls(position, as_vec3(target) - position, fov)

    def _update_matrices(self, direction: Vector3) -> None:
        to_world = derive_to_world_space_matrix(direction)
        self.to_cam_space_matrix = inverse(to_world)
        self.to_world_space_matrix = to_world

    @property
    def position(self) -> Vector3:
        """Camera position in world space."""
        return self._position

    @position.setter
    def position(self, value: VectorLike) -> None:
        self.set_position(value)

    def set_position(self, position: VectorLike) -> None:
        """Move the camera. The rotation matrices are not affected."""
        self._position = as_vec3(position)

    def get_direction(self) -> Vector3:
        """Return the facing direction as it was given."""
        return self._direction.copy()

    def set_direction(self, direction: VectorLike) -> None:
        """Turn the camera to face a new direction.

        Both matrices are derived from the new direction before it is stored,
        so they always describe the direction returned by get_direction().

        Raises:
            ValueError: If the direction is the zero vector.
        """
        new_direction = as_vec3(direction)
        self._update_matrices(new_direction)
        self._direction = new_direction

    def to_cam_space(self, vec: VectorLike) -> Vector3:
        """Transform a world-space point into camera space."""
        return self.to_cam_space_matrix @ (as_vec3(vec) - self._position)

    def to_world_space(self, vec: VectorLike) -> Vector3:
        """Transform a camera-space point into world space."""
        return self.to_world_space_matrix @ as_vec3(vec) + self._position

    def rotate_to_world_space(self, vec: VectorLike) -> Vector3:
        """Rotate a camera-space vector into world space, without translation.

        Used for ray directions, which are vectors rather than points.
        """
        return self.to_world_space_matrix @ as_vec3(vec)

    def copy(self) -> Camera:
        """Return an independent copy of this camera."""
        clone = Camera.__new__(Camera)
        clone.fov = self.fov
        clone._position = self._position.copy()
        clone._direction = self._direction.copy()
        clone.to_world_space_matrix = self.to_world_space_matrix.copy()
        clone.to_cam_space_matrix = self.to_cam_space_matrix.copy()
        return clone

    def __repr__(self) -> str:
        """Return a string representation of the camera."""
        return (
            f"Camera(position={self._position.tolist()}, "
            f"direction={self._direction.tolist()}, fov={self.fov})"
        )
