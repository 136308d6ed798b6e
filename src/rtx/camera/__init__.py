"""Camera module for view transforms and ray direction generation.

Components:
    camera: Camera with an orthonormal basis derived from its facing direction

Camera responsibilities:
    - Derive camera-to-world and world-to-camera rotations
    - Transform points between world and camera space
    - Rotate camera-space ray directions into world space

The mapping from image coordinates to camera-space directions lives in
rtx.core.integrator.get_ray_dir.
"""

from .camera import Camera, derive_to_world_space_matrix

__all__ = [
    "Camera",
    "derive_to_world_space_matrix",
]
