"""Bounce model: outgoing direction sampling and light bookkeeping.

When a ray hits a surface, the new direction blends a uniformly random unit
vector with the perfect mirror reflection:

    reflected = d - 2 * dot(d, n) * n
    final = normalize(random + (reflected - random) * (1 - roughness))

Roughness 0 gives the pure mirror direction, roughness 1 a uniformly random
one. If the blend points into the surface it is flipped, so a bounced ray
never re-enters the object it just left.

Light bookkeeping per bounce:

    resulting_color += light_color * emission_color
    light_color *= base_color

Example:
    >>> import numpy as np
    >>> from rtx.core.ray import vec3
    >>> from rtx.materials.scatter import random_bounce_dir
    >>> rng = np.random.default_rng(0)
    >>> random_bounce_dir(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 0.0, rng)
    array([0.70710678, 0.70710678, 0.        ])
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from rtx.core import kernels
from rtx.core.ray import Ray, Vector3, as_vec3

if TYPE_CHECKING:
    from rtx.scene.manager import Object


def random_bounce_dir(
    ray_dir: Vector3,
    normal: Vector3,
    roughness: float,
    rng: np.random.Generator,
) -> Vector3:
    """Sample the direction a ray leaves a surface in.

    Args:
        ray_dir: The incoming ray direction.
        normal: The outward surface normal (normalized).
        roughness: Blend factor in [0, 1]. 0 = mirror, 1 = uniform random.
        rng: The generator to draw from.

    Returns:
        A unit vector on the outward side of the surface.
    """
    u1 = rng.random()
    u2 = rng.random()
    return kernels.bounce_direction(as_vec3(ray_dir), as_vec3(normal), float(roughness), u1, u2)


def ray_hit(ray: Ray, obj: Object, rng: np.random.Generator) -> None:
    """Apply one bounce off ``obj`` at the ray's current position.

    The ray is updated in place: its direction is resampled, the object's
    emission is gathered and its base color attenuates the throughput.

    Args:
        ray: The ray, already advanced to the hit point.
        obj: The object that was hit.
        rng: The generator to draw from.
    """
    material = obj.material
    ray.direction = random_bounce_dir(
        ray.direction, obj.normal_at(ray.position), material.roughness, rng
    )
    ray.resulting_color = ray.resulting_color + ray.light_color * material.emission_color
    ray.light_color = ray.light_color * material.base_color
