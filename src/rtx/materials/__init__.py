"""Materials module for surface response.

This module implements the single material model used by the renderer:

Components:
    material: Material (base color, emission color, roughness) and presets
    scatter: Bounce direction sampling and per-bounce light bookkeeping

Each bounce:
    - Samples a direction between a mirror reflection and a uniform random
      direction, weighted by roughness
    - Gathers the surface's emission, scaled by the ray's throughput
    - Multiplies the throughput by the surface's base color
"""

from .material import Material
from .scatter import random_bounce_dir, ray_hit

__all__ = [
    "Material",
    "random_bounce_dir",
    "ray_hit",
]
