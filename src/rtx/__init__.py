"""CPU path tracer built on NumPy and numba.

This package renders scenes of analytic primitives by tracing rays from a
camera, bouncing them off surfaces and gathering emitted light, with support for:
- Spheres, one-sided planes and triangles
- Materials mixing mirror and diffuse bounces, with emission
- Depth of field through jittered ray origins and focal points
- Row-parallel compiled rendering with reproducible seeding
- Progressive rendering with accumulation

Subpackages:
    core: Ray state, vector and matrix utilities, integrator, progressive rendering
    camera: Camera basis and world/camera space transforms
    geometry: Shape primitives and intersection algorithms
    materials: Material model and bounce sampling
    scene: Configuration, scene assembly and serialization
    preview: Output conversion and preview utilities
"""

from loguru import logger

from rtx.camera import Camera
from rtx.geometry import Plane, ShapeType, Sphere, Triangle
from rtx.materials import Material
from rtx.scene import Config, Object, Scene

__version__ = "0.1.0"

# Silent unless the application opts in, see rtx.log.configure_logging()
logger.disable("rtx")

__all__ = [
    "Camera",
    "Config",
    "Material",
    "Object",
    "Plane",
    "Scene",
    "ShapeType",
    "Sphere",
    "Triangle",
]
