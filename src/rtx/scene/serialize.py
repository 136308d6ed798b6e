"""Scene serialization.

Two formats are provided:

1. A JSON-compatible dictionary describing camera, config and objects, used
   to save scenes to disk and load them back:

       {
           "camera": {"position": [...], "direction": [...], "fov": 1.57},
           "config": {"rays_per_pixel": 16, ...},
           "objects": [
               {"shape": {"type": "sphere", "center": [...], "radius": 1.0},
                "material": {"base_color": [...], "emission_color": [...], "roughness": 1.0}},
           ],
       }

2. Packed NumPy record arrays for handing objects to an external GPU backend.
   Every field is little-endian float32 (or uint32 for ids) in a fixed order,
   so the byte layout does not depend on the host or on how the backend
   builds its pipeline:

       object record: base_color[3], roughness, emission_color[3], object_id, shape_type
       sphere record: object_id, center[3], radius
       plane record: object_id, point[3], normal[3]
       triangle record: object_id, vertices[3][3]

   object_id is the object's index in the scene, so shape records can be
   joined back to their material record.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
from loguru import logger

from rtx.camera.camera import Camera
from rtx.geometry import Plane, Shape, ShapeType, Sphere, Triangle
from rtx.materials.material import Material
from rtx.scene.config import Config
from rtx.scene.manager import Object, Scene

# =============================================================================
# Packed Record Layouts
# =============================================================================

OBJECT_DTYPE = np.dtype(
    [
        ("base_color", "<f4", (3,)),
        ("roughness", "<f4"),
        ("emission_color", "<f4", (3,)),
        ("object_id", "<u4"),
        ("shape_type", "<u4"),
    ]
)

SHAPE_DTYPES: dict[ShapeType, np.dtype] = {
    ShapeType.SPHERE: np.dtype(
        [
            ("object_id", "<u4"),
            ("center", "<f4", (3,)),
            ("radius", "<f4"),
        ]
    ),
    ShapeType.PLANE: np.dtype(
        [
            ("object_id", "<u4"),
            ("point", "<f4", (3,)),
            ("normal", "<f4", (3,)),
        ]
    ),
    ShapeType.TRIANGLE: np.dtype(
        [
            ("object_id", "<u4"),
            ("vertices", "<f4", (3, 3)),
        ]
    ),
}


# =============================================================================
# Dictionary Format
# =============================================================================


def camera_to_dict(camera: Camera) -> dict[str, Any]:
    """Describe a camera with JSON-compatible values."""
    return {
        "position": camera.position.tolist(),
        "direction": camera.get_direction().tolist(),
        "fov": camera.fov,
    }


def camera_from_dict(data: dict[str, Any]) -> Camera:
    """Build a camera from the output of camera_to_dict()."""
    return Camera(data["position"], data["direction"], float(data["fov"]))


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Build a shape from its to_dict() description.

    Raises:
        ValueError: If the shape type is unknown.
    """
    shape_type = data.get("type")
    if shape_type == "sphere":
        return Sphere(data["center"], float(data["radius"]))
    if shape_type == "plane":
        return Plane(data["point"], data["normal"])
    if shape_type == "triangle":
        return Triangle(tuple(data["vertices"]))
    raise ValueError(f"Unknown shape type: {shape_type!r}")


def object_from_dict(data: dict[str, Any]) -> Object:
    """Build an object from the output of Object.to_dict()."""
    return Object(
        shape=shape_from_dict(data["shape"]),
        material=Material.from_dict(data.get("material", {})),
    )


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Describe a whole scene with JSON-compatible values."""
    return {
        "camera": camera_to_dict(scene.camera),
        "config": scene.config.to_dict(),
        "objects": [obj.to_dict() for obj in scene.objects],
    }


def scene_from_dict(data: dict[str, Any]) -> Scene:
    """Build a scene from the output of scene_to_dict().

    Raises:
        ValueError: If an object has an unknown shape type or a value is invalid.
    """
    config = Config.from_dict(data.get("config", {}))
    camera = camera_from_dict(data["camera"]) if "camera" in data else None
    scene = Scene(config, camera)
    for obj_data in data.get("objects", []):
        scene.add_object(object_from_dict(obj_data))
    return scene


def save_scene(scene: Scene, filepath: str | Path) -> None:
    """Write a scene to a JSON file.

    Args:
        scene: The scene to save.
        filepath: Destination path. Parent directories are created if needed.
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(scene_to_dict(scene), indent=2))
    logger.info("Saved scene with {} objects to {}", len(scene), path)


def load_scene(filepath: str | Path) -> Scene:
    """Read a scene written by save_scene()."""
    path = Path(filepath)
    scene = scene_from_dict(json.loads(path.read_text()))
    logger.info("Loaded scene with {} objects from {}", len(scene), path)
    return scene


# =============================================================================
# Packed Format
# =============================================================================


def pack_objects(objects: Sequence[Object]) -> npt.NDArray[np.void]:
    """Pack the material part of every object into OBJECT_DTYPE records.

    Args:
        objects: The objects, in scene order.

    Returns:
        A structured array with one record per object; object_id is the index.
    """
    packed = np.zeros(len(objects), dtype=OBJECT_DTYPE)
    for object_id, obj in enumerate(objects):
        record = packed[object_id]
        record["base_color"] = obj.material.base_color
        record["roughness"] = obj.material.roughness
        record["emission_color"] = obj.material.emission_color
        record["object_id"] = object_id
        record["shape_type"] = int(obj.shape_type)
    return packed


def pack_shapes(objects: Sequence[Object], shape_type: ShapeType) -> npt.NDArray[np.void]:
    """Pack the geometry of every object of one shape type.

    Args:
        objects: The objects, in scene order.
        shape_type: Which kind of shape to pack.

    Returns:
        A structured array of SHAPE_DTYPES[shape_type] records, in scene order.
    """
    selected = [
        (object_id, obj.shape)
        for object_id, obj in enumerate(objects)
        if obj.shape_type == shape_type
    ]
    packed = np.zeros(len(selected), dtype=SHAPE_DTYPES[shape_type])
    for i, (object_id, shape) in enumerate(selected):
        record = packed[i]
        record["object_id"] = object_id
        if shape_type == ShapeType.SPHERE:
            record["center"] = shape.center
            record["radius"] = shape.radius
        elif shape_type == ShapeType.PLANE:
            record["point"] = shape.point
            record["normal"] = shape.normal_vector
        else:
            record["vertices"] = np.stack(shape.vertices)
    return packed
