"""Scene module for scene assembly, configuration and serialization.

This module handles everything between geometry and the render loop:

Components:
    config: Immutable render configuration (samples, bounces, lens)
    manager: Object (shape + material) and Scene (camera, config, objects)
    serialize: JSON-compatible scene description and packed GPU records
    cornell_box: Factory for the classic Cornell box test scene

A Scene is rendered from a frozen snapshot, so adding objects or moving the
camera between renders never affects a render already in progress.
"""

from .config import Config
from .cornell_box import BOX_SIZE, CornellBoxParams, create_cornell_box_scene, quad_triangles
from .manager import Object, Scene, default_camera
from .serialize import (
    OBJECT_DTYPE,
    SHAPE_DTYPES,
    camera_from_dict,
    camera_to_dict,
    load_scene,
    object_from_dict,
    pack_objects,
    pack_shapes,
    save_scene,
    scene_from_dict,
    scene_to_dict,
    shape_from_dict,
)

__all__ = [
    # Config module
    "Config",
    # Manager module
    "Object",
    "Scene",
    "default_camera",
    # Serialization module
    "scene_to_dict",
    "scene_from_dict",
    "camera_to_dict",
    "camera_from_dict",
    "shape_from_dict",
    "object_from_dict",
    "save_scene",
    "load_scene",
    "pack_objects",
    "pack_shapes",
    "OBJECT_DTYPE",
    "SHAPE_DTYPES",
    # Cornell box module
    "create_cornell_box_scene",
    "CornellBoxParams",
    "quad_triangles",
    "BOX_SIZE",
]
