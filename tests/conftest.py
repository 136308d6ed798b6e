"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules: seeded random
generators, a standard camera and small scenes that render in milliseconds.
"""

import math

import numpy as np
import pytest
from loguru import logger

from rtx.camera import Camera
from rtx.geometry import Plane, Sphere
from rtx.materials import Material
from rtx.scene import Config, Object, Scene


@pytest.fixture(autouse=True)
def quiet_rtx_logging():
    """Put rtx logging back to its import-time state (disabled) after each test."""
    yield
    logger.disable("rtx")


@pytest.fixture
def rng():
    """A generator with a fixed seed, fresh for every test."""
    return np.random.default_rng(42)


@pytest.fixture
def camera():
    """Camera at the origin looking along +x with a 90 degree field of view."""
    return Camera((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), math.radians(90.0))


@pytest.fixture
def sharp_config():
    """Config without depth of field jitter, so primary rays are exact."""
    return Config(
        rays_per_pixel=1,
        max_bounces=2,
        focal_offset=0.0,
        non_focal_offset=0.0,
        seed=1234,
        max_workers=2,
    )


@pytest.fixture
def light_sphere():
    """A white emitting sphere 5 units in front of the default camera."""
    return Object(Sphere((5.0, 0.0, 0.0), 1.0), Material.light((1.0, 1.0, 1.0)))


@pytest.fixture
def lit_scene(sharp_config, camera, light_sphere):
    """A single light sphere straight ahead of the camera."""
    scene = Scene(sharp_config, camera)
    scene.add_object(light_sphere)
    return scene


@pytest.fixture
def diffuse_scene(camera):
    """A diffuse floor under a big light, so bounces make every render noisy.

    The camera faces +x with world +z as its up axis, so the floor is the
    plane z = -1 facing up.
    """
    config = Config(rays_per_pixel=2, max_bounces=3, seed=7, max_workers=2)
    scene = Scene(config, camera)
    scene.add_shape(Plane((0.0, 0.0, -1.0), (0.0, 0.0, 1.0)), Material.colored((0.8, 0.8, 0.8)))
    scene.add_shape(Sphere((3.0, 0.0, 6.0), 3.0), Material.light((4.0, 4.0, 4.0)))
    return scene
