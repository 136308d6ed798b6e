"""Unit tests for materials and the bounce model.

Tests cover:
- Material presets and validation
- Bounce direction sampling for mirror, diffuse and mixed roughness
- Light bookkeeping on a hit
"""

import numpy as np
import pytest

from rtx.core.ray import Ray, dot, length, vec3
from rtx.geometry import Plane
from rtx.materials import Material, random_bounce_dir, ray_hit
from rtx.scene import Object


class TestMaterial:
    """Tests for Material construction."""

    def test_colored(self):
        """Test colored() gives a diffuse, non-emitting material."""
        material = Material.colored((1.0, 0.0, 0.0))
        np.testing.assert_array_equal(material.base_color, (1.0, 0.0, 0.0))
        np.testing.assert_array_equal(material.emission_color, (0.0, 0.0, 0.0))
        assert material.roughness == 1.0

    def test_light(self):
        """Test light() emits and reflects nothing."""
        material = Material.light((1.0, 0.8, 0.5))
        np.testing.assert_array_equal(material.base_color, (0.0, 0.0, 0.0))
        np.testing.assert_array_equal(material.emission_color, (1.0, 0.8, 0.5))

    def test_mirror(self):
        """Test mirror() is a perfectly smooth white reflector."""
        material = Material.mirror()
        np.testing.assert_array_equal(material.base_color, (1.0, 1.0, 1.0))
        assert material.roughness == 0.0

    @pytest.mark.parametrize("roughness", [-0.1, 1.5])
    def test_invalid_roughness(self, roughness):
        """Test roughness outside [0, 1] is rejected."""
        with pytest.raises(ValueError, match="Roughness"):
            Material(roughness=roughness)

    def test_negative_color(self):
        """Test negative color components are rejected."""
        with pytest.raises(ValueError):
            Material(base_color=(0.5, -0.1, 0.5))
        with pytest.raises(ValueError):
            Material(emission_color=(-1.0, 0.0, 0.0))

    def test_emission_above_one(self):
        """Test bright lights are allowed."""
        material = Material.light((15.0, 15.0, 15.0))
        assert material.emission_color[0] == 15.0

    def test_dict_round_trip(self):
        """Test from_dict(to_dict()) keeps every value."""
        material = Material((0.2, 0.4, 0.6), (1.0, 2.0, 3.0), 0.25)
        restored = Material.from_dict(material.to_dict())
        np.testing.assert_array_equal(restored.base_color, material.base_color)
        np.testing.assert_array_equal(restored.emission_color, material.emission_color)
        assert restored.roughness == 0.25


class TestRandomBounceDir:
    """Tests for bounce direction sampling."""

    def test_mirror_reflection(self, rng):
        """Test roughness 0 gives the exact mirror direction."""
        direction = random_bounce_dir(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 0.0, rng)
        np.testing.assert_allclose(direction, (np.sqrt(0.5), np.sqrt(0.5), 0.0))

    @pytest.mark.parametrize("roughness", [0.0, 0.3, 1.0])
    def test_leaves_surface(self, rng, roughness):
        """Test bounced directions are unit length and on the outward side."""
        normal = vec3(0.0, 1.0, 0.0)
        for _ in range(200):
            direction = random_bounce_dir(vec3(0.3, -1.0, 0.2), normal, roughness, rng)
            assert length(direction) == pytest.approx(1.0)
            assert dot(direction, normal) > 0.0

    def test_diffuse_spreads(self, rng):
        """Test roughness 1 does not favour the mirror direction."""
        normal = vec3(0.0, 1.0, 0.0)
        samples = np.array(
            [random_bounce_dir(vec3(1.0, -1.0, 0.0), normal, 1.0, rng) for _ in range(4000)]
        )
        # hemisphere samples average to (0, 0.5, 0)
        np.testing.assert_allclose(samples.mean(axis=0), (0.0, 0.5, 0.0), atol=0.05)


class TestRayHit:
    """Tests for light bookkeeping on a hit."""

    def test_emission_and_throughput(self, rng):
        """Test emission is weighted by throughput and base color attenuates it."""
        obj = Object(
            Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
            Material((0.5, 0.25, 1.0), (2.0, 2.0, 2.0), 1.0),
        )
        ray = Ray(position=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
        ray.light_color = vec3(0.5, 0.5, 0.5)
        ray_hit(ray, obj, rng)
        np.testing.assert_allclose(ray.resulting_color, (1.0, 1.0, 1.0))
        np.testing.assert_allclose(ray.light_color, (0.25, 0.125, 0.5))
        assert dot(ray.direction, vec3(0.0, 1.0, 0.0)) > 0.0

    def test_light_absorbs(self, rng):
        """Test a pure light leaves zero throughput behind."""
        obj = Object(Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)), Material.light((1.0, 1.0, 1.0)))
        ray = Ray(position=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
        ray_hit(ray, obj, rng)
        np.testing.assert_array_equal(ray.light_color, (0.0, 0.0, 0.0))
        np.testing.assert_allclose(ray.resulting_color, (1.0, 1.0, 1.0))
