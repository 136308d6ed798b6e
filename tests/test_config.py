"""Unit tests for the render configuration."""

import math

import numpy as np
import pytest

from rtx.scene.config import (
    DEFAULT_FOCAL_LENGTH,
    DEFAULT_MAX_BOUNCES,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_RAYS_PER_PIXEL,
    Config,
)


class TestConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        """Test the documented default values."""
        config = Config()
        assert config.rays_per_pixel == DEFAULT_RAYS_PER_PIXEL == 16
        assert config.max_bounces == DEFAULT_MAX_BOUNCES == 10
        assert config.max_distance == DEFAULT_MAX_DISTANCE == 1e12
        assert config.focal_length == DEFAULT_FOCAL_LENGTH == 10.0
        assert config.focal_offset == 1e-4
        assert config.non_focal_offset == 1e-1
        assert config.seed is None
        assert config.max_workers is None


class TestConfigUpdates:
    """Tests for the copy-on-write with_* methods."""

    @pytest.mark.parametrize(
        "method, field, value",
        [
            ("with_rays_per_pixel", "rays_per_pixel", 4),
            ("with_max_bounces", "max_bounces", 0),
            ("with_max_distance", "max_distance", 50.0),
            ("with_focal_length", "focal_length", 3.5),
            ("with_focal_offset", "focal_offset", 0.0),
            ("with_non_focal_offset", "non_focal_offset", 0.5),
            ("with_seed", "seed", 99),
            ("with_max_workers", "max_workers", 3),
        ],
    )
    def test_with_returns_new_config(self, method, field, value):
        """Test each with_* method sets one field on a copy."""
        original = Config()
        updated = getattr(original, method)(value)
        assert getattr(updated, field) == value
        assert updated is not original
        assert original == Config()

    def test_chaining(self):
        """Test with_* calls can be chained."""
        config = Config().with_rays_per_pixel(2).with_max_bounces(1).with_seed(5)
        assert (config.rays_per_pixel, config.max_bounces, config.seed) == (2, 1, 5)

    def test_frozen(self):
        """Test fields cannot be assigned directly."""
        config = Config()
        with pytest.raises(AttributeError):
            config.rays_per_pixel = 3


class TestConfigValidation:
    """Tests for rejected values."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rays_per_pixel": 0},
            {"max_bounces": -1},
            {"max_distance": 0.0},
            {"max_distance": -5.0},
            {"focal_offset": -0.1},
            {"non_focal_offset": -0.1},
            {"seed": -1},
            {"max_workers": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test invalid values raise ValueError."""
        with pytest.raises(ValueError):
            Config(**kwargs)

    @pytest.mark.parametrize("field", ["rays_per_pixel", "max_bounces", "max_workers", "seed"])
    @pytest.mark.parametrize("value", [2.0, 2.5, True, "2"])
    def test_counts_must_be_integers(self, field, value):
        """Test float, bool and string counts are rejected up front."""
        with pytest.raises(ValueError, match=f"{field} must be an integer"):
            Config(**{field: value})

    def test_float_rays_per_pixel_from_dict(self):
        """Test a float sample count in a loaded dictionary is rejected."""
        with pytest.raises(ValueError, match="rays_per_pixel must be an integer"):
            Config.from_dict({"rays_per_pixel": 2.0, "seed": 1, "max_workers": 1})

    @pytest.mark.parametrize(
        "field", ["max_distance", "focal_length", "focal_offset", "non_focal_offset"]
    )
    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_lens_values_must_be_finite(self, field, value):
        """Test NaN and infinite distances and offsets are rejected."""
        with pytest.raises(ValueError, match=f"{field} must be finite"):
            Config(**{field: value})

    @pytest.mark.parametrize("field", ["focal_length", "focal_offset", "max_distance"])
    def test_lens_values_must_be_numbers(self, field):
        """Test non-numeric and bool lens values are rejected."""
        with pytest.raises(ValueError, match=f"{field} must be a number"):
            Config(**{field: "1.0"})
        with pytest.raises(ValueError, match=f"{field} must be a number"):
            Config(**{field: True})

    def test_numpy_scalars_are_normalized(self):
        """Test numpy integers and floats are stored as plain Python numbers."""
        config = Config(
            rays_per_pixel=np.int64(3), focal_length=np.float32(2.5), seed=np.uint64(7)
        )
        assert config.rays_per_pixel == 3 and type(config.rays_per_pixel) is int
        assert config.focal_length == 2.5 and type(config.focal_length) is float
        assert type(config.seed) is int

    def test_int_offsets_become_floats(self):
        """Test integral lens values are accepted and stored as floats."""
        config = Config(focal_offset=0, max_distance=100)
        assert type(config.focal_offset) is float
        assert config.max_distance == 100.0

    def test_with_validates(self):
        """Test with_* methods validate the new value too."""
        with pytest.raises(ValueError, match="rays_per_pixel"):
            Config().with_rays_per_pixel(0)


class TestConfigSerialization:
    """Tests for dictionary conversion."""

    def test_round_trip(self):
        """Test from_dict(to_dict()) gives an equal config."""
        config = Config(rays_per_pixel=3, seed=11, max_workers=2)
        assert Config.from_dict(config.to_dict()) == config

    def test_missing_keys_use_defaults(self):
        """Test a partial dictionary fills in defaults."""
        config = Config.from_dict({"max_bounces": 2})
        assert config.max_bounces == 2
        assert config.rays_per_pixel == DEFAULT_RAYS_PER_PIXEL

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ValueError, match="Unknown config keys"):
            Config.from_dict({"samples": 4})
