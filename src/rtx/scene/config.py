"""Render configuration.

Config is an immutable value. Every ``with_*`` method returns a new Config and
leaves the original untouched, so a Scene can hand the same instance to any
number of render workers.

Example:
    >>> from rtx.scene.config import Config
    >>> preview = Config().with_rays_per_pixel(4).with_max_bounces(3)
    >>> preview.rays_per_pixel
    4
"""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_RAYS_PER_PIXEL = 16
DEFAULT_MAX_BOUNCES = 10
DEFAULT_MAX_DISTANCE = 1e12
DEFAULT_FOCAL_LENGTH = 10.0
DEFAULT_FOCAL_OFFSET = 1e-4
DEFAULT_NON_FOCAL_OFFSET = 1e-1


def _integral(name: str, value: Any) -> int:
    # bool is an Integral but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


def _finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class Config:
    """Sampling and lens parameters for a render.

    Attributes:
        rays_per_pixel: Samples averaged into each pixel (at least 1).
        max_bounces: Extra bounces after the first hit (at least 0). A ray is
            traced for at most max_bounces + 1 surface hits.
        max_distance: Hits further away than this are ignored (positive).
        focal_length: Distance from the camera to the plane in focus.
        focal_offset: Jitter applied to the focal point per sample.
        non_focal_offset: Jitter applied to the ray origin per sample.
            Together with focal_offset this controls depth of field.
        seed: Master seed for reproducible renders. None draws a fresh seed
            from OS entropy on every render.
        max_workers: Threads the row loop runs on, capped at the numba thread
            count. None uses all numba threads.
    """

    rays_per_pixel: int = DEFAULT_RAYS_PER_PIXEL
    max_bounces: int = DEFAULT_MAX_BOUNCES
    max_distance: float = DEFAULT_MAX_DISTANCE
    focal_length: float = DEFAULT_FOCAL_LENGTH
    focal_offset: float = DEFAULT_FOCAL_OFFSET
    non_focal_offset: float = DEFAULT_NON_FOCAL_OFFSET
    seed: int | None = None
    max_workers: int | None = None

    def __post_init__(self) -> None:
        self._set("rays_per_pixel", _integral("rays_per_pixel", self.rays_per_pixel))
        self._set("max_bounces", _integral("max_bounces", self.max_bounces))
        for name in ("max_distance", "focal_length", "focal_offset", "non_focal_offset"):
            self._set(name, _finite(name, getattr(self, name)))
        if self.seed is not None:
            self._set("seed", _integral("seed", self.seed))
        if self.max_workers is not None:
            self._set("max_workers", _integral("max_workers", self.max_workers))

        if self.rays_per_pixel < 1:
            raise ValueError(f"rays_per_pixel must be at least 1, got {self.rays_per_pixel}")
        if self.max_bounces < 0:
            raise ValueError(f"max_bounces must be non-negative, got {self.max_bounces}")
        if not self.max_distance > 0.0:
            raise ValueError(f"max_distance must be positive, got {self.max_distance}")
        if self.focal_offset < 0.0:
            raise ValueError(f"focal_offset must be non-negative, got {self.focal_offset}")
        if self.non_focal_offset < 0.0:
            raise ValueError(
                f"non_focal_offset must be non-negative, got {self.non_focal_offset}"
            )
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    # =========================================================================
    # Copy-on-write updates
    # =========================================================================

    def with_rays_per_pixel(self, rays_per_pixel: int) -> Config:
        """Return a copy with a different sample count per pixel."""
        return dataclasses.replace(self, rays_per_pixel=rays_per_pixel)

    def with_max_bounces(self, max_bounces: int) -> Config:
        """Return a copy with a different bounce limit."""
        return dataclasses.replace(self, max_bounces=max_bounces)

    def with_max_distance(self, max_distance: float) -> Config:
        """Return a copy with a different hit distance cutoff."""
        return dataclasses.replace(self, max_distance=max_distance)

    def with_focal_length(self, focal_length: float) -> Config:
        """Return a copy focused at a different distance."""
        return dataclasses.replace(self, focal_length=focal_length)

    def with_focal_offset(self, focal_offset: float) -> Config:
        """Return a copy with a different focal point jitter."""
        return dataclasses.replace(self, focal_offset=focal_offset)

    def with_non_focal_offset(self, non_focal_offset: float) -> Config:
        """Return a copy with a different ray origin jitter."""
        return dataclasses.replace(self, non_focal_offset=non_focal_offset)

    def with_seed(self, seed: int | None) -> Config:
        """Return a copy with a different master seed (None for a fresh one per render)."""
        return dataclasses.replace(self, seed=seed)

    def with_max_workers(self, max_workers: int | None) -> Config:
        """Return a copy rendering on a different number of threads."""
        return dataclasses.replace(self, max_workers=max_workers)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert the config to a JSON-compatible dictionary."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create a config from a dictionary.

        Unknown keys raise ValueError; missing keys keep their defaults.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)
