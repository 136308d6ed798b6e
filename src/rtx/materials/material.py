"""Surface material: base color, emission and roughness.

A material describes how a surface reacts when a ray bounces off it:

- base_color: per-channel reflectance. The ray's throughput is multiplied by
  it on every bounce.
- emission_color: per-channel self-luminance. Added to the ray's gathered
  light, weighted by the throughput the ray carried before the bounce.
- roughness: blend between a perfect mirror (0) and a uniformly random bounce
  direction (1).

Example:
    >>> from rtx.materials.material import Material
    >>> red = Material.colored((1.0, 0.0, 0.0))
    >>> lamp = Material.light((1.0, 0.8, 0.5))  # orange-ish light
    >>> chrome = Material.mirror()
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rtx.core.ray import Vector3, VectorLike, as_vec3, ones, zeros


@dataclass(frozen=True, eq=False)
class Material:
    """Material properties of an object.

    Attributes:
        base_color: The reflectance color (RGB, non-negative). Usually in [0, 1];
            values above 1 amplify light.
        emission_color: The emitted color (RGB, non-negative). Zero for
            surfaces that do not glow.
        roughness: Surface roughness in [0, 1]. 0 = perfect mirror,
            1 = fully diffuse.
    """

    base_color: Vector3 = field(default_factory=ones)
    emission_color: Vector3 = field(default_factory=zeros)
    roughness: float = 1.0

    def __post_init__(self) -> None:
        base_color = as_vec3(self.base_color)
        emission_color = as_vec3(self.emission_color)

        # Validate color components
        for name, color in (("base_color", base_color), ("emission_color", emission_color)):
            for i, component in enumerate(color):
                if not component >= 0.0:
                    raise ValueError(
                        f"{name} component {i} = {component} must be a non-negative number."
                    )

        # Validate roughness
        if not 0.0 <= self.roughness <= 1.0:
            raise ValueError(
                f"Roughness = {self.roughness} is outside [0, 1]. "
                "Roughness must be between 0 (perfect mirror) and 1 (fully diffuse)."
            )

        object.__setattr__(self, "base_color", base_color)
        object.__setattr__(self, "emission_color", emission_color)
        object.__setattr__(self, "roughness", float(self.roughness))

    @classmethod
    def colored(cls, color: VectorLike) -> Material:
        """A diffuse, non-emitting material of the given color."""
        return cls(base_color=color, emission_color=zeros(), roughness=1.0)

    @classmethod
    def light(cls, light_color: VectorLike) -> Material:
        """A pure emitter that reflects nothing."""
        return cls(base_color=zeros(), emission_color=light_color, roughness=1.0)

    @classmethod
    def mirror(cls) -> Material:
        """A perfect, colorless mirror."""
        return cls(base_color=ones(), emission_color=zeros(), roughness=0.0)

    def to_dict(self) -> dict[str, object]:
        """Describe the material with JSON-compatible values."""
        return {
            "base_color": self.base_color.tolist(),
            "emission_color": self.emission_color.tolist(),
            "roughness": self.roughness,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Material:
        """Build a material from the output of to_dict().

        Missing keys fall back to the defaults (white, non-emitting, diffuse).
        """
        return cls(
            base_color=data.get("base_color", (1.0, 1.0, 1.0)),  # type: ignore[arg-type]
            emission_color=data.get("emission_color", (0.0, 0.0, 0.0)),  # type: ignore[arg-type]
            roughness=float(data.get("roughness", 1.0)),  # type: ignore[arg-type]
        )

    def __repr__(self) -> str:
        """Return a string representation of the material."""
        return (
            f"Material(base_color={self.base_color.tolist()}, "
            f"emission_color={self.emission_color.tolist()}, roughness={self.roughness})"
        )
