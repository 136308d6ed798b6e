"""Matplotlib-based preview display for rendered images.

This module provides functions for displaying rendered images using Matplotlib,
with support for tone mapping and gamma correction.

Rendered images are linear: a surface lit by a light of emission 1 comes out
around 1, but bright lights easily push pixels well past it. Tone mapping
compresses that range before display.

Example:
    >>> from rtx.preview.display import show_preview
    >>> from rtx.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> image = create_cornell_box_scene().render(128, 128)
    >>> show_preview(image, tone_map="reinhard")
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

FloatImage = npt.NDArray[np.floating]


def tone_map_reinhard(image: FloatImage) -> npt.NDArray[np.float64]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear HDR image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1) range.
    """
    # Ensure non-negative values
    image = np.maximum(image, 0.0)
    return image / (1.0 + image)


def tone_map_exposure(image: FloatImage, exposure: float = 1.0) -> npt.NDArray[np.float64]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        exposure: Exposure value (default 1.0). Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    return 1.0 - np.exp(-image * exposure)


def apply_gamma(image: FloatImage, gamma: float = 2.2) -> FloatImage:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value. 1.0 leaves the image untouched.

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma)


def process_image_for_display(
    image: FloatImage,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Process an image for display with tone mapping and gamma correction.

    Applies the full display pipeline:
    1. Tone mapping (optional, for HDR content)
    2. Gamma correction (optional)
    3. Clamping to [0, 1]

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value. Default 1.0 keeps values linear.
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        Processed float64 image in [0, 1] range.

    Raises:
        ValueError: If the tone mapping method is unknown.
    """
    result = np.asarray(image, dtype=np.float64).copy()

    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    image: FloatImage,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
    title: str | None = None,
    sample_count: int | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping (default 1.0).
        title: Custom title (default shows sample count when given).
        sample_count: Samples per pixel, shown in the default title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = "Render Preview"
        if sample_count is not None:
            title += f" - {sample_count} SPP"
        if tone_map != "none":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
