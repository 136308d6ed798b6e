"""Image export utilities for rendered images.

Rendered images are float arrays of linear colors, roughly in [0, 1]. They
are turned into 8-bit channels by scaling with 256 and clamping to 255, so
a channel value c becomes min(255, floor(c * 256)). This keeps 1.0 at full
brightness and spreads [0, 1) evenly over all 256 levels.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from rtx.preview.export import save_png
    >>> from rtx.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> image = create_cornell_box_scene().render(128, 128)
    >>> save_png(image, "output.png", tone_map="reinhard")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from loguru import logger
from PIL import Image as PILImage

from rtx.preview.display import FloatImage, ToneMapMethod, process_image_for_display


def to_uint8(image: FloatImage) -> npt.NDArray[np.uint8]:
    """Convert linear colors to 8-bit channels.

    Each channel becomes min(255, floor(c * 256)); negative values and NaN
    become 0.

    Args:
        image: Float image array, usually of shape (H, W, 3).

    Returns:
        Array of the same shape with dtype uint8.
    """
    scaled = np.nan_to_num(np.asarray(image, dtype=np.float64) * 256.0, nan=0.0)
    return np.clip(np.floor(scaled), 0.0, 255.0).astype(np.uint8)


def image_to_uint8(
    image: FloatImage,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear image to uint8 after tone mapping and gamma correction.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value. Default 1.0 keeps values linear.
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return to_uint8(processed)


def save_png(
    image: FloatImage,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a rendered image as a PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value. Default 1.0 keeps values linear.
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8).save(filepath)
    logger.info("Saved {}x{} image to {}", image_uint8.shape[1], image_uint8.shape[0], filepath)


def compute_rmse(image_a: FloatImage, image_b: FloatImage) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
