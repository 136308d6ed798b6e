"""Preview module for output and visualization.

This module handles rendering output:

Components:
    display: Tone mapping and Matplotlib-based preview display
    export: 8-bit conversion and PNG export

Example:
    >>> from rtx.preview import save_png, show_preview
    >>> from rtx.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> image = create_cornell_box_scene().render(128, 128)
    >>> show_preview(image, tone_map="reinhard")
    >>> save_png(image, "output.png")
"""

from rtx.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from rtx.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    to_uint8,
)

__all__ = [
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "to_uint8",
    "save_png",
    "image_to_uint8",
    "compute_rmse",
]
