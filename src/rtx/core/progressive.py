"""Progressive renderer for iterative sample accumulation.

This module provides a convenient wrapper around Scene.render that supports:
- Progressive rendering that refines over time
- Progress callbacks for UI updates
- Easy reset and re-render functionality

Each pass is a complete render of the scene with its own seed, derived from
(master_seed, pass_index). The running image is the average of all passes,
so N passes at R rays per pixel converge like a single render at N * R rays
per pixel, while a usable image is available after the first pass.

Example:
    >>> from rtx.core.progressive import ProgressiveRenderer
    >>> from rtx.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> scene = create_cornell_box_scene()
    >>> renderer = ProgressiveRenderer(scene, 64, 64)
    >>> renderer.render(4)  # Render 4 passes
    >>> image = renderer.image
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from loguru import logger

from rtx.core.integrator import draw_master_seed

if TYPE_CHECKING:
    from rtx.scene.manager import Scene

# Type alias for progress callback
# Callback receives (passes_done, target_passes)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates complete passes over time.

    The renderer keeps a running sum of pass images for a fixed image size.
    Changing the scene between passes mixes old and new passes; call reset()
    after editing the scene.

    Attributes:
        scene: The scene being rendered.
    """

    def __init__(self, scene: Scene, width: int, height: int) -> None:
        """Initialize the progressive renderer.

        Args:
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If width or height is not positive.
        """
        self.scene = scene
        self._width = 0
        self._height = 0
        self.resize(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def pass_count(self) -> int:
        """Get the number of accumulated passes."""
        return self._passes

    @property
    def sample_count(self) -> int:
        """Get the number of accumulated samples per pixel over all passes."""
        return self._samples

    @property
    def image(self) -> npt.NDArray[np.float64]:
        """The average of all passes so far, shape (height, width, 3).

        All zeros before the first pass.
        """
        if self._passes == 0:
            return np.zeros_like(self._accumulator)
        return self._accumulator / self._passes

    def reset(self) -> None:
        """Reset the accumulator for a new render.

        Clears the running sum and pass count and picks a new master seed
        unless the scene config fixes one.
        """
        self._accumulator = np.zeros((self._height, self._width, 3), dtype=np.float64)
        self._passes = 0
        self._samples = 0
        seed = self.scene.config.seed
        self._master_seed = seed if seed is not None else draw_master_seed()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset accumulator.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.reset()

    def _render_pass(self) -> None:
        pass_seed = (self._master_seed, self._passes)
        image = self.scene.render(self._width, self._height, seed=pass_seed)
        self._accumulator += image
        self._passes += 1
        self._samples += self.scene.config.rays_per_pixel
        logger.debug("Finished pass {} ({} samples per pixel)", self._passes, self._samples)

    def render(
        self,
        num_passes: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render passes progressively with optional progress callback.

        Accumulates the specified number of passes into the existing image.
        Can be called multiple times to continue refining the image.

        Args:
            num_passes: Number of complete passes to add.
            callback: Optional callback function called after each pass.
                Receives (passes_done, target_passes).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} passes")
            >>> renderer.render(10, callback=progress)
        """
        for current, target in self.render_progressive(num_passes):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_passes: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render passes progressively, yielding progress after each one.

        This is a generator-based alternative to render() with callbacks,
        useful for updating a preview or stopping early.

        Args:
            num_passes: Number of complete passes to add.

        Yields:
            Tuple of (passes_done, target_passes).
        """
        if num_passes <= 0:
            return

        target = self._passes + num_passes
        while self._passes < target:
            self._render_pass()
            yield (self._passes, target)

    def save_image(self, filepath: str | Path, tone_map: str = "none", gamma: float = 1.0) -> None:
        """Save the current average image as PNG, see rtx.preview.export.save_png."""
        from rtx.preview.export import save_png

        save_png(self.image, filepath, tone_map=tone_map, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"passes={self.pass_count}, samples={self.sample_count})"
        )
