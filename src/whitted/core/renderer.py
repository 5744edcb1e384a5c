"""Band-by-band renderer with progress reporting and cancellation.

This module wraps the tracer kernels in a small object that owns the render
target size and the reflection depth bound. Rendering proceeds in bands of
rows; between bands the renderer reports progress and checks for
cancellation. Nothing is checked inside the tracer itself.

Each pixel depends only on the uploaded (read-only) scene and its own
coordinates, so any partition of the rows gives the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene()
    >>> scene.upload()
    >>> renderer = Renderer(256, 256)
    >>> renderer.render(band_size=32)
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from whitted.core.tracer import (
    MAX_DEPTH,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_image_numpy,
    render_pixel,
    render_rows,
    setup_render_target,
)
from whitted.preview.export import color_to_uint8, save_png_from_array

if TYPE_CHECKING:
    from whitted.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Returns True when rendering should stop before the next band
CancelCheck = Callable[[], bool]

# Receives (x, y, (r, g, b)) for every pixel
PixelCallback = Callable[[int, int, tuple[float, float, float]], None]


@dataclass
class RenderConfig:
    """Render settings.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection depth bound.
        band_size: Rows rendered per kernel launch.
    """

    width: int = 512
    height: int = 512
    max_depth: int = MAX_DEPTH
    band_size: int = 16

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.band_size <= 0:
            raise ValueError(f"band_size must be positive, got {self.band_size}")


class Renderer:
    """Renders the uploaded scene into the shared render target.

    The renderer delegates to the global tracer buffers (Taichi fields), so
    only one image is held at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection depth bound.
    """

    def __init__(self, width: int, height: int, max_depth: int = MAX_DEPTH) -> None:
        """Initialize the renderer and its render target.

        Raises:
            ValueError: If dimensions or depth are invalid.
        """
        self._config = RenderConfig(width=width, height=height, max_depth=max_depth)
        self._rows_done = 0
        setup_render_target(width, height)

    @classmethod
    def from_config(cls, config: RenderConfig) -> Renderer:
        """Create a renderer from a RenderConfig."""
        renderer = cls(config.width, config.height, config.max_depth)
        renderer._config = config
        return renderer

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._config.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._config.height

    @property
    def max_depth(self) -> int:
        """Get the reflection depth bound."""
        return self._config.max_depth

    @property
    def rows_done(self) -> int:
        """Number of rows rendered by the last render call."""
        return self._rows_done

    def reset(self) -> None:
        """Clear the colour buffer without changing the image size."""
        setup_render_target(self.width, self.height)
        self._rows_done = 0

    def render_progressive(
        self,
        band_size: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render band by band, yielding progress after each band.

        Stop iterating to cancel; rows not yet rendered stay black.

        Args:
            band_size: Rows per band. Defaults to the configured band size.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        if band_size is None:
            band_size = self._config.band_size
        if band_size <= 0:
            raise ValueError(f"band_size must be positive, got {band_size}")

        self._rows_done = 0
        while self._rows_done < self.height:
            row_end = min(self._rows_done + band_size, self.height)
            render_rows(self._rows_done, row_end, self.max_depth)
            self._rows_done = row_end
            yield (self._rows_done, self.height)

    def render(
        self,
        band_size: int | None = None,
        callback: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> bool:
        """Render the whole image.

        Args:
            band_size: Rows per band. Defaults to the configured band size.
            callback: Optional callback called after each band with
                (rows_done, total_rows).
            should_cancel: Optional check called before each band; rendering
                stops when it returns True.

        Returns:
            True if every row was rendered, False if cancelled.
        """
        start_time = time.perf_counter()
        completed = True

        if should_cancel is not None and should_cancel():
            completed = False
        else:
            for done, total in self.render_progressive(band_size):
                if callback is not None:
                    callback(done, total)
                if done < total and should_cancel is not None and should_cancel():
                    completed = False
                    break

        elapsed = time.perf_counter() - start_time
        if completed:
            logger.debug(
                "Rendered %dx%d (max_depth=%d) in %.3fs",
                self.width,
                self.height,
                self.max_depth,
                elapsed,
            )
        else:
            logger.info("Render cancelled after %d/%d rows", self._rows_done, self.height)
        return completed

    def render_pixel(self, pixel_x: int, pixel_y: int) -> tuple[float, float, float]:
        """Compute one pixel's colour without writing the colour buffer."""
        return render_pixel(pixel_x, pixel_y, self.max_depth)

    def for_each_pixel(self, fn: PixelCallback) -> None:
        """Call fn(x, y, color) for every pixel of the rendered image.

        Rows are visited top to bottom, pixels left to right.
        """
        image = self.get_image_numpy()
        for y in range(self.height):
            for x in range(self.width):
                r, g, b = image[y, x]
                fn(x, y, (float(r), float(g), float(b)))

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a (height, width, 3) float32 array.

        Values are unclamped.
        """
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as a (height, width, 3) uint8 array."""
        return color_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file.

        Raises:
            ImageWriteError: If the image cannot be written.
        """
        save_png_from_array(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.max_depth})"
        )


def render(
    scene: Scene,
    width: int,
    height: int,
    max_depth: int = MAX_DEPTH,
) -> npt.NDArray[np.float32]:
    """Render a scene and return its raster.

    Uploads the scene, renders every pixel and returns the colours.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection depth bound.

    Returns:
        Float32 array of shape (height, width, 3), row 0 at the top, unclamped.
    """
    scene.upload()
    renderer = Renderer(width, height, max_depth)
    renderer.render()
    return renderer.get_image_numpy()
