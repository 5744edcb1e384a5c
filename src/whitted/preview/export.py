"""Image export utilities for rendered images.

This module turns rendered colours into 8-bit RGB and writes them to image
files through Pillow. The file format follows the file extension.

Colours are converted by clamping each channel to [0, 1] and scaling by 255
(truncating), so any channel above 1 saturates at 255.

Write failures are never ignored: every problem raises ImageWriteError.

Example:
    >>> from whitted.preview.export import save_png_from_array
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(256, 256)
    >>> renderer.render()
    >>> save_png_from_array(renderer.get_image_numpy(), "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


class ImageWriteError(OSError):
    """Raised when a rendered image cannot be written."""


def color_to_uint8(image: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert linear colours to 8-bit values.

    Args:
        image: Colour array with channels last, any shape (..., 3).

    Returns:
        Array of the same shape with dtype uint8.
    """
    clamped = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    return (clamped * 255).astype(np.uint8)


def write_image(
    width: int,
    height: int,
    rgb: bytes | bytearray | npt.ArrayLike,
    filepath: str | Path,
) -> Path:
    """Write row-major 8-bit RGB triples to an image file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        rgb: width * height RGB triples, row 0 first, as bytes or a uint8
            array of shape (height, width, 3) or (width * height * 3,).
        filepath: Output path; the extension selects the format.

    Returns:
        The path written.

    Raises:
        ImageWriteError: If the data does not match the size or the file
            cannot be written.
    """
    path = Path(filepath)

    if width <= 0 or height <= 0:
        raise ImageWriteError(f"Image dimensions must be positive, got {width}x{height}")

    if isinstance(rgb, (bytes, bytearray)):
        data = np.frombuffer(bytes(rgb), dtype=np.uint8)
    else:
        data = np.asarray(rgb)
        if data.dtype != np.uint8:
            raise ImageWriteError(f"Expected uint8 RGB data, got dtype {data.dtype}")

    expected = width * height * 3
    if data.size != expected:
        raise ImageWriteError(
            f"Expected {expected} bytes for a {width}x{height} RGB image, got {data.size}"
        )

    pixels = np.ascontiguousarray(data.reshape(height, width, 3))

    try:
        pil_image = PILImage.fromarray(pixels)
        pil_image.save(path)
    except (OSError, ValueError) as err:
        raise ImageWriteError(f"Failed to write image to {path}: {err}") from err

    logger.info("Wrote %dx%d image to %s", width, height, path)
    return path


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str | Path) -> Path:
    """Save a linear colour image.

    Args:
        image: Colour array of shape (H, W, 3), unclamped.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ImageWriteError: If the array has the wrong shape or the file cannot
            be written.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ImageWriteError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    height, width = image.shape[:2]
    return write_image(width, height, color_to_uint8(image), filepath)
