"""Preview module for rendered output.

Components:
    export: 8-bit conversion and image file writing (Pillow)

Example:
    >>> from whitted.preview import save_png_from_array
    >>> from whitted.core.renderer import render
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> image = render(create_demo_scene(), 512, 512)
    >>> save_png_from_array(image, "output.png")
"""

from whitted.preview.export import (
    ImageWriteError,
    color_to_uint8,
    save_png_from_array,
    write_image,
)

__all__ = [
    "ImageWriteError",
    "color_to_uint8",
    "write_image",
    "save_png_from_array",
]
