"""Camera module for view setup and primary ray generation.

Components:
    camera: Look-at camera with a field-of-view scaled basis

Camera responsibilities:
    - Build the forward/right/up basis from a position and look-at point
    - Map pixel coordinates to normalized device coordinates
    - Produce one primary ray per pixel, both inside kernels (get_ray)
      and as a pure Python function (pixel_ray)
"""

from .camera import (
    FOV_FACTOR,
    WORLD_DOWN,
    Camera,
    clear_camera,
    get_camera_info,
    get_camera_position,
    get_ray,
    is_camera_set_up,
    pixel_ndc,
    pixel_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "FOV_FACTOR",
    "WORLD_DOWN",
    "setup_camera",
    "clear_camera",
    "is_camera_set_up",
    "get_ray",
    "get_camera_position",
    "get_camera_info",
    "pixel_ndc",
    "pixel_ray",
]
