"""Look-at camera and primary ray generation.

The camera stores its position and three basis vectors:
- forward: unit view direction
- right: normalize(forward x down) scaled by FOV_FACTOR
- up: normalize(forward x right) scaled by FOV_FACTOR

where down is the fixed world vector (0, -1, 0). The right/up vectors carry the
field-of-view factor so that normalized device coordinates in [-0.5, 0.5] span
a sensible frustum.

A pixel (x, y) of a width x height raster maps to
    ndc_x = (x - width / 2) / (2 * width)
    ndc_y = -(y - height / 2) / (2 * height)
and its ray leaves the camera position along
    normalize(forward + ndc_x * right + ndc_y * up).
Row 0 is the top of the image.

The basis is built on the Python side with NumPy, stored in Taichi fields by
setup_camera(), and read by get_ray() inside kernels. pixel_ray() computes the
same ray from a Camera without touching any field.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.camera import Camera, setup_camera
    >>> camera = Camera.look_at(position=(3.0, 2.0, 4.0), target=(-1.0, 0.5, 0.0))
    >>> setup_camera(camera)
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, normalize, normalize_np, vec3

# Scale applied to the right/up basis vectors
FOV_FACTOR = 1.5

# World reference direction used to derive the right vector
WORLD_DOWN = (0.0, -1.0, 0.0)

Vec3Tuple = tuple[float, float, float]


def _as_tuple(v: npt.ArrayLike) -> Vec3Tuple:
    arr = np.asarray(v, dtype=np.float64)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Camera position and pre-scaled view basis.

    Attributes:
        position: Camera position in world space.
        forward: Unit view direction.
        right: Right vector, scaled by the field-of-view factor.
        up: Up vector, scaled by the field-of-view factor.
    """

    position: Vec3Tuple
    forward: Vec3Tuple
    right: Vec3Tuple
    up: Vec3Tuple

    @classmethod
    def look_at(
        cls,
        position: Sequence[float],
        target: Sequence[float],
        fov_factor: float = FOV_FACTOR,
    ) -> "Camera":
        """Build a camera at ``position`` looking toward ``target``.

        A view direction parallel to the world down vector yields a degenerate
        basis (non-finite right/up vectors); no error is raised.

        Args:
            position: Camera position (x, y, z).
            target: Point the camera looks at (x, y, z).
            fov_factor: Scale applied to right and up. Default 1.5.

        Returns:
            The constructed Camera.
        """
        pos = np.asarray(position, dtype=np.float64)
        forward = normalize_np(np.asarray(target, dtype=np.float64) - pos)
        right = normalize_np(np.cross(forward, WORLD_DOWN)) * fov_factor
        up = normalize_np(np.cross(forward, right)) * fov_factor
        return cls(
            position=_as_tuple(pos),
            forward=_as_tuple(forward),
            right=_as_tuple(right),
            up=_as_tuple(up),
        )


def pixel_ndc(x: float, y: float, width: int, height: int) -> tuple[float, float]:
    """Map pixel coordinates to normalized device coordinates.

    Returns:
        (ndc_x, ndc_y), each in [-0.25, 0.25) for pixels inside the raster.
    """
    ndc_x = (x - width / 2.0) / (2.0 * width)
    ndc_y = -(y - height / 2.0) / (2.0 * height)
    return ndc_x, ndc_y


def pixel_ray(
    camera: Camera,
    x: float,
    y: float,
    width: int,
    height: int,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Compute the primary ray for a pixel.

    Pure function of its arguments; it does not read the camera fields.

    Args:
        camera: The camera.
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A tuple (origin, direction) of NumPy arrays; direction is unit length.
    """
    ndc_x, ndc_y = pixel_ndc(x, y, width, height)
    direction = normalize_np(
        np.asarray(camera.forward)
        + ndc_x * np.asarray(camera.right)
        + ndc_y * np.asarray(camera.up)
    )
    return np.asarray(camera.position, dtype=np.float64), direction


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_initialized = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera) -> None:
    """Store a camera in the Taichi fields read by get_ray().

    Must be called from Python (not from within a Taichi kernel) before
    rendering.
    """
    _camera_position[None] = list(camera.position)
    _camera_forward[None] = list(camera.forward)
    _camera_right[None] = list(camera.right)
    _camera_up[None] = list(camera.up)
    _camera_initialized[None] = 1


def clear_camera() -> None:
    """Mark the camera as not set up."""
    _camera_initialized[None] = 0


def is_camera_set_up() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


@ti.func
def get_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    ndc_x = (ti.cast(pixel_x, ti.f32) - w / 2.0) / (2.0 * w)
    ndc_y = -(ti.cast(pixel_y, ti.f32) - h / 2.0) / (2.0 * h)

    direction = normalize(
        _camera_forward[None] + ndc_x * _camera_right[None] + ndc_y * _camera_up[None]
    )
    return make_ray(_camera_position[None], direction)


@ti.func
def get_camera_position() -> vec3:
    """Get the camera position in world space."""
    return _camera_position[None]


def get_camera_info() -> dict[str, Vec3Tuple]:
    """Get the stored camera state for debugging.

    Returns:
        Dictionary with position, forward, right and up.
    """
    info = {}
    for name, fld in (
        ("position", _camera_position),
        ("forward", _camera_forward),
        ("right", _camera_right),
        ("up", _camera_up),
    ):
        v = fld[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
