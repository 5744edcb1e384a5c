"""Whitted-style recursive ray tracer.

This module implements the shading pipeline: nearest-intersection lookup,
shadow-tested direct lighting (Lambertian diffuse plus Phong specular) and
mirror reflection bounded by a maximum recursion depth.

The reflection recursion
    trace(ray, depth) = natural(hit) + reflectivity(hit) * trace(reflected, depth + 1)
    trace(ray, depth) = natural(hit) + GREY                 when depth >= max_depth
    trace(ray, depth) = BACKGROUND_COLOR                    on a miss
is evaluated as a bounce loop that carries the product of reflectivities seen
so far, because Taichi functions cannot recurse. The loop runs at most
max_depth - depth + 1 times, which bounds the work per pixel even between
facing mirrors.

Lights are not attenuated by distance and there is no indirect lighting other
than the single specular reflection chain.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.tracer import render_image, setup_render_target
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene()
    >>> scene.upload()
    >>> setup_render_target(256, 256)
    >>> render_image()
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.camera.camera import get_ray, is_camera_set_up
from whitted.core.ray import BLACK, GREY, normalize
from whitted.scene.intersection import (
    closest_intersection,
    light_colors,
    light_positions,
    num_lights,
    test_ray,
    thing_normal,
    thing_surface,
)
from whitted.surfaces.surface import (
    surface_diffuse,
    surface_reflectivity,
    surface_shininess,
    surface_specular,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum reflection depth
MAX_DEPTH = 5

# Colour of rays that leave the scene
BACKGROUND_COLOR = BLACK

# Stand-in for the reflected colour once the depth bound is reached
DEPTH_LIMIT_COLOR = GREY


# =============================================================================
# Shading
# =============================================================================


@ti.func
def natural_color(surface: ti.i32, pos: vec3, normal: vec3, reflect_dir: vec3) -> vec3:
    """Direct illumination at a surface point from every light.

    For each light, a shadow ray is cast from ``pos`` toward the light. If
    the nearest thing along it is no farther than the light, the light is
    blocked. Otherwise the light adds
        max(l . n, 0) * light_color * diffuse(pos)
      + max(l . normalize(reflect_dir), 0)^shininess * light_color * specular(pos)
    where l is the unit direction toward the light.

    Args:
        surface: SurfaceType value of the hit thing.
        pos: The surface point.
        normal: Unit surface normal at pos.
        reflect_dir: Mirror reflection of the incoming direction.

    Returns:
        The summed diffuse and specular contribution (unclamped).
    """
    color = vec3(0.0, 0.0, 0.0)
    reflect_unit = normalize(reflect_dir)
    diffuse = surface_diffuse(surface, pos)
    specular = surface_specular(surface, pos)
    shininess = surface_shininess(surface)

    for li in range(num_lights[None]):
        to_light = light_positions[li] - pos
        light_dir = normalize(to_light)
        light_color = light_colors[li]

        blocked, blocker_t = test_ray(pos, light_dir)
        in_shadow = blocked == 1 and blocker_t <= tm.length(to_light)

        if not in_shadow:
            illum = ti.max(tm.dot(light_dir, normal), 0.0)
            spec = ti.max(tm.dot(light_dir, reflect_unit), 0.0)
            color += diffuse * (illum * light_color)
            color += specular * (ti.pow(spec, ti.cast(shininess, ti.f32)) * light_color)

    return color


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3, depth: ti.i32, max_depth: ti.i32) -> vec3:
    """Compute the colour seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        depth: Reflection depth of this ray (0 for primary rays).
        max_depth: Depth at which reflection is replaced by DEPTH_LIMIT_COLOR.

    Returns:
        The (unclamped) colour for this ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    origin = ray_origin
    direction = ray_direction
    current_depth = depth

    # Active flag for path continuation
    active = 1

    for _ in range(ti.max(max_depth - depth, 0) + 1):
        if active == 1:
            rec = closest_intersection(origin, direction)

            if rec.hit == 0:
                color += weight * BACKGROUND_COLOR
                active = 0
            else:
                pos = origin + rec.t * direction
                normal = thing_normal(rec.thing_index, pos)
                reflect_dir = direction - 2.0 * tm.dot(normal, direction) * normal
                surface = thing_surface(rec.thing_index)

                color += weight * natural_color(surface, pos, normal, reflect_dir)

                if current_depth >= max_depth:
                    color += weight * DEPTH_LIMIT_COLOR
                    active = 0
                else:
                    weight *= surface_reflectivity(surface, pos)
                    origin = pos
                    direction = reflect_dir
                    current_depth += 1

    return color


@ti.func
def render_pixel_impl(
    pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
) -> vec3:
    """Colour of one pixel: the traced colour of its primary ray."""
    ray = get_ray(pixel_x, pixel_y, width, height)
    return trace_ray(ray.origin, ray.direction, 0, max_depth)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Colour buffer indexed [x, y], y = 0 is the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Result slot for the single-ray and single-pixel kernels
_single_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Sets the active image dimensions and clears the colour buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the colour buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_camera() -> None:
    if not is_camera_set_up():
        raise RuntimeError("Camera not set up. Call setup_camera() or Scene.upload() first.")


def _check_depth(max_depth: int) -> None:
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    row_start: ti.i32, row_end: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
):
    """Render rows [row_start, row_end) into the colour buffer.

    Every pixel is independent, so the loop is parallelized by Taichi.
    """
    for x, y in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[x, y] = render_pixel_impl(x, y, width, height, max_depth)


@ti.kernel
def _render_single_pixel(
    pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
):
    # Single-iteration outer loop so the bounce and light loops stay serial
    for _ in range(1):
        _single_color[None] = render_pixel_impl(pixel_x, pixel_y, width, height, max_depth)


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
    max_depth: ti.i32,
):
    for _ in range(1):
        _single_color[None] = trace_ray(vec3(ox, oy, oz), vec3(dx, dy, dz), depth, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_single_ray(
    origin: Sequence[float],
    direction: Sequence[float],
    depth: int = 0,
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace one ray against the uploaded scene.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z).
        depth: Starting reflection depth.
        max_depth: Reflection depth bound.

    Returns:
        Tuple of (R, G, B), unclamped.
    """
    _check_depth(max_depth)
    _trace_single_ray(*map(float, origin), *map(float, direction), int(depth), int(max_depth))
    color = _single_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_pixel(
    pixel_x: int, pixel_y: int, max_depth: int = MAX_DEPTH
) -> tuple[float, float, float]:
    """Compute the colour of one pixel without touching the colour buffer.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        max_depth: Reflection depth bound.

    Returns:
        Tuple of (R, G, B), unclamped.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_render_target_initialized()
    _check_camera()
    _check_depth(max_depth)

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_x, pixel_y, width, height, max_depth)
    color = _single_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int, max_depth: int = MAX_DEPTH) -> None:
    """Render a band of rows into the colour buffer.

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row to render.
        max_depth: Reflection depth bound.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    _check_camera()
    _check_depth(max_depth)

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Invalid row range [{row_start}, {row_end}) for height {height}")
    if row_start == row_end:
        return
    _render_rows(row_start, row_end, width, height, max_depth)


def render_image(max_depth: int = MAX_DEPTH) -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    render_rows(0, height, max_depth)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3), row-major with row 0 at the top.
    Values are unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region, (width, height, 3) -> (height, width, 3)
    image = _color_buffer.to_numpy()[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
