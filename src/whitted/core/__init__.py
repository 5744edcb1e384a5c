"""Core rendering module.

Components:
    ray: Ray data structure, vector algebra and colour constants
    tracer: Whitted shading pipeline, render target and rendering kernels
    renderer: Band-by-band renderer with progress and cancellation

The tracer combines nearest-intersection lookup, shadow-tested diffuse and
specular lighting, and mirror reflection bounded by a maximum depth.

All per-pixel work runs in Taichi kernels.
"""

from .ray import (
    BLACK,
    GREY,
    WHITE,
    Color,
    Ray,
    cross,
    dot,
    dot_sign,
    length,
    length_squared,
    make_ray,
    normalize,
    normalize_np,
    ray_at,
    reflect,
    vec3,
)

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.tracer or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "Color",
    "WHITE",
    "GREY",
    "BLACK",
    "length",
    "length_squared",
    "normalize",
    "normalize_np",
    "dot",
    "dot_sign",
    "cross",
    "reflect",
]
