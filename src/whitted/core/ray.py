"""Ray data structure, vector algebra and colour helpers.

This module provides the Ray dataclass and the vector/colour utility functions
shared by the geometry, surface and tracer modules. Vectors and colours are both
``vec3`` values: a colour simply stores (r, g, b) in (x, y, z) and is never
clamped while shading.

All ``@ti.func`` helpers are meant to be called from inside Taichi kernels. A
small set of NumPy mirrors (suffix ``_np``) is used for Python-side setup such as
building the camera basis.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 5.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 4.0)  # (0, 0, 1)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Colours share the vector representation
Color = tm.vec3

WHITE = vec3(1.0, 1.0, 1.0)
GREY = vec3(0.5, 0.5, 0.5)
BLACK = vec3(0.0, 0.0, 0.0)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; shading normalizes where it needs to.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length (magnitude) of a vector."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    A zero-length vector is scaled by infinity instead of raising. Under IEEE
    arithmetic ``0 * inf`` is NaN, so the result has non-finite components and
    callers must tolerate it.

    Args:
        v: The input vector.

    Returns:
        v / |v|, or v * inf when |v| == 0.
    """
    mag = tm.sqrt(tm.dot(v, v))
    div = tm.inf
    if mag != 0.0:
        div = 1.0 / mag
    return v * div


@ti.func
def dot_sign(a: vec3, b: vec3):
    """Compute a . b and classify its sign.

    This is the two-way dispatch used by the intersection and light-facing
    tests: a strictly positive product takes the positive branch, zero and
    negative products take the negative branch.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        A tuple (value, positive) where positive is 1 if value > 0, else 0.
    """
    value = tm.dot(a, b)
    positive = 0
    if value > 0.0:
        positive = 1
    return value, positive


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a unit surface normal."""
    return incident - 2.0 * tm.dot(normal, incident) * normal


# =============================================================================
# Python-side helpers (NumPy)
# =============================================================================


def normalize_np(v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """NumPy counterpart of normalize() with the same zero-length fallback."""
    arr = np.asarray(v, dtype=np.float64)
    mag = float(np.linalg.norm(arr))
    div = np.inf if mag == 0.0 else 1.0 / mag
    with np.errstate(invalid="ignore"):
        return arr * div
