"""Infinite plane primitive with ray-plane intersection.

A plane is the set of points p with ``dot(normal, p) + offset == 0``. Only its
front side (the side the normal points to) can be hit: a ray whose direction
does not move against the normal is reported as a miss, and so is a ray that
starts behind the plane.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import Plane, hit_plane
    >>> # Floor at y = 0, facing up
    >>> floor = Plane(normal=ti.math.vec3(0, 1, 0), offset=0.0)
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import dot_sign
from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """A plane defined by a unit normal and a signed offset.

    Attributes:
        normal: Unit normal of the plane's front side (vec3).
        offset: Signed offset; the plane holds dot(normal, p) + offset == 0.
    """

    normal: vec3
    offset: ti.f32


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> HitRecord:
    """Test for ray-plane intersection.

    Solves dot(normal, origin + t * direction) + offset == 0:
        t = (dot(normal, origin) + offset) / -dot(normal, direction)

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        plane: The plane to test intersection against.

    Returns:
        A HitRecord; hit is 0 when the ray is parallel to the plane, moves
        away from its front side, or starts behind it.
    """
    denom, away = dot_sign(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0

    if away == 0 and denom != 0.0:
        t = (tm.dot(plane.normal, ray_origin) + plane.offset) / -denom
        if t > 0.0:
            did_hit = 1
            hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def plane_normal(plane: Plane, pos: vec3) -> vec3:
    """Normal of the plane; independent of the surface point."""
    return plane.normal


@ti.func
def make_plane(normal: vec3, offset: ti.f32) -> Plane:
    """Create a plane from normal and offset inside a kernel."""
    return Plane(normal=normal, offset=offset)
