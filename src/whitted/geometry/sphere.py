"""Sphere primitive with ray-sphere intersection.

The intersection test only evaluates the near root of the ray-sphere quadratic.
It projects the vector from the ray origin to the sphere centre onto the ray
direction and rejects the sphere when that projection is not positive, so a
sphere whose centre lies behind (or level with) the ray origin is never hit.

Rays that start inside a sphere are not special-cased: the near root is then
negative and the sphere is reported as missed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 0), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import dot_sign, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray, in units of the ray direction's length.
            Always positive when hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    With eo = center - origin and v = eo . direction:
        disc = radius^2 - eo . eo + v^2
        t = v - sqrt(disc)

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord; hit is 0 when v <= 0, disc < 0, or the near root is
        not positive.
    """
    eo = sphere.center - ray_origin
    v, toward = dot_sign(eo, ray_direction)

    did_hit = 0
    hit_t = 0.0

    if toward == 1:
        disc = sphere.radius * sphere.radius - tm.dot(eo, eo) + v * v
        if disc >= 0.0:
            t = v - ti.sqrt(disc)
            if t > 0.0:
                did_hit = 1
                hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, pos: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return normalize(pos - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
