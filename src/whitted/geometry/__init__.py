"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with near-root ray-sphere intersection
    plane: One-sided infinite plane primitive

All intersection routines are Taichi functions (@ti.func). Each returns a
HitRecord holding a hit flag and the positive distance along the ray:
    rec = hit_shape(ray_origin, ray_direction, shape)

There is no acceleration structure; the scene scans every primitive.
"""

from .plane import Plane, hit_plane, make_plane, plane_normal
from .sphere import HitRecord, Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "Plane",
    "hit_plane",
    "make_plane",
    "plane_normal",
]
