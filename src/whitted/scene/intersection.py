"""Scene storage and scene-level ray queries.

Scene objects ("things") live in one ordered arena of Taichi fields, so spheres
and planes share a single scan order. Each slot stores a ThingKind tag, one
vector (sphere centre or plane normal), one scalar (sphere radius or plane
offset) and a surface type. Intersection results refer to a thing by its index
in this arena.

Lights are stored in a second pair of fields. Both collections are written from
Python before a render and only read by kernels while rendering.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import (
    ...     add_light, add_sphere, clear_scene, query_closest_intersection
    ... )
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 0.0), 1.0, surface=0)
    >>> add_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0))
    >>> query_closest_intersection((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
    (4.0, 0)
"""

from collections.abc import Sequence
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import Plane, hit_plane, plane_normal
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, sphere_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ThingKind(IntEnum):
    """Tag of a scene object slot."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of the closest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any thing (1 if hit, 0 if miss).
        t: Distance along the ray. Only valid if hit == 1.
        thing_index: Index of the hit thing in the scene arena.
            Only valid if hit == 1; -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    thing_index: ti.i32


# Maximum number of scene objects and lights
MAX_THINGS = 1024
MAX_LIGHTS = 64

# Thing storage: Structure of Arrays layout, one slot per thing in scan order
thing_kinds = ti.field(dtype=ti.i32, shape=MAX_THINGS)
thing_vectors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_THINGS)
thing_scalars = ti.field(dtype=ti.f32, shape=MAX_THINGS)
thing_surfaces = ti.field(dtype=ti.i32, shape=MAX_THINGS)
num_things = ti.field(dtype=ti.i32, shape=())

# Light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Result slots for the Python-side query kernels
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_index = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all things and lights.

    Resets the counts to zero. Field data is overwritten by later additions.
    """
    num_things[None] = 0
    num_lights[None] = 0


def _add_thing(
    kind: ThingKind,
    vector: Sequence[float],
    scalar: float,
    surface: int,
) -> int:
    idx = num_things[None]
    if idx >= MAX_THINGS:
        raise RuntimeError(f"Maximum number of things ({MAX_THINGS}) exceeded")
    thing_kinds[idx] = int(kind)
    thing_vectors[idx] = [float(vector[0]), float(vector[1]), float(vector[2])]
    thing_scalars[idx] = float(scalar)
    thing_surfaces[idx] = int(surface)
    num_things[None] = idx + 1
    return idx


def add_sphere(center: Sequence[float], radius: float, surface: int = 0) -> int:
    """Append a sphere to the arena.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        surface: The SurfaceType value of the sphere.

    Returns:
        The arena index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of things is exceeded.
    """
    return _add_thing(ThingKind.SPHERE, center, radius, surface)


def add_plane(normal: Sequence[float], offset: float, surface: int = 0) -> int:
    """Append a plane to the arena.

    Args:
        normal: Unit normal of the plane's front side.
        offset: Signed offset, dot(normal, p) + offset == 0 on the plane.
        surface: The SurfaceType value of the plane.

    Returns:
        The arena index of the added plane.

    Raises:
        RuntimeError: If the maximum number of things is exceeded.
    """
    return _add_thing(ThingKind.PLANE, normal, offset, surface)


def add_light(position: Sequence[float], color: Sequence[float]) -> int:
    """Append a point light.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [float(position[0]), float(position[1]), float(position[2])]
    light_colors[idx] = [float(color[0]), float(color[1]), float(color[2])]
    num_lights[None] = idx + 1
    return idx


def get_thing_count() -> int:
    """Get the number of things in the arena."""
    return int(num_things[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Thing Dispatch
# =============================================================================


@ti.func
def _sphere_at(i: ti.i32) -> Sphere:
    return Sphere(center=thing_vectors[i], radius=thing_scalars[i])


@ti.func
def _plane_at(i: ti.i32) -> Plane:
    return Plane(normal=thing_vectors[i], offset=thing_scalars[i])


@ti.func
def intersect_thing(i: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with the thing stored at arena index i."""
    rec = HitRecord(hit=0, t=0.0)
    if thing_kinds[i] == int(ThingKind.SPHERE):
        rec = hit_sphere(ray_origin, ray_direction, _sphere_at(i))
    else:
        rec = hit_plane(ray_origin, ray_direction, _plane_at(i))
    return rec


@ti.func
def thing_normal(i: ti.i32, pos: vec3) -> vec3:
    """Unit surface normal of the thing at arena index i."""
    n = vec3(0.0, 0.0, 0.0)
    if thing_kinds[i] == int(ThingKind.SPHERE):
        n = sphere_normal(_sphere_at(i), pos)
    else:
        n = plane_normal(_plane_at(i), pos)
    return n


@ti.func
def thing_surface(i: ti.i32) -> ti.i32:
    """SurfaceType value of the thing at arena index i."""
    return thing_surfaces[i]


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def closest_intersection(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest thing hit by a ray.

    Scans every thing in arena order and keeps the smallest distance. A later
    thing only replaces the current one when strictly closer, so ties go to
    the thing found first.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    closest_t = tm.inf
    result = SceneHitRecord(hit=0, t=0.0, thing_index=-1)

    for i in range(num_things[None]):
        rec = intersect_thing(i, ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(hit=1, t=rec.t, thing_index=i)

    return result


@ti.func
def test_ray(ray_origin: vec3, ray_direction: vec3):
    """Distance to the nearest thing along a ray (shadow query).

    Same traversal as closest_intersection() without building a hit record.

    Returns:
        A tuple (hit, t): hit is 1 if anything was hit, t the nearest distance.
    """
    closest_t = tm.inf
    hit_any = 0

    for i in range(num_things[None]):
        rec = intersect_thing(i, ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            hit_any = 1

    return hit_any, closest_t


# =============================================================================
# Python-side Queries
# =============================================================================


@ti.kernel
def _closest_intersection_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    # Single-iteration outer loop so the scan over things stays serial
    for _ in range(1):
        rec = closest_intersection(vec3(ox, oy, oz), vec3(dx, dy, dz))
        _query_hit[None] = rec.hit
        _query_t[None] = rec.t
        _query_index[None] = rec.thing_index


@ti.kernel
def _test_ray_kernel(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
    for _ in range(1):
        hit, t = test_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        _query_hit[None] = hit
        _query_t[None] = t


def query_closest_intersection(
    origin: Sequence[float],
    direction: Sequence[float],
) -> tuple[float, int] | None:
    """Find the closest intersection from Python.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z).

    Returns:
        (distance, thing_index) of the nearest hit, or None on a miss.
    """
    _closest_intersection_kernel(*map(float, origin), *map(float, direction))
    if _query_hit[None] == 0:
        return None
    return float(_query_t[None]), int(_query_index[None])


def query_test_ray(origin: Sequence[float], direction: Sequence[float]) -> float | None:
    """Distance to the nearest thing from Python, or None on a miss."""
    _test_ray_kernel(*map(float, origin), *map(float, direction))
    if _query_hit[None] == 0:
        return None
    return float(_query_t[None])
