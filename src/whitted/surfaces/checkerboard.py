"""Checkerboard surface with unit squares in the xz-plane.

The square containing a point is classified by the parity of
``floor(x) + floor(z)``. Flooring (rather than truncating toward zero) keeps
the pattern alternating across the origin, so it repeats with period 2 along
both axes for negative coordinates too.

    odd  -> white diffuse, reflectivity 0.1
    even -> black diffuse, reflectivity 0.7

Highlights are always white and the shininess exponent is constant.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import BLACK, WHITE

# Type alias for 3D vectors
vec3 = tm.vec3

CHECKERBOARD_SHININESS = 150
CHECKERBOARD_ODD_REFLECTIVITY = 0.1
CHECKERBOARD_EVEN_REFLECTIVITY = 0.7


@ti.func
def checker_parity(pos: vec3) -> ti.i32:
    """Return 1 for squares where floor(x) + floor(z) is odd, else 0."""
    cell = ti.cast(tm.floor(pos.x), ti.i32) + ti.cast(tm.floor(pos.z), ti.i32)
    odd = 0
    if cell % 2 != 0:
        odd = 1
    return odd


@ti.func
def checkerboard_diffuse(pos: vec3) -> vec3:
    color = BLACK
    if checker_parity(pos) == 1:
        color = WHITE
    return color


@ti.func
def checkerboard_specular(pos: vec3) -> vec3:
    return WHITE


@ti.func
def checkerboard_reflectivity(pos: vec3) -> ti.f32:
    reflectivity = CHECKERBOARD_EVEN_REFLECTIVITY
    if checker_parity(pos) == 1:
        reflectivity = CHECKERBOARD_ODD_REFLECTIVITY
    return reflectivity


@ti.func
def checkerboard_shininess() -> ti.i32:
    return CHECKERBOARD_SHININESS
