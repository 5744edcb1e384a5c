"""Shiny surface: white diffuse, grey highlights, strongly reflective.

The shiny surface is uniform; every query ignores the position.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import GREY, WHITE

# Type alias for 3D vectors
vec3 = tm.vec3

SHINY_REFLECTIVITY = 0.7
SHINY_SHININESS = 250


@ti.func
def shiny_diffuse(pos: vec3) -> vec3:
    return WHITE


@ti.func
def shiny_specular(pos: vec3) -> vec3:
    return GREY


@ti.func
def shiny_reflectivity(pos: vec3) -> ti.f32:
    return SHINY_REFLECTIVITY


@ti.func
def shiny_shininess() -> ti.i32:
    return SHINY_SHININESS
