"""Surfaces module: material properties keyed by world position.

Components:
    shiny: Uniform white surface with grey highlights, reflectivity 0.7
    checkerboard: Black/white unit squares in the xz-plane
    surface: SurfaceType enum, name registry and Taichi dispatch

Each surface answers four queries:
    - diffuse(pos): colour scattered toward every light-facing direction
    - specular(pos): colour of Phong highlights
    - reflectivity(pos): weight of the mirror-reflected colour
    - shininess(): Phong exponent

All queries are total functions; there are no error conditions.
"""

from .checkerboard import (
    CHECKERBOARD_EVEN_REFLECTIVITY,
    CHECKERBOARD_ODD_REFLECTIVITY,
    CHECKERBOARD_SHININESS,
    checker_parity,
    checkerboard_diffuse,
    checkerboard_reflectivity,
    checkerboard_shininess,
    checkerboard_specular,
)
from .shiny import (
    SHINY_REFLECTIVITY,
    SHINY_SHININESS,
    shiny_diffuse,
    shiny_reflectivity,
    shiny_shininess,
    shiny_specular,
)
from .surface import (
    SURFACES,
    SurfaceType,
    resolve_surface,
    surface_diffuse,
    surface_name,
    surface_reflectivity,
    surface_shininess,
    surface_specular,
)

__all__ = [
    # Registry and dispatch
    "SurfaceType",
    "SURFACES",
    "resolve_surface",
    "surface_name",
    "surface_diffuse",
    "surface_specular",
    "surface_reflectivity",
    "surface_shininess",
    # Shiny
    "SHINY_REFLECTIVITY",
    "SHINY_SHININESS",
    "shiny_diffuse",
    "shiny_specular",
    "shiny_reflectivity",
    "shiny_shininess",
    # Checkerboard
    "CHECKERBOARD_SHININESS",
    "CHECKERBOARD_ODD_REFLECTIVITY",
    "CHECKERBOARD_EVEN_REFLECTIVITY",
    "checker_parity",
    "checkerboard_diffuse",
    "checkerboard_specular",
    "checkerboard_reflectivity",
    "checkerboard_shininess",
]
