"""Surface registry and surface dispatch.

Surfaces form a closed set identified by SurfaceType. Scene objects store the
integer surface type, and the tracer calls the dispatch functions below, which
route each query to the matching surface module. Scene descriptions refer to
surfaces by name; SURFACES maps the built-in names to their types and callers
may pass their own name mapping (for aliases) to resolve_surface().

Example:
    >>> from whitted.surfaces.surface import SurfaceType, resolve_surface
    >>> resolve_surface("checkerboard")
    <SurfaceType.CHECKERBOARD: 1>
"""

from collections.abc import Mapping
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.surfaces.checkerboard import (
    checkerboard_diffuse,
    checkerboard_reflectivity,
    checkerboard_shininess,
    checkerboard_specular,
)
from whitted.surfaces.shiny import (
    shiny_diffuse,
    shiny_reflectivity,
    shiny_shininess,
    shiny_specular,
)

# Type alias for 3D vectors
vec3 = tm.vec3


class SurfaceType(IntEnum):
    """Enumeration of supported surfaces.

    Used for surface dispatch in the tracer.
    """

    SHINY = 0
    CHECKERBOARD = 1


# Built-in surface names accepted by scene descriptions
SURFACES: dict[str, SurfaceType] = {
    "shiny": SurfaceType.SHINY,
    "checkerboard": SurfaceType.CHECKERBOARD,
}


def resolve_surface(
    surface: str | int | SurfaceType,
    surfaces: Mapping[str, SurfaceType] | None = None,
) -> SurfaceType:
    """Resolve a surface name or id to a SurfaceType.

    Args:
        surface: A surface name (looked up in ``surfaces``), a SurfaceType, or
            its integer value.
        surfaces: Name mapping to use. Defaults to SURFACES.

    Returns:
        The resolved SurfaceType.

    Raises:
        ValueError: If the name or id is unknown.
    """
    if surfaces is None:
        surfaces = SURFACES

    if isinstance(surface, str):
        try:
            return SurfaceType(surfaces[surface])
        except KeyError:
            known = ", ".join(sorted(surfaces))
            raise ValueError(f"Unknown surface: {surface!r} (known: {known})") from None

    try:
        return SurfaceType(surface)
    except ValueError:
        raise ValueError(f"Invalid surface id: {surface}") from None


def surface_name(surface: SurfaceType) -> str:
    """Return the built-in name of a surface type."""
    return SurfaceType(surface).name.lower()


# =============================================================================
# Surface Dispatch (Taichi)
# =============================================================================


@ti.func
def surface_diffuse(surface: ti.i32, pos: vec3) -> vec3:
    """Diffuse colour of a surface at a world position."""
    color = vec3(0.0, 0.0, 0.0)
    if surface == int(SurfaceType.CHECKERBOARD):
        color = checkerboard_diffuse(pos)
    else:
        color = shiny_diffuse(pos)
    return color


@ti.func
def surface_specular(surface: ti.i32, pos: vec3) -> vec3:
    """Specular (highlight) colour of a surface at a world position."""
    color = vec3(0.0, 0.0, 0.0)
    if surface == int(SurfaceType.CHECKERBOARD):
        color = checkerboard_specular(pos)
    else:
        color = shiny_specular(pos)
    return color


@ti.func
def surface_reflectivity(surface: ti.i32, pos: vec3) -> ti.f32:
    """Mirror reflectivity in [0, 1] of a surface at a world position."""
    reflectivity = 0.0
    if surface == int(SurfaceType.CHECKERBOARD):
        reflectivity = checkerboard_reflectivity(pos)
    else:
        reflectivity = shiny_reflectivity(pos)
    return reflectivity


@ti.func
def surface_shininess(surface: ti.i32) -> ti.i32:
    """Phong exponent of a surface."""
    shininess = 0
    if surface == int(SurfaceType.CHECKERBOARD):
        shininess = checkerboard_shininess()
    else:
        shininess = shiny_shininess()
    return shininess
