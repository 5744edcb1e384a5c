"""Unit tests for surfaces and surface dispatch.

Tests cover:
- Shiny surface constants
- Checkerboard parity, colours and reflectivity, including negative coordinates
- Dispatch through SurfaceType
- Surface name resolution
"""

import pytest
import taichi as ti


def _query(surface, pos):
    """Evaluate all four surface queries at a position through dispatch."""
    from whitted.surfaces.surface import (
        surface_diffuse,
        surface_reflectivity,
        surface_shininess,
        surface_specular,
    )

    diffuse = ti.field(dtype=ti.math.vec3, shape=())
    specular = ti.field(dtype=ti.math.vec3, shape=())
    reflectivity = ti.field(dtype=ti.f32, shape=())
    shininess = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(s: ti.i32, x: ti.f32, y: ti.f32, z: ti.f32):
        p = ti.math.vec3(x, y, z)
        diffuse[None] = surface_diffuse(s, p)
        specular[None] = surface_specular(s, p)
        reflectivity[None] = surface_reflectivity(s, p)
        shininess[None] = surface_shininess(s)

    test_kernel(int(surface), *pos)
    return (
        diffuse.to_numpy().tolist(),
        specular.to_numpy().tolist(),
        float(reflectivity[None]),
        int(shininess[None]),
    )


class TestShinySurface:
    """Tests for the shiny surface."""

    @pytest.mark.parametrize("pos", [(0.0, 0.0, 0.0), (3.7, -2.0, 11.5)])
    def test_uniform_properties(self, pos):
        from whitted.surfaces.surface import SurfaceType

        diffuse, specular, reflectivity, shininess = _query(SurfaceType.SHINY, pos)
        assert diffuse == pytest.approx([1.0, 1.0, 1.0])
        assert specular == pytest.approx([0.5, 0.5, 0.5])
        assert reflectivity == pytest.approx(0.7)
        assert shininess == 250


class TestCheckerboardSurface:
    """Tests for the checkerboard surface."""

    def test_even_square_is_black(self):
        """Test floor(0.5) + floor(0.5) = 0 gives black, reflectivity 0.7."""
        from whitted.surfaces.surface import SurfaceType

        diffuse, specular, reflectivity, shininess = _query(
            SurfaceType.CHECKERBOARD, (0.5, 0.0, 0.5)
        )
        assert diffuse == pytest.approx([0.0, 0.0, 0.0])
        assert specular == pytest.approx([1.0, 1.0, 1.0])
        assert reflectivity == pytest.approx(0.7)
        assert shininess == 150

    def test_odd_square_is_white(self):
        """Test floor(1.5) + floor(0.5) = 1 gives white, reflectivity 0.1."""
        from whitted.surfaces.surface import SurfaceType

        diffuse, specular, reflectivity, _ = _query(SurfaceType.CHECKERBOARD, (1.5, 0.0, 0.5))
        assert diffuse == pytest.approx([1.0, 1.0, 1.0])
        assert specular == pytest.approx([1.0, 1.0, 1.0])
        assert reflectivity == pytest.approx(0.1)

    def test_height_is_ignored(self):
        from whitted.surfaces.surface import SurfaceType

        low = _query(SurfaceType.CHECKERBOARD, (1.5, -4.0, 0.5))
        high = _query(SurfaceType.CHECKERBOARD, (1.5, 9.0, 0.5))
        assert low == high

    @pytest.mark.parametrize(
        "x,z,odd",
        [
            (0.5, 0.5, 0),
            (1.5, 0.5, 1),
            (0.5, 1.5, 1),
            (1.5, 1.5, 0),
            (-0.5, 0.5, 1),
            (-0.5, -0.5, 0),
            (-1.5, 0.5, 0),
            (-2.5, 0.5, 1),
        ],
    )
    def test_parity(self, x, z, odd):
        """Test parity uses floor, alternating across the origin."""
        from whitted.surfaces.checkerboard import checker_parity

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(px: ti.f32, pz: ti.f32):
            result[None] = checker_parity(ti.math.vec3(px, 0.0, pz))

        test_kernel(x, z)
        assert result[None] == odd

    @pytest.mark.parametrize("x,z", [(0.25, 0.75), (-0.3, 2.6), (-3.9, -1.2), (5.5, -7.5)])
    def test_period_two(self, x, z):
        """Test the pattern repeats with period 2 along both axes."""
        from whitted.surfaces.surface import SurfaceType

        base = _query(SurfaceType.CHECKERBOARD, (x, 0.0, z))
        assert _query(SurfaceType.CHECKERBOARD, (x + 2.0, 0.0, z)) == base
        assert _query(SurfaceType.CHECKERBOARD, (x, 0.0, z - 2.0)) == base


class TestSurfaceRegistry:
    """Tests for surface name resolution."""

    def test_builtin_names(self):
        from whitted.surfaces.surface import SURFACES, SurfaceType, resolve_surface

        assert set(SURFACES) == {"shiny", "checkerboard"}
        assert resolve_surface("shiny") is SurfaceType.SHINY
        assert resolve_surface("checkerboard") is SurfaceType.CHECKERBOARD

    def test_resolve_type_and_int(self):
        from whitted.surfaces.surface import SurfaceType, resolve_surface

        assert resolve_surface(SurfaceType.CHECKERBOARD) is SurfaceType.CHECKERBOARD
        assert resolve_surface(0) is SurfaceType.SHINY

    def test_custom_mapping(self):
        """Test callers can supply aliases."""
        from whitted.surfaces.surface import SurfaceType, resolve_surface

        mapping = {"mirror": SurfaceType.SHINY}
        assert resolve_surface("mirror", mapping) is SurfaceType.SHINY
        with pytest.raises(ValueError, match="Unknown surface"):
            resolve_surface("shiny", mapping)

    def test_unknown_name_raises(self):
        from whitted.surfaces.surface import resolve_surface

        with pytest.raises(ValueError, match="Unknown surface"):
            resolve_surface("velvet")

    def test_invalid_id_raises(self):
        from whitted.surfaces.surface import resolve_surface

        with pytest.raises(ValueError, match="Invalid surface id"):
            resolve_surface(7)

    def test_surface_name(self):
        from whitted.surfaces.surface import SurfaceType, surface_name

        assert surface_name(SurfaceType.SHINY) == "shiny"
        assert surface_name(SurfaceType.CHECKERBOARD) == "checkerboard"
