"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length, dot_sign, reflect)
- The NumPy normalize mirror used for camera setup
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at computes origin + t * direction."""
        from whitted.core.ray import ray_at, make_ray, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 4.0)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 1.0) < 1e-6


class TestVectorAlgebra:
    """Tests for the vector helpers."""

    def test_dot_and_length(self):
        """Test dot, length and length_squared."""
        from whitted.core.ray import dot, length, length_squared, vec3

        d = ti.field(dtype=ti.f32, shape=())
        ln = ti.field(dtype=ti.f32, shape=())
        ln2 = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            d[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            ln[None] = length(vec3(3.0, 4.0, 0.0))
            ln2[None] = length_squared(vec3(3.0, 4.0, 0.0))

        test_kernel()
        assert abs(d[None] - 12.0) < 1e-6
        assert abs(ln[None] - 5.0) < 1e-6
        assert abs(ln2[None] - 25.0) < 1e-6

    def test_cross_is_orthogonal(self):
        """Test that a x b is orthogonal to both inputs."""
        from whitted.core.ray import cross, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cross(vec3(1.0, 2.0, 3.0), vec3(-2.0, 0.5, 4.0))

        test_kernel()
        c = result.to_numpy()
        assert abs(np.dot(c, [1.0, 2.0, 3.0])) < 1e-5
        assert abs(np.dot(c, [-2.0, 0.5, 4.0])) < 1e-5

    def test_cross_right_handed(self):
        """Test x cross y is z."""
        from whitted.core.ray import cross, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 1.0) < 1e-6

    @pytest.mark.parametrize(
        "v",
        [(3.0, 4.0, 0.0), (0.0, 0.0, -7.5), (1e-3, 2e-3, -3e-3), (10.0, -20.0, 30.0)],
    )
    def test_normalize_unit_length(self, v):
        """Test normalize returns a unit vector with the same direction."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32, y: ti.f32, z: ti.f32):
            result[None] = normalize(vec3(x, y, z))

        test_kernel(*v)
        r = result.to_numpy().astype(np.float64)
        assert abs(np.linalg.norm(r) - 1.0) < 1e-5
        expected = np.array(v) / np.linalg.norm(v)
        assert np.allclose(r, expected, atol=1e-5)

    def test_normalize_zero_vector_is_not_finite(self):
        """Test normalizing a zero vector yields non-finite components instead of raising."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        assert not any(math.isfinite(float(r[i])) for i in range(3))

    def test_dot_sign_branches(self):
        """Test positive, negative and zero products take the expected branch."""
        from whitted.core.ray import dot_sign, vec3

        values = ti.field(dtype=ti.f32, shape=3)
        flags = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            v0, p0 = dot_sign(vec3(1.0, 0.0, 0.0), vec3(2.0, 1.0, 0.0))
            v1, p1 = dot_sign(vec3(1.0, 0.0, 0.0), vec3(-2.0, 1.0, 0.0))
            v2, p2 = dot_sign(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))
            values[0] = v0
            values[1] = v1
            values[2] = v2
            flags[0] = p0
            flags[1] = p1
            flags[2] = p2

        test_kernel()
        assert abs(values[0] - 2.0) < 1e-6
        assert abs(values[1] + 2.0) < 1e-6
        assert abs(values[2]) < 1e-6
        assert flags[0] == 1
        assert flags[1] == 0
        # Zero goes to the negative branch
        assert flags[2] == 0

    def test_reflect(self):
        """Test reflect mirrors a direction about the normal."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6


class TestNormalizeNumpy:
    """Tests for the NumPy normalize mirror."""

    def test_unit_length(self):
        from whitted.core.ray import normalize_np

        r = normalize_np([3.0, 0.0, 4.0])
        assert np.allclose(r, [0.6, 0.0, 0.8])

    def test_zero_vector_is_not_finite(self):
        from whitted.core.ray import normalize_np

        r = normalize_np([0.0, 0.0, 0.0])
        assert not np.isfinite(r).any()

    def test_colour_constants(self):
        """Test the shared colour constants."""
        from whitted.core.ray import BLACK, GREY, WHITE

        assert np.allclose(WHITE.to_numpy(), [1.0, 1.0, 1.0])
        assert np.allclose(GREY.to_numpy(), [0.5, 0.5, 0.5])
        assert np.allclose(BLACK.to_numpy(), [0.0, 0.0, 0.0])
